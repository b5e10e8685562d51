"""
app/mappers/date_parser.py

Session date normalization.

Sheet dates arrive either as already-normalized ISO instants or as
``DD/MM/YYYY`` strings typed by hand. Slash dates are pinned to 12:00 UTC so
the calendar day survives rendering in any local timezone between UTC-12
and UTC+11. The parser never raises: anything unrecognized becomes "now".
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

MIDDAY_HOUR = 12

_LEADING_DIGITS = re.compile(r"\s*([0-9]+)")


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(tz=timezone.utc)


def _parse_iso_instant(value: str) -> datetime | None:
    normalized = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_day_month_year(value: str) -> datetime | None:
    # each part contributes its leading digits, so "15/03/2024 10:00" is 15 March 2024
    parts = value.split("/")
    if len(parts) != 3:
        return None
    matches = [_LEADING_DIGITS.match(part) for part in parts]
    if not all(matches):
        return None
    digits = [match.group(1) for match in matches]
    try:
        day, month, year = (int(text) for text in digits)
    except ValueError:
        return None
    if len(digits[2]) <= 2:
        year += 2000
    try:
        return datetime(year, month, day, MIDDAY_HOUR, tzinfo=timezone.utc)
    except (ValueError, OverflowError):
        return None


def parse_date(raw: object, *, now: datetime | None = None) -> datetime:
    """
    Normalize a raw sheet date into a UTC-aware instant.

    - blank → *now*
    - contains a ``T`` time marker → the ISO instant as given
    - ``D/M/Y`` (two- or four-digit year) → that day at 12:00 UTC
    - anything else → *now*
    """

    value = str(raw if raw is not None else "").strip()
    if not value:
        return _now(now)

    if "T" in value:
        return _parse_iso_instant(value) or _now(now)

    if "/" in value:
        return _parse_day_month_year(value) or _now(now)

    return _now(now)


def to_canonical_date(value: datetime) -> str:
    """
    Return the UTC calendar date of *value* as ``YYYY-MM-DD``.
    """

    return value.astimezone(timezone.utc).strftime("%Y-%m-%d")
