"""
app/mappers/field_normalizer.py

Key normalization and alias resolution for loosely-structured sheet rows.

Spreadsheet headers arrive in mixed case, with stray whitespace, and in
either Spanish or English. Every row is passed through :func:`normalize_keys`
before any canonical field is read, and each logical field is then looked up
through an ordered alias list in :data:`FIELD_ALIASES`.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "avatar": ("avatar", "avatarurl"),
    "dog.name": ("name", "nombre", "dogname"),
    "dog.breed": ("breed", "raza"),
    "dog.age": ("age", "edad"),
    "dog.level": ("level", "nivel"),
    "trainer.name": ("name", "nombre", "trainername"),
    "trainer.role": ("role", "rol"),
    "session.dog": ("dogname", "perro", "name", "nombre"),
    "session.date": ("date", "sessiondate", "fecha sesión"),
    "session.trainer": ("trainername", "entrenador"),
    "session.mode": ("mode", "modo"),
    "session.ua_c": ("uac", "ua c"),
    "session.ua_i": ("ual", "uai", "ua incorrectas"),
    "session.result": ("result", "resultado"),
    "session.module": ("module", "modulo"),
    "session.target_odor": ("targetodor", "objetivo"),
    "session.record_type": ("recordtype", "tipo registro"),
    "session.reinforcer": ("reinforcer",),
    "session.schedule": ("schedule",),
    "session.sample_id": ("sampleid",),
    "session.position": ("position",),
    "session.notes": ("notes",),
}

_NON_NUMERIC = re.compile(r"[^0-9.]")


def normalize_key(key: str) -> str:
    return key.strip().lower()


def normalize_keys(row: Any) -> dict[str, Any]:
    """
    Return a copy of *row* with every key trimmed and lower-cased.

    Values are left untouched. Anything that is not a mapping is treated as
    an empty row.
    """

    if not isinstance(row, Mapping):
        return {}
    return {normalize_key(str(key)): value for key, value in row.items()}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def resolve_field(row: Mapping[str, Any], field: str, default: Any = "") -> Any:
    """
    Return the first non-blank value among the aliases of *field*.

    *row* must already be normalized. Unknown logical fields raise KeyError
    so alias typos surface immediately.
    """

    for candidate in FIELD_ALIASES[field]:
        value = row.get(candidate)
        if not _is_blank(value):
            return value
    return default


def resolve_text(row: Mapping[str, Any], field: str, default: str = "") -> str:
    """
    Resolve *field* and return it as trimmed text.
    """

    return str(resolve_field(row, field, default)).strip()


def _as_number(text: str) -> float | int:
    try:
        number = float(text)
    except ValueError:
        return 0
    if number != number or number in (float("inf"), float("-inf")):
        return 0
    return int(number) if number.is_integer() else number


def clean_number(value: Any) -> float | int:
    """
    Coerce a counter-like cell to a number.

    Every character other than digits and the decimal point is stripped
    first, so ``"8 UA"`` reads as 8. Unparseable values collapse to 0.
    """

    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return _as_number(str(value))
    return _as_number(_NON_NUMERIC.sub("", str(value or "")))


def coerce_number(value: Any) -> float | int:
    """
    Plain numeric coercion; 0 when the value is absent or unparseable.
    """

    if isinstance(value, bool) or value is None:
        return 0
    return _as_number(str(value).strip())
