"""
app/mappers/submission_encoder.py

Encodes SessionRecord objects into the positional rows the spreadsheet
``save_raw_sessions`` action appends.

Column order (A → P) is a fixed contract with the sheet:

    0  registration date       8  UA correct        (training only)
    1  session date DD/MM/YYYY 9  UA incorrect      (training only)
    2  dog name                10 reinforcer
    3  trainer name            11 schedule
    4  mode label              12 sample id         (operational only)
    5  record type (training)  13 position          (operational only)
    6  module      (training)  14 result            (operational only)
    7  target odor (training)  15 notes

Columns belonging to the other mode are written as empty strings.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Sequence

from app.domain.k9 import Dog, SessionMode, SessionRecord, Trainer
from app.mappers.date_parser import to_canonical_date
from app.mappers.entity_reconciler import find_by_id
from app.mappers.session_builder import DEFAULT_RECORD_TYPE, DEFAULT_REINFORCER, DEFAULT_SCHEDULE

UNRESOLVED_NAME = "Desconocido"
ROW_WIDTH = 16

MODE_LABELS: dict[SessionMode, str] = {
    SessionMode.TRAINING: "Entrenamiento",
    SessionMode.OPERATIONAL: "Muestras",
}

_CANONICAL_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def localize_session_date(value: datetime | str) -> str:
    """
    Reformat a canonical ``YYYY-MM-DD`` date as ``DD/MM/YYYY``.

    Datetimes are reduced to their UTC calendar day first. Strings not in
    the exact canonical shape are returned unchanged.
    """

    text = to_canonical_date(value) if isinstance(value, datetime) else str(value)
    match = _CANONICAL_DATE.match(text)
    if not match:
        return text
    year, month, day = match.groups()
    return f"{day}/{month}/{year}"


def format_registration_date(value: datetime) -> str:
    # Spanish short date of the host calendar day, without zero padding.
    local = value.astimezone()
    return f"{local.day}/{local.month}/{local.year}"


def _name_for(entity_id: str, registry: Sequence[Dog] | Sequence[Trainer]) -> str:
    entity = find_by_id(registry, entity_id)
    return entity.name if entity is not None and entity.name else UNRESOLVED_NAME


def encode_session(
    session: SessionRecord,
    dogs: Sequence[Dog],
    trainers: Sequence[Trainer],
    *,
    registered_on: str,
) -> list[Any]:
    is_training = session.mode is SessionMode.TRAINING

    def training(value: Any) -> Any:
        return value if is_training else ""

    def operational(value: Any) -> Any:
        return "" if is_training else value

    row: list[Any] = [
        registered_on,
        localize_session_date(session.date),
        _name_for(session.dog_id, dogs),
        _name_for(session.trainer_id, trainers),
        MODE_LABELS[session.mode],
        training(session.record_type or DEFAULT_RECORD_TYPE),
        training(session.module),
        training(session.target_odor),
        training(session.ua_c),
        training(session.ua_i),
        session.reinforcer or DEFAULT_REINFORCER,
        session.schedule or DEFAULT_SCHEDULE,
        operational(session.sample_id),
        operational(session.position),
        operational(session.result.value if session.result is not None else ""),
        session.notes,
    ]
    return row


def encode_for_submission(
    sessions: Sequence[SessionRecord],
    dogs: Sequence[Dog],
    trainers: Sequence[Trainer],
    *,
    registered_at: datetime | None = None,
) -> list[list[Any]]:
    """
    Encode *sessions* as 16-column sheet rows, one row per session, in order.

    Dog and trainer names are looked up by id in the given registries;
    unresolved ids are written as ``Desconocido``.
    """

    registered = registered_at if registered_at is not None else datetime.now().astimezone()
    registered_on = format_registration_date(registered)
    return [
        encode_session(session, dogs, trainers, registered_on=registered_on)
        for session in sessions
    ]
