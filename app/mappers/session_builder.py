"""
app/mappers/session_builder.py

Turns raw ``sessions`` sheet rows into canonical SessionRecord objects.

Dog and trainer references are resolved by case-insensitive name. The two
entity kinds are deliberately resolved differently:

- an unknown dog is auto-created and appended to the caller's dog registry
  (the sheet is the source of truth for which dogs are working);
- an unknown trainer resolves to the ``unknown`` sentinel and the trainer
  registry is never modified.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from app.domain.k9 import (
    AUTO_DOG_ID_PREFIX,
    UNKNOWN_TRAINER_ID,
    CertificationLevel,
    Dog,
    SampleResult,
    SessionMode,
    SessionRecord,
    Trainer,
)
from app.mappers.avatars import dog_avatar_url
from app.mappers.date_parser import parse_date
from app.mappers.entity_reconciler import find_by_name
from app.mappers.field_normalizer import clean_number, normalize_keys, resolve_field, resolve_text

logger = logging.getLogger(__name__)

AUTO_DOG_BREED = "Detectado"
DEFAULT_MODE_LABEL = "Entrenamiento"
DEFAULT_TRAINER_NAME = "Unknown"
DEFAULT_RECORD_TYPE = "Libre"
DEFAULT_REINFORCER = "Comestible"
DEFAULT_SCHEDULE = "Fijo"

OPERATIONAL_MODE_TOKENS: tuple[str, ...] = ("muestras", "operational")


def classify_mode(raw_mode: object) -> SessionMode:
    """
    Classify a raw mode label; sample-based labels are Operational.
    """

    text = str(raw_mode or DEFAULT_MODE_LABEL).lower()
    if any(token in text for token in OPERATIONAL_MODE_TOKENS):
        return SessionMode.OPERATIONAL
    return SessionMode.TRAINING


def derive_counters(
    mode: SessionMode,
    *,
    ua_c: float = 0,
    ua_i: float = 0,
    result: SampleResult | None = None,
) -> tuple[float, float, int]:
    """
    Return ``(hits, misses, false_positives)`` for one session.

    Training:    hits = UA correct, misses = UA incorrect, no false positives.
    Operational: VP/VN → 1 hit; FN → 1 miss; FP → 1 miss and 1 false
                 positive; no classified result → all zero.
    """

    if mode is SessionMode.TRAINING:
        return ua_c, ua_i, 0
    if mode is SessionMode.OPERATIONAL:
        if result is None:
            return 0, 0, 0
        if result is SampleResult.VP or result is SampleResult.VN:
            return 1, 0, 0
        if result is SampleResult.FN:
            return 0, 1, 0
        if result is SampleResult.FP:
            return 0, 1, 1
        raise AssertionError(f"Unhandled sample result: {result!r}")
    raise AssertionError(f"Unhandled session mode: {mode!r}")


def _resolve_dog_id(dog_name: str, dog_registry: list[Dog], row_index: int) -> str:
    existing = find_by_name(dog_registry, dog_name)
    if existing is not None:
        return existing.id

    auto_dog = Dog(
        id=f"{AUTO_DOG_ID_PREFIX}{row_index}",
        name=dog_name,
        breed=AUTO_DOG_BREED,
        age=0,
        level=CertificationLevel.NOVICE,
        avatar_url=dog_avatar_url(dog_name),
    )
    dog_registry.append(auto_dog)
    logger.info("Auto-created dog from session row index=%s name=%r", row_index, dog_name)
    return auto_dog.id


def _resolve_trainer_id(trainer_name: str, trainer_registry: Sequence[Trainer]) -> str:
    trainer = find_by_name(trainer_registry, trainer_name)
    return trainer.id if trainer is not None else UNKNOWN_TRAINER_ID


def build_session(
    raw_row: Any,
    row_index: int,
    dog_registry: list[Dog],
    trainer_registry: Sequence[Trainer],
) -> SessionRecord | None:
    """
    Build one session, or return None for a blank row (no dog or no date).
    """

    row = normalize_keys(raw_row)
    dog_name = resolve_text(row, "session.dog")
    raw_date = resolve_text(row, "session.date")
    if not dog_name or not raw_date:
        return None

    dog_id = _resolve_dog_id(dog_name, dog_registry, row_index)
    trainer_name = resolve_text(row, "session.trainer", DEFAULT_TRAINER_NAME)
    trainer_id = _resolve_trainer_id(trainer_name, trainer_registry)

    mode = classify_mode(resolve_field(row, "session.mode", DEFAULT_MODE_LABEL))
    ua_c = clean_number(resolve_field(row, "session.ua_c", 0))
    ua_i = clean_number(resolve_field(row, "session.ua_i", 0))
    result = SampleResult.parse(resolve_field(row, "session.result", None))
    hits, misses, false_positives = derive_counters(mode, ua_c=ua_c, ua_i=ua_i, result=result)

    return SessionRecord(
        id=f"s-{row_index}",
        date=parse_date(raw_date),
        dog_id=dog_id,
        trainer_id=trainer_id,
        mode=mode,
        hits=hits,
        misses=misses,
        false_positives=false_positives,
        ua_c=ua_c,
        ua_i=ua_i,
        record_type=resolve_text(row, "session.record_type", DEFAULT_RECORD_TYPE),
        module=resolve_text(row, "session.module"),
        target_odor=resolve_text(row, "session.target_odor"),
        sample_id=resolve_text(row, "session.sample_id"),
        position=resolve_text(row, "session.position"),
        result=result,
        reinforcer=resolve_text(row, "session.reinforcer", DEFAULT_REINFORCER),
        schedule=resolve_text(row, "session.schedule", DEFAULT_SCHEDULE),
        notes=resolve_text(row, "session.notes"),
    )


def build_sessions(
    raw_rows: Iterable[Any],
    dog_registry: list[Dog],
    trainer_registry: Sequence[Trainer],
) -> list[SessionRecord]:
    """
    Build sessions in input order, dropping blank rows.

    ``dog_registry`` is extended in place with any auto-created dogs.
    """

    sessions: list[SessionRecord] = []
    dropped = 0
    for index, raw_row in enumerate(raw_rows):
        session = build_session(raw_row, index, dog_registry, trainer_registry)
        if session is None:
            dropped += 1
            continue
        sessions.append(session)

    if dropped:
        logger.debug("Dropped %d blank session rows", dropped)
    return sessions
