"""
app/services/rapid_entry_service.py

Rapid session entry: form validation, session construction and the
pending-batch queue used before committing several sessions at once.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from app.domain.k9 import SampleResult, SessionMode, SessionRecord
from app.mappers.date_parser import MIDDAY_HOUR
from app.mappers.session_builder import DEFAULT_REINFORCER, DEFAULT_SCHEDULE, derive_counters

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Training catalogue
# ---------------------------------------------------------------------------

MODULES: tuple[str, ...] = (
    "Módulo Asociación",
    "Módulo Discriminación",
    "Módulo Transición",
    "Módulo Discriminación II",
    "Módulo Aleatorios",
    "Módulo Vacíos",
    "Módulo Asociación II",
)

MODULE_OBJECTIVES: dict[str, tuple[str, ...]] = {
    "Módulo Asociación": ("OCP1", "OCP2", "OCP3", "OCP4"),
    "Módulo Discriminación": tuple(f"OCP{n}" for n in range(1, 10)),
    "Módulo Transición": ("OCP1", "OCP2", "OCP3"),
    "Módulo Discriminación II": ("OCP1",),
    "Módulo Aleatorios": ("OCP1",),
    "Módulo Vacíos": ("OCP1", "OCP2", "OCP3"),
    "Módulo Asociación II": ("OCP1",),
}

RECORD_TYPES: tuple[str, ...] = ("OCP", "10UA", "20UA")
REINFORCERS: tuple[str, ...] = ("Comestible", "Juguete", "Social")
SCHEDULES: tuple[str, ...] = ("Fijo", "Variable")

DEFAULT_ENTRY_RECORD_TYPE = "10UA"


def objectives_for_module(module: str) -> tuple[str, ...]:
    """
    Target odors offered for *module*; empty for an unknown module.
    """
    return MODULE_OBJECTIVES.get(module, ())


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------


class RapidEntryValidationError(ValueError):
    """
    Raised when a rapid entry form is incomplete.
    """


@dataclass(frozen=True)
class RapidEntryForm:
    mode: SessionMode
    dog_id: str
    trainer_id: str
    session_date: date
    reinforcers: tuple[str, ...] = (DEFAULT_REINFORCER,)
    schedule: str = DEFAULT_SCHEDULE
    notes: str = ""
    record_type: str = DEFAULT_ENTRY_RECORD_TYPE
    module: str = MODULES[0]
    target_odor: str = ""
    ua_c: float | None = 0
    ua_i: float | None = 0
    sample_id: str = ""
    position: str = ""
    result: SampleResult | None = None

    def validate(self) -> None:
        """
        Raise RapidEntryValidationError when the form cannot become a session.
        """
        if not self.reinforcers:
            raise RapidEntryValidationError("Select at least one reinforcer.")

        if self.mode is SessionMode.TRAINING:
            if self.ua_c is None or self.ua_i is None:
                raise RapidEntryValidationError("Both UA counts are required for a training session.")
            if self.ua_c < 0 or self.ua_i < 0:
                raise RapidEntryValidationError("UA counts cannot be negative.")
            return

        if not self.sample_id.strip():
            raise RapidEntryValidationError("A sample id is required for an operational session.")
        if self.result is None:
            raise RapidEntryValidationError("Select a result (VP, FP, VN, FN).")


def _session_id() -> str:
    return f"s-{uuid.uuid4().hex[:12]}"


def create_session(form: RapidEntryForm, *, session_id: str | None = None) -> SessionRecord:
    """
    Validate *form* and build the session it describes.

    The picked calendar day is stored at 12:00 UTC, like sheet dates. In
    operational mode the UA fields mirror hits and misses.
    """

    form.validate()
    instant = datetime(
        form.session_date.year,
        form.session_date.month,
        form.session_date.day,
        MIDDAY_HOUR,
        tzinfo=timezone.utc,
    )
    common = dict(
        id=session_id or _session_id(),
        date=instant,
        dog_id=form.dog_id,
        trainer_id=form.trainer_id,
        mode=form.mode,
        reinforcer=", ".join(form.reinforcers),
        schedule=form.schedule or DEFAULT_SCHEDULE,
        notes=form.notes.strip(),
    )

    if form.mode is SessionMode.TRAINING:
        ua_c = form.ua_c or 0
        ua_i = form.ua_i or 0
        hits, misses, false_positives = derive_counters(form.mode, ua_c=ua_c, ua_i=ua_i)
        return SessionRecord(
            **common,
            hits=hits,
            misses=misses,
            false_positives=false_positives,
            ua_c=ua_c,
            ua_i=ua_i,
            record_type=form.record_type,
            module=form.module,
            target_odor=form.target_odor or next(iter(objectives_for_module(form.module)), ""),
        )

    hits, misses, false_positives = derive_counters(form.mode, result=form.result)
    return SessionRecord(
        **common,
        hits=hits,
        misses=misses,
        false_positives=false_positives,
        ua_c=hits,
        ua_i=misses,
        sample_id=form.sample_id.strip(),
        position=form.position.strip(),
        result=form.result,
    )


# ---------------------------------------------------------------------------
# Pending batch
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QueuedEntry:
    temp_id: str
    form: RapidEntryForm


@dataclass
class RapidEntryQueue:
    """
    Sessions staged for a single batch submission.
    """

    entries: list[QueuedEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, form: RapidEntryForm) -> QueuedEntry:
        form.validate()
        entry = QueuedEntry(temp_id=uuid.uuid4().hex, form=form)
        self.entries.append(entry)
        return entry

    def remove(self, temp_id: str) -> bool:
        remaining = [entry for entry in self.entries if entry.temp_id != temp_id]
        removed = len(remaining) != len(self.entries)
        self.entries = remaining
        return removed

    def commit(self) -> list[SessionRecord]:
        """
        Turn every staged form into a session with a fresh id and empty the queue.
        """
        sessions = [create_session(entry.form) for entry in self.entries]
        self.entries = []
        logger.info("Committed rapid entry batch size=%s", len(sessions))
        return sessions
