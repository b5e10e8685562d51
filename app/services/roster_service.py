"""
app/services/roster_service.py

Per-dog and per-trainer views over the session set.

Dog views are mode-specific (training or operational sessions only) and
use the same opportunity formulas as the dashboard. Trainer views span both
modes and count learning units (UA correct / UA incorrect), which rapid
entry mirrors from hits and misses for operational sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Sequence

from app.domain.k9 import Dog, SessionMode, SessionRecord, Trainer
from app.services.metrics_service import DailyStat, round_half_up
from app.services.rapid_entry_service import MODULES
from kpi.base import Tally
from kpi.registry import formula_for_mode

OPERATIONAL_GROUP_LABEL = "Muestras"
GENERAL_OBJECTIVE_LABEL = "General"
TRAINER_CHART_DAYS = 10

_EFFICIENCY_BANDS: tuple[tuple[float, str], ...] = (
    (90, "Excelente"),
    (80, "Muy Buena"),
    (70, "Buena"),
)


# ---------------------------------------------------------------------------
# Dogs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DogRosterEntry:
    dog: Dog
    total_sessions: int
    primary_metric: int
    """Training: distinct modules worked. Operational: false positives."""
    total_successes: float
    accuracy: float


@dataclass(frozen=True)
class HistoryGroup:
    """
    All work on one (module, objective) pair.
    """

    module: str
    objective: str
    first_date: datetime
    sessions: tuple[SessionRecord, ...]
    successes: float
    accuracy: float


@dataclass(frozen=True)
class DogProfile:
    dog: Dog
    mode: SessionMode
    sessions: tuple[SessionRecord, ...]
    unique_modules: int
    progress_percent: int
    total_successes: float
    current: HistoryGroup | None = None
    previous: list[HistoryGroup] = field(default_factory=list)


def sessions_for_dog(dog_id: str, sessions: Sequence[SessionRecord], mode: SessionMode) -> list[SessionRecord]:
    return [session for session in sessions if session.dog_id == dog_id and session.mode is mode]


def _unique_modules(sessions: Sequence[SessionRecord]) -> int:
    return len({session.module for session in sessions if session.module})


def dog_roster(dogs: Sequence[Dog], sessions: Sequence[SessionRecord], mode: SessionMode) -> list[DogRosterEntry]:
    """
    One entry per dog with its mode-specific totals, sorted by name.
    """
    formula = formula_for_mode(mode)
    entries: list[DogRosterEntry] = []
    for dog in dogs:
        owned = sessions_for_dog(dog.id, sessions, mode)
        tally = formula.tally_all(owned)
        primary = _unique_modules(owned) if mode is SessionMode.TRAINING else tally.false_positives
        entries.append(
            DogRosterEntry(
                dog=dog,
                total_sessions=len(owned),
                primary_metric=primary,
                total_successes=tally.successes,
                accuracy=tally.accuracy,
            )
        )
    return sorted(entries, key=lambda entry: entry.dog.name.casefold())


def history_groups(sessions: Sequence[SessionRecord], mode: SessionMode) -> list[HistoryGroup]:
    """
    Group sessions by (module, objective), oldest group first.

    Operational sessions have no module and group under ``Muestras``; the
    objective falls back from target odor to sample id to ``General``.
    """
    formula = formula_for_mode(mode)
    ordered = sorted(sessions, key=lambda session: session.date)
    grouped: dict[tuple[str, str], list[SessionRecord]] = {}
    for session in ordered:
        key = (
            session.module or OPERATIONAL_GROUP_LABEL,
            session.target_odor or session.sample_id or GENERAL_OBJECTIVE_LABEL,
        )
        grouped.setdefault(key, []).append(session)

    groups: list[HistoryGroup] = []
    for (module, objective), members in grouped.items():
        tally = formula.tally_all(members)
        groups.append(
            HistoryGroup(
                module=module,
                objective=objective,
                first_date=members[0].date,
                sessions=tuple(members),
                successes=tally.successes,
                accuracy=tally.accuracy,
            )
        )
    # dict preserves first-seen order, which is already first-date order
    return groups


def dog_profile(dog: Dog, sessions: Sequence[SessionRecord], mode: SessionMode) -> DogProfile:
    owned = sessions_for_dog(dog.id, sessions, mode)
    unique_modules = _unique_modules(owned)
    progress = min(100, int(round_half_up(unique_modules / len(MODULES) * 100)))
    groups = history_groups(owned, mode)

    return DogProfile(
        dog=dog,
        mode=mode,
        sessions=tuple(owned),
        unique_modules=unique_modules,
        progress_percent=progress,
        total_successes=formula_for_mode(mode).tally_all(owned).successes,
        current=groups[-1] if groups else None,
        previous=groups[:-1],
    )


# ---------------------------------------------------------------------------
# Trainers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrainerStanding:
    trainer: Trainer
    total_sessions: int
    success_rate: float


@dataclass(frozen=True)
class TrainerProfile:
    trainer: Trainer
    total_sessions: int
    total_successes: float
    success_rate: float
    unique_dogs: int
    average_per_session: float
    average_per_day: float
    efficiency: str
    daily: list[DailyStat] = field(default_factory=list)


def _unit_tally(sessions: Sequence[SessionRecord]) -> Tally:
    # learning units, regardless of session mode
    return formula_for_mode(SessionMode.TRAINING).tally_all(sessions)


def efficiency_label(success_rate: float) -> str:
    for threshold, label in _EFFICIENCY_BANDS:
        if success_rate >= threshold:
            return label
    return "Regular"


def team_ranking(trainers: Sequence[Trainer], sessions: Sequence[SessionRecord]) -> list[TrainerStanding]:
    """
    Trainers by success rate, best first; ties keep registry order.
    """
    standings = []
    for trainer in trainers:
        owned = [session for session in sessions if session.trainer_id == trainer.id]
        standings.append(
            TrainerStanding(
                trainer=trainer,
                total_sessions=len(owned),
                success_rate=_unit_tally(owned).accuracy,
            )
        )
    return sorted(standings, key=lambda standing: standing.success_rate, reverse=True)


def trainer_profile(trainer: Trainer, sessions: Sequence[SessionRecord]) -> TrainerProfile:
    owned = [session for session in sessions if session.trainer_id == trainer.id]
    tally = _unit_tally(owned)

    by_day: dict[date, Tally] = {}
    for session in owned:
        day = session.date.astimezone(timezone.utc).date()
        by_day[day] = by_day.get(day, Tally()) + _unit_tally([session])

    daily = [
        DailyStat(
            date=day,
            accuracy=int(round_half_up(day_tally.accuracy)),
            successes=day_tally.successes,
            opportunities=day_tally.opportunities,
        )
        for day, day_tally in sorted(by_day.items())
    ][-TRAINER_CHART_DAYS:]

    return TrainerProfile(
        trainer=trainer,
        total_sessions=len(owned),
        total_successes=tally.successes,
        success_rate=tally.accuracy,
        unique_dogs=len({session.dog_id for session in owned}),
        average_per_session=tally.successes / len(owned) if owned else 0.0,
        average_per_day=tally.successes / len(by_day) if by_day else 0.0,
        efficiency=efficiency_label(tally.accuracy),
        daily=daily,
    )
