"""
app/services/metrics_service.py

Deterministic dashboard metrics engine.

All calculations operate on an in-memory session collection already loaded
from the spreadsheet store. No I/O happens here; every method is a pure
function of its inputs, so recomputing over the same snapshot yields equal
results.

Definitions
-----------
Opportunities   Training: UA correct + UA incorrect.
                Operational: one per session with a VP/FP/VN/FN result.
Accuracy        successes / opportunities * 100 (0 with no opportunities).
Secondary       Training: average successes per session (one decimal).
                Operational: number of false positives.
Rolling window  The 7 calendar days (UTC) ending on the date of the most
                recent session in the set, or today for an empty set.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence, Union

from app.domain.k9 import Dog, SessionMode, SessionRecord, Trainer
from kpi.base import Tally
from kpi.registry import formula_for_mode

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7
DEFAULT_TOP_N = 5

Entity = Union[Dog, Trainer]


# ---------------------------------------------------------------------------
# Output dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KPIResult:
    """
    One headline dashboard figure.
    """

    metric: str
    """Metric key (e.g. ``"global_accuracy"``)."""

    value: float
    """Computed value; never None, empty inputs resolve to 0."""

    unit: str
    """Unit of measurement (``"percent"``, ``"per_session"``, ``"count"``)."""


@dataclass(frozen=True)
class DateWindow:
    """
    Inclusive range of calendar days (UTC).
    """

    start: date
    end: date

    def days(self) -> list[date]:
        span = (self.end - self.start).days
        return [self.start + timedelta(days=offset) for offset in range(span + 1)]

    def contains(self, instant: datetime) -> bool:
        day = instant.astimezone(timezone.utc).date()
        return self.start <= day <= self.end


@dataclass(frozen=True)
class DailyStat:
    date: date
    accuracy: int
    successes: float = 0
    opportunities: float = 0


@dataclass(frozen=True)
class EntityPerformance:
    """
    Window-restricted performance of one dog or trainer.
    """

    entity_id: str
    name: str
    avatar_url: str
    accuracy: float
    session_count: int


@dataclass(frozen=True)
class DashboardMetrics:
    mode: SessionMode
    total_sessions: int
    global_accuracy: KPIResult
    secondary_metric: KPIResult
    active_dogs: int
    window: DateWindow
    window_volume: int
    daily_accuracy: list[DailyStat] = field(default_factory=list)
    dog_performance: list[EntityPerformance] = field(default_factory=list)
    top_dogs: list[EntityPerformance] = field(default_factory=list)
    trainer_performance: list[EntityPerformance] = field(default_factory=list)
    top_trainers: list[EntityPerformance] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round like a spreadsheet does (0.5 goes up), not banker's rounding.
    """
    if digits == 0:
        return float(math.floor(value + 0.5))
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class MetricsService:
    """
    Stateless dashboard metrics calculator.

    Usage::

        service = MetricsService()
        metrics = service.summarize(snapshot.sessions, snapshot.dogs, SessionMode.TRAINING)
        print(metrics.global_accuracy.value)
    """

    def __init__(self, *, window_days: int = DEFAULT_WINDOW_DAYS, top_n: int = DEFAULT_TOP_N) -> None:
        self._window_days = max(1, window_days)
        self._top_n = max(1, top_n)

    @staticmethod
    def filter_by_mode(sessions: Iterable[SessionRecord], mode: SessionMode) -> list[SessionRecord]:
        return [session for session in sessions if session.mode is mode]

    # ------------------------------------------------------------------
    # Headline figures
    # ------------------------------------------------------------------

    def global_accuracy(self, sessions: Sequence[SessionRecord], mode: SessionMode) -> KPIResult:
        """
        Accuracy over every opportunity in *sessions*.

        Returns 0.0 when there are no opportunities at all.
        """
        tally = formula_for_mode(mode).tally_all(sessions)
        logger.debug(
            "Global accuracy mode=%s successes=%s failures=%s",
            mode.value,
            tally.successes,
            tally.failures,
        )
        return KPIResult(metric="global_accuracy", value=tally.accuracy, unit="percent")

    def secondary_metric(self, sessions: Sequence[SessionRecord], mode: SessionMode) -> KPIResult:
        tally = formula_for_mode(mode).tally_all(sessions)
        if mode is SessionMode.TRAINING:
            average = tally.successes / len(sessions) if sessions else 0.0
            return KPIResult(
                metric="average_successes",
                value=round_half_up(average, 1),
                unit="per_session",
            )
        if mode is SessionMode.OPERATIONAL:
            return KPIResult(
                metric="false_positives",
                value=float(tally.false_positives),
                unit="count",
            )
        raise ValueError(f"Unsupported session mode: {mode!r}")

    @staticmethod
    def active_dog_count(sessions: Iterable[SessionRecord]) -> int:
        return len({session.dog_id for session in sessions})

    # ------------------------------------------------------------------
    # Rolling window
    # ------------------------------------------------------------------

    def rolling_window(
        self,
        sessions: Sequence[SessionRecord],
        *,
        now: datetime | None = None,
    ) -> DateWindow:
        """
        Window of ``window_days`` calendar days ending at the latest session.
        """
        if sessions:
            anchor = max(session.date for session in sessions)
        else:
            anchor = now if now is not None else datetime.now(tz=timezone.utc)
        end = anchor.astimezone(timezone.utc).date()
        return DateWindow(start=end - timedelta(days=self._window_days - 1), end=end)

    @staticmethod
    def sessions_in_window(sessions: Iterable[SessionRecord], window: DateWindow) -> list[SessionRecord]:
        return [session for session in sessions if window.contains(session.date)]

    def daily_accuracy(
        self,
        sessions: Sequence[SessionRecord],
        mode: SessionMode,
        window: DateWindow,
    ) -> list[DailyStat]:
        """
        One accuracy bucket per window day, including days without sessions.
        """
        formula = formula_for_mode(mode)
        buckets: dict[date, Tally] = {day: Tally() for day in window.days()}
        for session in self.sessions_in_window(sessions, window):
            day = session.date.astimezone(timezone.utc).date()
            buckets[day] = buckets[day] + formula.tally(session)

        return [
            DailyStat(
                date=day,
                accuracy=int(round_half_up(tally.accuracy)),
                successes=tally.successes,
                opportunities=tally.opportunities,
            )
            for day, tally in buckets.items()
        ]

    # ------------------------------------------------------------------
    # Per-entity performance
    # ------------------------------------------------------------------

    def entity_performance(
        self,
        sessions: Sequence[SessionRecord],
        entities: Sequence[Entity],
        mode: SessionMode,
        window: DateWindow,
        *,
        key: str = "dog_id",
    ) -> list[EntityPerformance]:
        """
        Window accuracy and volume for each entity, in registry order.

        *key* names the session attribute holding the entity reference
        (``"dog_id"`` or ``"trainer_id"``).
        """
        formula = formula_for_mode(mode)
        windowed = self.sessions_in_window(sessions, window)
        performance: list[EntityPerformance] = []
        for entity in entities:
            owned = [session for session in windowed if getattr(session, key) == entity.id]
            tally = formula.tally_all(owned)
            performance.append(
                EntityPerformance(
                    entity_id=entity.id,
                    name=entity.name,
                    avatar_url=entity.avatar_url,
                    accuracy=tally.accuracy,
                    session_count=len(owned),
                )
            )
        return performance

    def top_performers(
        self,
        performance: Sequence[EntityPerformance],
        limit: int | None = None,
    ) -> list[EntityPerformance]:
        """
        Entities with window activity, best accuracy first.

        The sort is stable, so ties keep registry order.
        """
        active = [item for item in performance if item.session_count > 0]
        ranked = sorted(active, key=lambda item: item.accuracy, reverse=True)
        return ranked[: limit if limit is not None else self._top_n]

    # ------------------------------------------------------------------
    # Dashboard bundle
    # ------------------------------------------------------------------

    def summarize(
        self,
        sessions: Sequence[SessionRecord],
        dogs: Sequence[Dog],
        mode: SessionMode,
        *,
        trainers: Sequence[Trainer] = (),
        now: datetime | None = None,
    ) -> DashboardMetrics:
        """
        Compute every dashboard figure for one mode.
        """
        filtered = self.filter_by_mode(sessions, mode)
        window = self.rolling_window(filtered, now=now)
        dog_performance = self.entity_performance(filtered, dogs, mode, window, key="dog_id")
        trainer_performance = self.entity_performance(
            filtered, trainers, mode, window, key="trainer_id"
        )

        return DashboardMetrics(
            mode=mode,
            total_sessions=len(filtered),
            global_accuracy=self.global_accuracy(filtered, mode),
            secondary_metric=self.secondary_metric(filtered, mode),
            active_dogs=self.active_dog_count(filtered),
            window=window,
            window_volume=len(self.sessions_in_window(filtered, window)),
            daily_accuracy=self.daily_accuracy(filtered, mode, window),
            dog_performance=dog_performance,
            top_dogs=self.top_performers(dog_performance),
            trainer_performance=trainer_performance,
            top_trainers=self.top_performers(trainer_performance),
        )
