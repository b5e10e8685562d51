"""
kpi/base.py

Abstract base class for mode-specific opportunity formulas.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from app.domain.k9 import SessionRecord


@dataclass(frozen=True)
class Tally:
    """
    Opportunity counts accumulated over one or more sessions.
    """

    successes: float = 0
    failures: float = 0
    false_positives: int = 0

    @property
    def opportunities(self) -> float:
        return self.successes + self.failures

    @property
    def accuracy(self) -> float:
        """
        successes / opportunities * 100, or 0.0 with no opportunities.
        """
        if self.opportunities <= 0:
            return 0.0
        return self.successes / self.opportunities * 100

    def __add__(self, other: "Tally") -> "Tally":
        return Tally(
            successes=self.successes + other.successes,
            failures=self.failures + other.failures,
            false_positives=self.false_positives + other.false_positives,
        )


class BaseOpportunityFormula(ABC):
    """
    Contract for counting graded opportunities in a session.

    No I/O, no logging, and no side effects are permitted inside
    :meth:`tally`.
    """

    @abstractmethod
    def tally(self, session: SessionRecord) -> Tally:
        """
        Return the opportunities contributed by one session.
        """

    def tally_all(self, sessions: Iterable[SessionRecord]) -> Tally:
        total = Tally()
        for session in sessions:
            total = total + self.tally(session)
        return total
