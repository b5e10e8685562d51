"""
kpi/operational.py

Operational (sample detection) opportunity formula.

Formulas
--------
One opportunity per session carrying a classified result.

success         = VP or VN
failure         = FP or FN
false positive  = FP

Sessions without a result contribute nothing.
"""

from __future__ import annotations

from app.domain.k9 import SampleResult, SessionRecord
from kpi.base import BaseOpportunityFormula, Tally


class OperationalOpportunityFormula(BaseOpportunityFormula):
    def tally(self, session: SessionRecord) -> Tally:
        result = session.result
        if result is None:
            return Tally()
        if result.is_success:
            return Tally(successes=1)
        return Tally(failures=1, false_positives=1 if result is SampleResult.FP else 0)

