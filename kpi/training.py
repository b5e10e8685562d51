"""
kpi/training.py

Training-mode opportunity formula.

Formulas
--------
successes = UA correct  (ua_c)
failures  = UA incorrect (ua_i)

Every learning unit is one opportunity; false positives do not exist in
training sessions.
"""

from __future__ import annotations

from app.domain.k9 import SessionRecord
from kpi.base import BaseOpportunityFormula, Tally


class TrainingOpportunityFormula(BaseOpportunityFormula):
    def tally(self, session: SessionRecord) -> Tally:
        return Tally(successes=session.ua_c, failures=session.ua_i)
