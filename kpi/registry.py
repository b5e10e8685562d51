"""
kpi/registry.py

Session mode → opportunity formula dispatch.
"""

from __future__ import annotations

from app.domain.k9 import SessionMode
from kpi.base import BaseOpportunityFormula
from kpi.operational import OperationalOpportunityFormula
from kpi.training import TrainingOpportunityFormula

_FORMULAS: dict[SessionMode, BaseOpportunityFormula] = {
    SessionMode.TRAINING: TrainingOpportunityFormula(),
    SessionMode.OPERATIONAL: OperationalOpportunityFormula(),
}


def formula_for_mode(mode: SessionMode) -> BaseOpportunityFormula:
    """
    Return the opportunity formula for *mode*.

    Raises ValueError for a mode without a registered formula.
    """

    try:
        return _FORMULAS[SessionMode(mode)]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"No opportunity formula registered for mode {mode!r}.") from exc
