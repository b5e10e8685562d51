"""
app/mappers package marker.
"""

from app.mappers.date_parser import parse_date, to_canonical_date
from app.mappers.entity_reconciler import reconcile_dogs, reconcile_trainers
from app.mappers.session_builder import build_sessions, classify_mode, derive_counters
from app.mappers.submission_encoder import encode_for_submission

__all__ = [
    "build_sessions",
    "classify_mode",
    "derive_counters",
    "encode_for_submission",
    "parse_date",
    "reconcile_dogs",
    "reconcile_trainers",
    "to_canonical_date",
]
