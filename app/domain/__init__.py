"""
app/domain package marker.
"""

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

__all__ = [
    "AUTO_DOG_ID_PREFIX",
    "UNKNOWN_TRAINER_ID",
    "CertificationLevel",
    "Dog",
    "SampleResult",
    "SessionMode",
    "SessionRecord",
    "Trainer",
]
