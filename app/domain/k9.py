"""
app/domain/k9.py

Domain models for the K9 training-record dashboard.

Dogs and trainers are referenced by sessions through weak string ids; there
are no back-references. Session membership is computed on demand by
filtering the session set on ``dog_id`` / ``trainer_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

UNKNOWN_TRAINER_ID = "unknown"
"""Sentinel trainer id for sessions naming a trainer absent from the registry."""

AUTO_DOG_ID_PREFIX = "d-auto-"
"""Id prefix of dogs created on the fly while building sessions."""


class CertificationLevel(str, Enum):
    NOVICE = "Novice"
    CERTIFIED = "Certified"
    MASTER = "Master"
    RETIRED = "Retired"

    @classmethod
    def parse(cls, raw: object) -> "CertificationLevel":
        """
        Resolve a raw spreadsheet value; blank or unknown values are Novice.
        """

        text = str(raw or "").strip().lower()
        for level in cls:
            if level.value.lower() == text:
                return level
        return cls.NOVICE


class SessionMode(str, Enum):
    TRAINING = "Training"
    OPERATIONAL = "Operational"


class SampleResult(str, Enum):
    """
    Outcome of one operational detection trial.
    """

    VP = "VP"  # true positive
    FP = "FP"  # false positive
    VN = "VN"  # true negative
    FN = "FN"  # false negative

    @classmethod
    def parse(cls, raw: object) -> "SampleResult | None":
        text = str(raw or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return None

    @property
    def is_success(self) -> bool:
        return self in (SampleResult.VP, SampleResult.VN)


@dataclass(frozen=True)
class Dog:
    id: str
    name: str
    breed: str
    age: float
    level: CertificationLevel
    avatar_url: str
    handler_id: str = ""


@dataclass(frozen=True)
class Trainer:
    id: str
    name: str
    role: str
    avatar_url: str


@dataclass(frozen=True)
class SessionRecord:
    """
    One canonical training or detection session.

    Training sessions populate ``record_type``, ``module``, ``target_odor``,
    ``ua_c`` and ``ua_i``; operational sessions populate ``sample_id``,
    ``position`` and ``result``. ``hits``, ``misses`` and
    ``false_positives`` are always present and ``hits + misses`` is the
    opportunity count of the record in either mode.
    """

    id: str
    date: datetime
    dog_id: str
    trainer_id: str
    mode: SessionMode
    hits: float
    misses: float
    false_positives: int
    ua_c: float = 0
    ua_i: float = 0
    record_type: str = ""
    module: str = ""
    target_odor: str = ""
    sample_id: str = ""
    position: str = ""
    result: SampleResult | None = None
    reinforcer: str = "Comestible"
    schedule: str = "Fijo"
    notes: str = ""
