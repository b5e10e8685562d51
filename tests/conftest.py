"""
Shared fixtures for the K9 dashboard test suite.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from app.domain.k9 import CertificationLevel, Dog, SampleResult, SessionMode, SessionRecord, Trainer
from app.mappers.session_builder import derive_counters


def _utc(year: int, month: int, day: int, hour: int = 12) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture()
def utc() -> Callable[..., datetime]:
    return _utc


@pytest.fixture()
def make_dog() -> Callable[..., Dog]:
    def factory(dog_id: str, name: str, **overrides: Any) -> Dog:
        values = dict(
            id=dog_id,
            name=name,
            breed="Malinois",
            age=3,
            level=CertificationLevel.NOVICE,
            avatar_url=f"https://example.test/{dog_id}.svg",
        )
        values.update(overrides)
        return Dog(**values)

    return factory


@pytest.fixture()
def make_trainer() -> Callable[..., Trainer]:
    def factory(trainer_id: str, name: str, role: str = "Guía") -> Trainer:
        return Trainer(id=trainer_id, name=name, role=role, avatar_url=f"https://example.test/{trainer_id}.svg")

    return factory


@pytest.fixture()
def make_session() -> Callable[..., SessionRecord]:
    """
    Build a consistent SessionRecord; counters are derived from the inputs.
    """

    def factory(
        session_id: str,
        when: datetime,
        *,
        dog_id: str = "d1",
        trainer_id: str = "t1",
        mode: SessionMode = SessionMode.TRAINING,
        ua_c: float = 0,
        ua_i: float = 0,
        result: SampleResult | None = None,
        **overrides: Any,
    ) -> SessionRecord:
        hits, misses, false_positives = derive_counters(mode, ua_c=ua_c, ua_i=ua_i, result=result)
        values: dict[str, Any] = dict(
            id=session_id,
            date=when,
            dog_id=dog_id,
            trainer_id=trainer_id,
            mode=mode,
            hits=hits,
            misses=misses,
            false_positives=false_positives,
            ua_c=ua_c,
            ua_i=ua_i,
            result=result,
        )
        values.update(overrides)
        return SessionRecord(**values)

    return factory
