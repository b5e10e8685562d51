"""
app/mappers/entity_reconciler.py

Builds the dog and trainer registries from raw sheet rows.
"""

from __future__ import annotations

import uuid
from typing import Any, Iterable, Sequence, TypeVar

from app.domain.k9 import CertificationLevel, Dog, Trainer
from app.mappers.avatars import dog_avatar_url, trainer_avatar_url
from app.mappers.field_normalizer import coerce_number, normalize_keys, resolve_field, resolve_text

_Named = TypeVar("_Named", Dog, Trainer)


def _generated_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


def reconcile_dogs(raw_rows: Iterable[Any]) -> list[Dog]:
    """
    Build Dog entities from raw ``dogs`` table rows.

    Rows without a resolvable name are blank spreadsheet lines and are
    skipped. Rows sharing a name are kept as distinct dogs.
    """

    dogs: list[Dog] = []
    for raw in raw_rows:
        row = normalize_keys(raw)
        name = resolve_text(row, "dog.name")
        if not name:
            continue

        supplied_id = resolve_text(row, "id")
        dogs.append(
            Dog(
                id=supplied_id or _generated_id("d"),
                name=name,
                breed=resolve_text(row, "dog.breed"),
                age=max(0, coerce_number(resolve_field(row, "dog.age", 0))),
                level=CertificationLevel.parse(resolve_field(row, "dog.level")),
                avatar_url=resolve_text(row, "avatar") or dog_avatar_url(name),
            )
        )
    return dogs


def reconcile_trainers(raw_rows: Iterable[Any]) -> list[Trainer]:
    """
    Build Trainer entities from raw ``trainers`` table rows.
    """

    trainers: list[Trainer] = []
    for raw in raw_rows:
        row = normalize_keys(raw)
        name = resolve_text(row, "trainer.name")
        if not name:
            continue

        supplied_id = resolve_text(row, "id")
        trainers.append(
            Trainer(
                id=supplied_id or _generated_id("t"),
                name=name,
                role=resolve_text(row, "trainer.role"),
                avatar_url=resolve_text(row, "avatar") or trainer_avatar_url(name),
            )
        )
    return trainers


def find_by_name(entities: Sequence[_Named], name: str) -> _Named | None:
    """
    Case-insensitive name lookup; the first match wins.
    """

    wanted = name.strip().lower()
    for entity in entities:
        if entity.name.lower() == wanted:
            return entity
    return None


def find_by_id(entities: Sequence[_Named], entity_id: str) -> _Named | None:
    for entity in entities:
        if entity.id == entity_id:
            return entity
    return None


def new_dog(name: str, breed: str = "", age: float = 0) -> Dog:
    """
    Create a dog added through the roster (not from the sheet).
    """

    clean_name = name.strip()
    return Dog(
        id=_generated_id("d"),
        name=clean_name,
        breed=breed.strip(),
        age=max(0, coerce_number(age)),
        level=CertificationLevel.NOVICE,
        avatar_url=dog_avatar_url(clean_name),
    )


def new_trainer(name: str, role: str = "") -> Trainer:
    """
    Create a trainer added through the team roster.
    """

    clean_name = name.strip()
    return Trainer(
        id=_generated_id("t"),
        name=clean_name,
        role=role.strip(),
        avatar_url=trainer_avatar_url(clean_name),
    )
