"""
app/schemas/sheets.py

Wire models for the spreadsheet web-app endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.k9 import Dog, Trainer


class SheetsPayload(BaseModel):
    """
    Body returned by the fetch-all call.

    Each table is a list of free-form row objects. A table that is missing or
    is not a list is ``None`` (absent), which ingestion treats as empty.
    """

    model_config = ConfigDict(extra="ignore")

    dogs: list[Any] | None = None
    trainers: list[Any] | None = None
    sessions: list[Any] | None = None

    @field_validator("dogs", "trainers", "sessions", mode="before")
    @classmethod
    def _drop_non_list_tables(cls, value: Any) -> list[Any] | None:
        if isinstance(value, list):
            return value
        return None


class DogPayload(BaseModel):
    """
    ``addDog`` payload, in the sheet's camelCase column names.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    breed: str = ""
    age: float = Field(default=0, ge=0)
    level: str = "Novice"
    handler_id: str = Field(default="", alias="handlerId")
    avatar_url: str = Field(default="", alias="avatarUrl")

    @classmethod
    def from_dog(cls, dog: Dog) -> "DogPayload":
        return cls(
            id=dog.id,
            name=dog.name,
            breed=dog.breed,
            age=dog.age,
            level=dog.level.value,
            handler_id=dog.handler_id,
            avatar_url=dog.avatar_url,
        )


class TrainerPayload(BaseModel):
    """
    ``addTrainer`` payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    role: str = ""
    avatar_url: str = Field(default="", alias="avatarUrl")

    @classmethod
    def from_trainer(cls, trainer: Trainer) -> "TrainerPayload":
        return cls(id=trainer.id, name=trainer.name, role=trainer.role, avatar_url=trainer.avatar_url)
