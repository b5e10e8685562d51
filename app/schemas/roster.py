"""
app/schemas/roster.py

Response and request schemas for dogs, trainers and their profiles.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.k9 import CertificationLevel, SampleResult, SessionMode


class DogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    breed: str
    age: float
    level: CertificationLevel
    avatar_url: str
    handler_id: str = ""


class TrainerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str
    avatar_url: str


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: datetime
    dog_id: str
    trainer_id: str
    mode: SessionMode
    hits: float
    misses: float
    false_positives: int
    ua_c: float
    ua_i: float
    record_type: str
    module: str
    target_odor: str
    sample_id: str
    position: str
    result: SampleResult | None = None
    reinforcer: str
    schedule: str
    notes: str


class NewDogRequest(BaseModel):
    name: str = Field(..., min_length=1)
    breed: str = ""
    age: float = Field(default=0, ge=0)


class NewTrainerRequest(BaseModel):
    name: str = Field(..., min_length=1)
    role: str = ""


class DogRosterEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dog: DogResponse
    total_sessions: int = Field(..., ge=0)
    primary_metric: int = Field(..., ge=0)
    total_successes: float
    accuracy: float


class HistoryGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    module: str
    objective: str
    first_date: datetime
    sessions: list[SessionResponse] = Field(default_factory=list)
    successes: float
    accuracy: float


class DogProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dog: DogResponse
    mode: SessionMode
    unique_modules: int
    progress_percent: int = Field(..., ge=0, le=100)
    total_successes: float
    current: HistoryGroupResponse | None = None
    previous: list[HistoryGroupResponse] = Field(default_factory=list)


class TrainerStandingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    trainer: TrainerResponse
    total_sessions: int
    success_rate: float


class TrainerDailyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    accuracy: int


class TrainerProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    trainer: TrainerResponse
    total_sessions: int
    total_successes: float
    success_rate: float
    unique_dogs: int
    average_per_session: float
    average_per_day: float
    efficiency: str
    daily: list[TrainerDailyResponse] = Field(default_factory=list)
