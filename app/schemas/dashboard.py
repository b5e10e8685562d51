"""
app/schemas/dashboard.py

Schemas for dashboard metrics, rapid session entry and write commands.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.domain.k9 import SampleResult, SessionMode
from app.services.rapid_entry_service import DEFAULT_ENTRY_RECORD_TYPE, MODULES, RapidEntryForm


class KPIResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metric: str
    value: float
    unit: str


class DateWindowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: date
    end: date


class DailyStatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    accuracy: int = Field(..., ge=0, le=100)
    successes: float
    opportunities: float


class EntityPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entity_id: str
    name: str
    avatar_url: str
    accuracy: float
    session_count: int = Field(..., ge=0)


class DashboardMetricsResponse(BaseModel):
    """
    API response model for one dashboard mode.
    """

    model_config = ConfigDict(from_attributes=True)

    mode: SessionMode
    total_sessions: int = Field(..., ge=0)
    global_accuracy: KPIResultResponse
    secondary_metric: KPIResultResponse
    active_dogs: int = Field(..., ge=0)
    window: DateWindowResponse
    window_volume: int = Field(..., ge=0)
    daily_accuracy: list[DailyStatResponse] = Field(default_factory=list)
    dog_performance: list[EntityPerformanceResponse] = Field(default_factory=list)
    top_dogs: list[EntityPerformanceResponse] = Field(default_factory=list)
    trainer_performance: list[EntityPerformanceResponse] = Field(default_factory=list)
    top_trainers: list[EntityPerformanceResponse] = Field(default_factory=list)


class RefreshResponse(BaseModel):
    refreshed: bool
    dogs: int = Field(..., ge=0)
    trainers: int = Field(..., ge=0)
    sessions: int = Field(..., ge=0)


class CommandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ok: bool
    message: str = ""
    count: int = Field(default=0, ge=0)


class RapidEntryRequest(BaseModel):
    """
    One session as entered in the rapid entry form.
    """

    mode: SessionMode
    dog_id: str = Field(..., min_length=1)
    trainer_id: str = Field(..., min_length=1)
    session_date: date
    reinforcers: list[str] = Field(default_factory=lambda: ["Comestible"])
    schedule: str = "Fijo"
    notes: str = ""
    record_type: str = DEFAULT_ENTRY_RECORD_TYPE
    module: str = MODULES[0]
    target_odor: str = ""
    ua_c: float | None = 0
    ua_i: float | None = 0
    sample_id: str = ""
    position: str = ""
    result: SampleResult | None = None

    def to_form(self) -> RapidEntryForm:
        return RapidEntryForm(
            mode=self.mode,
            dog_id=self.dog_id,
            trainer_id=self.trainer_id,
            session_date=self.session_date,
            reinforcers=tuple(self.reinforcers),
            schedule=self.schedule,
            notes=self.notes,
            record_type=self.record_type,
            module=self.module,
            target_odor=self.target_odor,
            ua_c=self.ua_c,
            ua_i=self.ua_i,
            sample_id=self.sample_id,
            position=self.position,
            result=self.result,
        )


class SessionBatchRequest(BaseModel):
    sessions: list[RapidEntryRequest] = Field(..., min_length=1)
