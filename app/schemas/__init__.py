"""
app/schemas package marker.
"""

from app.schemas.dashboard import (
    CommandResponse,
    DashboardMetricsResponse,
    RapidEntryRequest,
    RefreshResponse,
    SessionBatchRequest,
)
from app.schemas.roster import (
    DogProfileResponse,
    DogResponse,
    DogRosterEntryResponse,
    NewDogRequest,
    NewTrainerRequest,
    SessionResponse,
    TrainerProfileResponse,
    TrainerResponse,
    TrainerStandingResponse,
)
from app.schemas.sheets import DogPayload, SheetsPayload, TrainerPayload

__all__ = [
    "CommandResponse",
    "DashboardMetricsResponse",
    "DogPayload",
    "DogProfileResponse",
    "DogResponse",
    "DogRosterEntryResponse",
    "NewDogRequest",
    "NewTrainerRequest",
    "RapidEntryRequest",
    "RefreshResponse",
    "SessionBatchRequest",
    "SessionResponse",
    "SheetsPayload",
    "TrainerPayload",
    "TrainerProfileResponse",
    "TrainerResponse",
    "TrainerStandingResponse",
]
