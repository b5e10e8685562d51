"""
app/api/routers/roster_router.py

Dog and trainer roster endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_controller, get_session_mode
from app.domain.k9 import SessionMode
from app.mappers.entity_reconciler import find_by_id, new_dog, new_trainer
from app.schemas.roster import (
    DogProfileResponse,
    DogResponse,
    DogRosterEntryResponse,
    NewDogRequest,
    NewTrainerRequest,
    TrainerProfileResponse,
    TrainerResponse,
    TrainerStandingResponse,
)
from app.services.dashboard_controller import DashboardController
from app.services.roster_service import dog_profile, dog_roster, team_ranking, trainer_profile

router = APIRouter(tags=["roster"])


# ---------------------------------------------------------------------------
# Dogs
# ---------------------------------------------------------------------------


@router.get("/dogs", response_model=list[DogRosterEntryResponse])
def list_dogs(
    mode: SessionMode = Depends(get_session_mode),
    controller: DashboardController = Depends(get_controller),
) -> list[DogRosterEntryResponse]:
    snapshot = controller.snapshot
    return [
        DogRosterEntryResponse.model_validate(entry)
        for entry in dog_roster(snapshot.dogs, snapshot.sessions, mode)
    ]


@router.post("/dogs", response_model=DogResponse, status_code=status.HTTP_201_CREATED)
def create_dog(
    body: NewDogRequest,
    controller: DashboardController = Depends(get_controller),
) -> DogResponse:
    dog = new_dog(body.name, body.breed, body.age)
    result = controller.add_dog(dog)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.message)
    return DogResponse.model_validate(dog)


@router.get("/dogs/{dog_id}/profile", response_model=DogProfileResponse)
def get_dog_profile(
    dog_id: str,
    mode: SessionMode = Depends(get_session_mode),
    controller: DashboardController = Depends(get_controller),
) -> DogProfileResponse:
    snapshot = controller.snapshot
    dog = find_by_id(snapshot.dogs, dog_id)
    if dog is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Dog '{dog_id}' not found.")
    return DogProfileResponse.model_validate(dog_profile(dog, snapshot.sessions, mode))


# ---------------------------------------------------------------------------
# Trainers
# ---------------------------------------------------------------------------


@router.get("/trainers", response_model=list[TrainerStandingResponse])
def list_trainers(
    controller: DashboardController = Depends(get_controller),
) -> list[TrainerStandingResponse]:
    snapshot = controller.snapshot
    return [
        TrainerStandingResponse.model_validate(standing)
        for standing in team_ranking(snapshot.trainers, snapshot.sessions)
    ]


@router.post("/trainers", response_model=TrainerResponse, status_code=status.HTTP_201_CREATED)
def create_trainer(
    body: NewTrainerRequest,
    controller: DashboardController = Depends(get_controller),
) -> TrainerResponse:
    trainer = new_trainer(body.name, body.role)
    result = controller.add_trainer(trainer)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.message)
    return TrainerResponse.model_validate(trainer)


@router.get("/trainers/{trainer_id}/profile", response_model=TrainerProfileResponse)
def get_trainer_profile(
    trainer_id: str,
    controller: DashboardController = Depends(get_controller),
) -> TrainerProfileResponse:
    snapshot = controller.snapshot
    trainer = find_by_id(snapshot.trainers, trainer_id)
    if trainer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trainer '{trainer_id}' not found.",
        )
    return TrainerProfileResponse.model_validate(trainer_profile(trainer, snapshot.sessions))
