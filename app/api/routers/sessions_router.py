"""
app/api/routers/sessions_router.py

Session listing and rapid entry submission endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_controller
from app.domain.k9 import SessionMode
from app.schemas.dashboard import CommandResponse, SessionBatchRequest
from app.schemas.roster import SessionResponse
from app.services.dashboard_controller import DashboardController
from app.services.rapid_entry_service import RapidEntryValidationError, create_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=list[SessionResponse])
def list_sessions(
    mode: SessionMode | None = Query(default=None),
    dog_id: str | None = Query(default=None),
    controller: DashboardController = Depends(get_controller),
) -> list[SessionResponse]:
    sessions = controller.snapshot.sessions
    if mode is not None:
        sessions = tuple(session for session in sessions if session.mode is mode)
    if dog_id:
        sessions = tuple(session for session in sessions if session.dog_id == dog_id)
    return [SessionResponse.model_validate(session) for session in sessions]


@router.post(
    "",
    response_model=CommandResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_sessions(
    body: SessionBatchRequest,
    controller: DashboardController = Depends(get_controller),
) -> CommandResponse:
    """
    Validate every entry, then save the batch in one submission.

    The batch is rejected as a whole when any entry is incomplete.
    """

    try:
        sessions = [create_session(entry.to_form()) for entry in body.sessions]
    except RapidEntryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    result = controller.save_sessions(sessions)
    if not result.ok:
        logger.warning("Session batch kept locally but not saved: %s", result.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.message)
    return CommandResponse.model_validate(result)
