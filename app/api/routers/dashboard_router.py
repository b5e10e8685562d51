"""
app/api/routers/dashboard_router.py

Dashboard metrics and manual refresh endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_controller, get_metrics_service, get_session_mode
from app.domain.k9 import SessionMode
from app.schemas.dashboard import DashboardMetricsResponse, RefreshResponse
from app.services.dashboard_controller import DashboardController
from app.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/metrics",
    response_model=DashboardMetricsResponse,
    status_code=status.HTTP_200_OK,
)
def get_dashboard_metrics(
    mode: SessionMode = Depends(get_session_mode),
    controller: DashboardController = Depends(get_controller),
    metrics_service: MetricsService = Depends(get_metrics_service),
) -> DashboardMetricsResponse:
    """
    Compute dashboard metrics for one mode over the current snapshot.
    """

    snapshot = controller.snapshot
    metrics = metrics_service.summarize(
        snapshot.sessions,
        snapshot.dogs,
        mode,
        trainers=snapshot.trainers,
    )
    return DashboardMetricsResponse.model_validate(metrics)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    status_code=status.HTTP_200_OK,
)
def refresh_dashboard(
    controller: DashboardController = Depends(get_controller),
) -> RefreshResponse:
    """
    Re-fetch the spreadsheet. A failed fetch keeps the previous data.
    """

    refreshed = controller.refresh()
    snapshot = controller.snapshot
    return RefreshResponse(
        refreshed=refreshed,
        dogs=len(snapshot.dogs),
        trainers=len(snapshot.trainers),
        sessions=len(snapshot.sessions),
    )
