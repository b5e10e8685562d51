"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import HTTPException, Query, status

from app.config import get_dashboard_settings
from app.domain.k9 import SessionMode
from app.services.dashboard_controller import DashboardController, get_dashboard_controller
from app.services.metrics_service import MetricsService


def get_controller() -> DashboardController:
    return get_dashboard_controller()


def get_metrics_service() -> MetricsService:
    settings = get_dashboard_settings()
    return MetricsService(window_days=settings.window_days, top_n=settings.top_n)


def get_session_mode(
    mode: str = Query(default=SessionMode.TRAINING.value, description="Training or Operational"),
) -> SessionMode:
    """
    Resolve the ``mode`` query parameter case-insensitively.
    """

    wanted = mode.strip().lower()
    for candidate in SessionMode:
        if candidate.value.lower() == wanted:
            return candidate
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Unknown mode '{mode}'. Allowed values: {[m.value for m in SessionMode]}.",
    )
