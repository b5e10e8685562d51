from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import Depends, FastAPI
from pydantic import BaseModel

from app.api.dependencies import get_controller
from app.services.dashboard_controller import DashboardController


class HealthResponse(BaseModel):
    status: str
    sheets_configured: bool
    scheduler_running: bool
    dogs: int
    trainers: int
    sessions: int


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Start the scheduler and load the first snapshot on boot; shut the scheduler down on exit."""
    from app.scheduler.jobs import get_scheduler
    from app.services.dashboard_controller import get_dashboard_controller

    scheduler = get_scheduler()
    if not scheduler.running:
        scheduler.start()
    logging.getLogger(__name__).info("Scheduler started")

    if get_dashboard_controller().refresh():
        logging.getLogger(__name__).info("Initial dashboard snapshot loaded")
    else:
        logging.getLogger(__name__).warning("Initial dashboard snapshot not loaded; serving empty data")
    try:
        yield
    finally:
        scheduler.shutdown(wait=False)
        logging.getLogger(__name__).info("Scheduler shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    from app.config import load_env_files

    load_env_files()
    _configure_logging()

    application = FastAPI(
        title="K9 Training Dashboard API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import dashboard_router, roster_router, sessions_router

    application.include_router(dashboard_router)
    application.include_router(sessions_router)
    application.include_router(roster_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck(controller: DashboardController = Depends(get_controller)) -> HealthResponse:
        from app.config import get_sheets_settings
        from app.scheduler.jobs import get_scheduler

        snapshot = controller.snapshot
        return HealthResponse(
            status="ok",
            sheets_configured=get_sheets_settings().is_configured,
            scheduler_running=get_scheduler().running,
            dogs=len(snapshot.dogs),
            trainers=len(snapshot.trainers),
            sessions=len(snapshot.sessions),
        )

    return application


app = create_app()
