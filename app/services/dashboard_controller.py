"""
app/services/dashboard_controller.py

Owner of the dashboard's single piece of mutable state.

The published state is an immutable ``DashboardSnapshot``. Ingestion builds a
complete new snapshot off to the side and swaps it in with one assignment;
nothing else ever mutates a published snapshot. Commands (new sessions, new
dogs, new trainers) publish an optimistic snapshot first and then write to
the spreadsheet. A write failure is reported to the caller but the local
change is not rolled back: the next successful refresh replaces it anyway.

Concurrent refreshes are not cancelled. Whichever finishes last publishes.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Sequence

from app.config import get_dashboard_settings, get_external_http_settings, get_sheets_settings
from app.connectors.base import ConnectorRequestError
from app.connectors.sheets_connector import SheetsConnector
from app.domain.k9 import Dog, SessionRecord, Trainer
from app.logging_utils import log_event
from app.mappers.entity_reconciler import reconcile_dogs, reconcile_trainers
from app.mappers.session_builder import build_sessions
from app.mappers.submission_encoder import encode_for_submission
from app.scheduler.jobs import get_scheduler, schedule_reconcile_refresh
from app.schemas.sheets import SheetsPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    dogs: tuple[Dog, ...] = ()
    trainers: tuple[Trainer, ...] = ()
    sessions: tuple[SessionRecord, ...] = ()
    loaded_at: datetime | None = None

    @classmethod
    def empty(cls) -> "DashboardSnapshot":
        return cls()


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a write command, for the UI to alert on.
    """

    ok: bool
    message: str = ""
    count: int = 0


def build_snapshot(
    previous: DashboardSnapshot,
    payload: SheetsPayload,
    *,
    now: datetime | None = None,
) -> DashboardSnapshot:
    """
    Run the ingestion pipeline over one fetched payload.

    Absent tables are ingested as empty. For publication, a table absent
    from the payload keeps the previous snapshot's collection; the dog
    collection is replaced whenever dogs or sessions were present, since
    session ingestion may auto-create dogs.
    """

    dogs = reconcile_dogs(payload.dogs or [])
    trainers = reconcile_trainers(payload.trainers or [])
    sessions = build_sessions(payload.sessions or [], dogs, trainers)

    dogs_present = payload.dogs is not None or payload.sessions is not None
    return DashboardSnapshot(
        dogs=tuple(dogs) if dogs_present else previous.dogs,
        trainers=tuple(trainers) if payload.trainers is not None else previous.trainers,
        sessions=tuple(sessions) if payload.sessions is not None else previous.sessions,
        loaded_at=now or datetime.now(tz=timezone.utc),
    )


class DashboardController:
    """
    Serializes snapshot publication and runs the store commands.
    """

    def __init__(
        self,
        *,
        connector: SheetsConnector,
        scheduler: Any | None = None,
        refresh_delay_seconds: float = 1.5,
        initial: DashboardSnapshot | None = None,
    ) -> None:
        self._connector = connector
        self._scheduler = scheduler
        self._refresh_delay_seconds = refresh_delay_seconds
        self._snapshot = initial or DashboardSnapshot.empty()
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    def _publish(self, snapshot: DashboardSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """
        Fetch the store and publish a fresh snapshot.

        Returns False, keeping the current snapshot, when the endpoint is not
        configured or the fetch fails.
        """
        if not self._connector.is_configured:
            logger.info("Sheets endpoint not configured; refresh skipped")
            return False

        with self._lock:
            self._in_flight += 1
        try:
            payload = self._connector.fetch_payload()
            snapshot = build_snapshot(self._snapshot, payload)
        except ConnectorRequestError as exc:
            logger.warning("Dashboard refresh failed; keeping previous snapshot: %s", exc)
            return False
        finally:
            with self._lock:
                self._in_flight -= 1

        self._publish(snapshot)
        log_event(
            logger,
            logging.INFO,
            "snapshot_published",
            dogs=len(snapshot.dogs),
            trainers=len(snapshot.trainers),
            sessions=len(snapshot.sessions),
        )
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def save_sessions(self, sessions: Sequence[SessionRecord]) -> CommandResult:
        """
        Prepend *sessions* locally, submit them, and schedule a reconcile.
        """
        if not sessions:
            return CommandResult(ok=True, message="No sessions to save.", count=0)

        current = self._snapshot
        rows = encode_for_submission(sessions, current.dogs, current.trainers)
        self._publish(replace(current, sessions=tuple(sessions) + current.sessions))

        if not self._connector.is_configured:
            return CommandResult(ok=False, message="Sheets endpoint is not configured.", count=len(sessions))

        try:
            self._connector.append_session_rows(rows)
        except ConnectorRequestError as exc:
            log_event(logger, logging.ERROR, "session_submission_failed", count=len(rows), error=str(exc))
            return CommandResult(ok=False, message="Could not save sessions to the sheet.", count=len(rows))

        log_event(logger, logging.INFO, "session_submission_sent", count=len(rows))
        if self._scheduler is not None:
            schedule_reconcile_refresh(
                self._scheduler,
                self.refresh,
                delay_seconds=self._refresh_delay_seconds,
            )
        return CommandResult(ok=True, message="Sessions saved.", count=len(rows))

    def add_dog(self, dog: Dog) -> CommandResult:
        current = self._snapshot
        self._publish(replace(current, dogs=current.dogs + (dog,)))
        return self._send(lambda: self._connector.add_dog(dog), event="dog_added", entity_id=dog.id)

    def add_trainer(self, trainer: Trainer) -> CommandResult:
        current = self._snapshot
        self._publish(replace(current, trainers=current.trainers + (trainer,)))
        return self._send(
            lambda: self._connector.add_trainer(trainer),
            event="trainer_added",
            entity_id=trainer.id,
        )

    def _send(self, write: Any, *, event: str, entity_id: str) -> CommandResult:
        if not self._connector.is_configured:
            return CommandResult(ok=False, message="Sheets endpoint is not configured.", count=1)
        try:
            write()
        except ConnectorRequestError as exc:
            log_event(logger, logging.ERROR, f"{event}_failed", entity_id=entity_id, error=str(exc))
            return CommandResult(ok=False, message="Could not save to the sheet.", count=1)
        log_event(logger, logging.INFO, event, entity_id=entity_id)
        return CommandResult(ok=True, message="Saved.", count=1)


@lru_cache(maxsize=1)
def get_dashboard_controller() -> DashboardController:
    """
    Build and cache the process-wide dashboard controller.
    """

    connector = SheetsConnector(
        settings=get_sheets_settings(),
        http_settings=get_external_http_settings(),
    )
    return DashboardController(
        connector=connector,
        scheduler=get_scheduler(),
        refresh_delay_seconds=get_dashboard_settings().refresh_delay_seconds,
    )
