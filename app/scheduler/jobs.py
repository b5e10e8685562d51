"""
app/scheduler/jobs.py

APScheduler wiring for deferred dashboard work.

Jobs
----
  reconcile_refresh  one-shot re-fetch of the spreadsheet, scheduled a short
                     delay after a successful session submission so the
                     in-memory snapshot converges with the store.

Lifecycle
----------
``get_scheduler()`` returns the process-wide ``BackgroundScheduler``. It is
started by the FastAPI ``lifespan`` in main.py (or by the Streamlit app) and
shut down on exit. Jobs added before start are held until the scheduler runs.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

RECONCILE_REFRESH_JOB_ID = "reconcile_refresh"


def build_scheduler() -> BackgroundScheduler:
    """
    Return a configured but *not yet started* ``BackgroundScheduler``.
    """
    return BackgroundScheduler(timezone="UTC")


@lru_cache(maxsize=1)
def get_scheduler() -> BackgroundScheduler:
    return build_scheduler()


def schedule_reconcile_refresh(
    scheduler: Any,
    refresh: Callable[[], Any],
    *,
    delay_seconds: float,
    now: datetime | None = None,
) -> None:
    """
    Schedule a single deferred refresh.

    Repeated submissions inside the delay collapse into one pending job; the
    latest submission's run time wins.
    """
    run_at = (now or datetime.now(tz=timezone.utc)) + timedelta(seconds=max(0.0, delay_seconds))
    scheduler.add_job(
        refresh,
        trigger="date",
        run_date=run_at,
        id=RECONCILE_REFRESH_JOB_ID,
        name="Reconcile dashboard snapshot",
        replace_existing=True,
        misfire_grace_time=60,
    )
    logger.debug("Scheduler: reconcile_refresh queued run_at=%s", run_at.isoformat())
