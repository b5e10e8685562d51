"""
Fetch the spreadsheet once and print dashboard metrics from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from app.config import get_dashboard_settings, load_env_files
from app.domain.k9 import SessionMode
from app.schemas.dashboard import DashboardMetricsResponse
from app.services.dashboard_controller import get_dashboard_controller
from app.services.metrics_service import MetricsService


def main() -> int:
    parser = argparse.ArgumentParser(description="Print K9 dashboard metrics as JSON.")
    parser.add_argument(
        "--mode",
        dest="mode",
        choices=[mode.value for mode in SessionMode],
        default=SessionMode.TRAINING.value,
        help="Session mode to summarize.",
    )
    args = parser.parse_args()

    load_env_files()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s [%(name)s] %(message)s")

    controller = get_dashboard_controller()
    if not controller.refresh():
        print("Could not load the spreadsheet; check K9_SHEETS_ENDPOINT_URL.", file=sys.stderr)
        return 1

    settings = get_dashboard_settings()
    snapshot = controller.snapshot
    metrics = MetricsService(window_days=settings.window_days, top_n=settings.top_n).summarize(
        snapshot.sessions,
        snapshot.dogs,
        SessionMode(args.mode),
        trainers=snapshot.trainers,
    )
    payload = DashboardMetricsResponse.model_validate(metrics).model_dump(mode="json")
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
