"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class SheetsSettings:
    """
    Spreadsheet-backed store endpoint settings.

    An empty ``endpoint_url`` means the store is not configured; refreshes
    become no-ops and writes are skipped.
    """

    endpoint_url: str = ""
    cache_bust_param: str = "t"

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_url)


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for the store connector.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 0
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class DashboardSettings:
    """
    Dashboard aggregation and reconciliation settings.
    """

    refresh_delay_seconds: float = 1.5
    window_days: int = 7
    top_n: int = 5


@lru_cache(maxsize=1)
def get_sheets_settings() -> SheetsSettings:
    """
    Return cached spreadsheet store settings from environment variables.
    """

    return SheetsSettings(
        endpoint_url=_get_str_env("K9_SHEETS_ENDPOINT_URL", ""),
        cache_bust_param=_get_str_env("K9_SHEETS_CACHE_BUST_PARAM", "t"),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("K9_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("K9_HTTP_MAX_RETRIES", 0)),
        backoff_initial_seconds=max(0.1, _get_float_env("K9_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("K9_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("K9_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_dashboard_settings() -> DashboardSettings:
    """
    Return dashboard settings from environment variables.
    """

    return DashboardSettings(
        refresh_delay_seconds=max(0.0, _get_float_env("K9_REFRESH_DELAY_SECONDS", 1.5)),
        window_days=max(1, _get_int_env("K9_WINDOW_DAYS", 7)),
        top_n=max(1, _get_int_env("K9_TOP_N", 5)),
    )
