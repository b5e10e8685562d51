from __future__ import annotations

import pytest

from app.config import get_dashboard_settings, get_external_http_settings, get_sheets_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    for getter in (get_sheets_settings, get_external_http_settings, get_dashboard_settings):
        getter.cache_clear()
    yield
    for getter in (get_sheets_settings, get_external_http_settings, get_dashboard_settings):
        getter.cache_clear()


def test_sheets_endpoint_is_optional(monkeypatch) -> None:
    monkeypatch.setenv("K9_SHEETS_ENDPOINT_URL", "   ")

    assert get_sheets_settings().is_configured is False


def test_sheets_endpoint_from_env(monkeypatch) -> None:
    monkeypatch.setenv("K9_SHEETS_ENDPOINT_URL", "https://script.example.test/exec")

    settings = get_sheets_settings()

    assert settings.is_configured is True
    assert settings.cache_bust_param == "t"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("K9_WINDOW_DAYS", "a week")
    monkeypatch.setenv("K9_HTTP_MAX_RETRIES", "-3")

    assert get_dashboard_settings().window_days == 7
    assert get_external_http_settings().max_retries == 0


def test_dashboard_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("K9_REFRESH_DELAY_SECONDS", "3")
    monkeypatch.setenv("K9_TOP_N", "10")

    settings = get_dashboard_settings()

    assert settings.refresh_delay_seconds == 3.0
    assert settings.top_n == 10
