"""
app/connectors/base.py

Base connector for a remote record store reached over HTTP.

Every outbound call goes through :meth:`BaseConnector._request`, which
spaces requests by the configured rate limit, retries transport failures
and 429/5xx answers with exponential backoff, and converts anything it
cannot recover from into :class:`ConnectorRequestError`.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import requests

from app.config import ExternalHTTPSettings
from app.logging_utils import log_event

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ConnectorRequestError(RuntimeError):
    """
    Raised when a store request fails or returns an unusable body.
    """


class BaseConnector(ABC):
    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._http = http_settings
        self._session = session or requests.Session()
        self._attempts = max(0, http_settings.max_retries) + 1
        rate = http_settings.rate_limit_per_second
        self._min_interval = 1.0 / rate if rate > 0 else 0.0
        self._last_sent_at = 0.0

    @abstractmethod
    def fetch_payload(self) -> Any:
        """
        Fetch every table of the store in one call.
        """

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _request_json(self, *, method: str, url: str, **kwargs: Any) -> Any:
        response = self._request(method=method, url=url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        data: str | bytes | None = None,
    ) -> requests.Response:
        last_error: Exception | None = None
        for attempt in range(1, self._attempts + 1):
            try:
                return self._send_once(method=method, url=url, params=params, headers=headers, data=data)
            except requests.HTTPError as exc:
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    log_event(
                        logger,
                        logging.ERROR,
                        "store_request_rejected",
                        source=self.source,
                        method=method,
                        status=status_code,
                    )
                    raise ConnectorRequestError(f"{self.source}: request rejected with status {status_code}.") from exc
                last_error = exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt < self._attempts:
                delay = self._backoff_delay(attempt)
                log_event(
                    logger,
                    logging.WARNING,
                    "store_request_retry",
                    source=self.source,
                    method=method,
                    attempt=attempt,
                    wait_seconds=round(delay, 2),
                    error=str(last_error),
                )
                time.sleep(delay)

        log_event(
            logger,
            logging.ERROR,
            "store_request_failed",
            source=self.source,
            method=method,
            attempts=self._attempts,
            error=str(last_error),
        )
        raise ConnectorRequestError(f"{self.source}: request failed.") from last_error

    def _send_once(self, *, method: str, url: str, **kwargs: Any) -> requests.Response:
        self._wait_for_slot()
        response = self._session.request(method=method, url=url, timeout=self._http.timeout_seconds, **kwargs)
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise requests.HTTPError(f"Retryable status {response.status_code}", response=response)
        response.raise_for_status()
        return response

    def _backoff_delay(self, attempt: int) -> float:
        return self._http.backoff_initial_seconds * (self._http.backoff_multiplier ** (attempt - 1))

    def _wait_for_slot(self) -> None:
        if self._min_interval <= 0:
            return
        remaining = self._min_interval - (time.monotonic() - self._last_sent_at)
        if remaining > 0:
            time.sleep(remaining)
        self._last_sent_at = time.monotonic()
