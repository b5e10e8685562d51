"""
app/connectors/sheets_connector.py

Connector for the spreadsheet web-app that stores dogs, trainers and sessions.

The endpoint is a single URL: GET returns every table, POST carries an
``action`` discriminator. Writes are sent as ``text/plain`` JSON so the
web-app accepts them without a CORS preflight; their response is never
inspected beyond transport success.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Sequence

import requests
from pydantic import ValidationError

from app.config import ExternalHTTPSettings, SheetsSettings
from app.connectors.base import BaseConnector, ConnectorRequestError
from app.domain.k9 import Dog, Trainer
from app.schemas.sheets import DogPayload, SheetsPayload, TrainerPayload

logger = logging.getLogger(__name__)

SAVE_SESSIONS_ACTION = "save_raw_sessions"
ADD_DOG_ACTION = "addDog"
ADD_TRAINER_ACTION = "addTrainer"

_WRITE_HEADERS = {"Content-Type": "text/plain;charset=utf-8"}


class SheetsConnector(BaseConnector):
    """
    Reads and appends spreadsheet records over HTTP.
    """

    def __init__(
        self,
        *,
        settings: SheetsSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="sheets", http_settings=http_settings, session=session)
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def fetch_payload(self) -> SheetsPayload:
        """
        Fetch all tables, bypassing intermediate caches.

        Raises ConnectorRequestError on transport failure, a non-JSON body, or
        a body that is not a JSON object.
        """

        body = self._request_json(
            method="GET",
            url=self._settings.endpoint_url,
            params={self._settings.cache_bust_param: int(time.time() * 1000)},
        )
        if not isinstance(body, dict):
            raise ConnectorRequestError(f"{self.source}: expected a JSON object body.")
        try:
            payload = SheetsPayload.model_validate(body)
        except ValidationError as exc:
            raise ConnectorRequestError(f"{self.source}: unexpected payload shape.") from exc

        logger.info(
            "Fetched sheets payload dogs=%s trainers=%s sessions=%s",
            _table_size(payload.dogs),
            _table_size(payload.trainers),
            _table_size(payload.sessions),
        )
        return payload

    def append_session_rows(self, rows: Sequence[Sequence[Any]]) -> None:
        self._post({"action": SAVE_SESSIONS_ACTION, "rows": [list(row) for row in rows]})
        logger.info("Submitted session rows count=%s", len(rows))

    def add_dog(self, dog: Dog) -> None:
        payload = DogPayload.from_dog(dog).model_dump(by_alias=True)
        self._post({"action": ADD_DOG_ACTION, "payload": payload})

    def add_trainer(self, trainer: Trainer) -> None:
        payload = TrainerPayload.from_trainer(trainer).model_dump(by_alias=True)
        self._post({"action": ADD_TRAINER_ACTION, "payload": payload})

    def _post(self, body: dict[str, Any]) -> None:
        self._request(
            method="POST",
            url=self._settings.endpoint_url,
            headers=_WRITE_HEADERS,
            data=json.dumps(body, ensure_ascii=False).encode("utf-8"),
        )


def _table_size(table: list[Any] | None) -> str:
    return "absent" if table is None else str(len(table))
