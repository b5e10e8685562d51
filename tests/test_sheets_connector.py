"""
tests/test_sheets_connector.py

SheetsConnector tests against a stub HTTP session. No network access.
"""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from app.config import ExternalHTTPSettings, SheetsSettings
from app.connectors.base import ConnectorRequestError
from app.connectors.sheets_connector import SheetsConnector
from app.domain.k9 import CertificationLevel, Dog, Trainer

ENDPOINT = "https://sheets.example.test/exec"


def _response(status_code: int = 200, body: Any = None, raw: bytes | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = raw if raw is not None else json.dumps(body).encode("utf-8")
    response.url = ENDPOINT
    return response


class StubSession:
    def __init__(self, *outcomes: Any) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> requests.Response:
        self.calls.append(kwargs)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _connector(session: StubSession, *, max_retries: int = 0) -> SheetsConnector:
    return SheetsConnector(
        settings=SheetsSettings(endpoint_url=ENDPOINT),
        http_settings=ExternalHTTPSettings(
            timeout_seconds=5.0,
            max_retries=max_retries,
            backoff_initial_seconds=0.0,
            rate_limit_per_second=0.0,
        ),
        session=session,  # type: ignore[arg-type]
    )


class TestFetchPayload:
    def test_get_with_cache_busting_parameter(self) -> None:
        session = StubSession(_response(body={"dogs": [{"name": "Rex"}], "trainers": [], "sessions": []}))

        payload = _connector(session).fetch_payload()

        call = session.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == ENDPOINT
        assert isinstance(call["params"]["t"], int)
        assert call["timeout"] == 5.0
        assert payload.dogs == [{"name": "Rex"}]
        assert payload.trainers == []

    def test_missing_and_non_list_tables_are_absent(self) -> None:
        session = StubSession(_response(body={"dogs": "oops", "sessions": {"a": 1}}))

        payload = _connector(session).fetch_payload()

        assert payload.dogs is None
        assert payload.trainers is None
        assert payload.sessions is None

    def test_non_json_body_raises(self) -> None:
        session = StubSession(_response(raw=b"<html>error</html>"))

        with pytest.raises(ConnectorRequestError):
            _connector(session).fetch_payload()

    def test_non_object_body_raises(self) -> None:
        session = StubSession(_response(body=[1, 2, 3]))

        with pytest.raises(ConnectorRequestError):
            _connector(session).fetch_payload()

    def test_transport_failure_is_not_retried_by_default(self) -> None:
        session = StubSession(requests.ConnectionError("down"))

        with pytest.raises(ConnectorRequestError):
            _connector(session).fetch_payload()
        assert len(session.calls) == 1

    def test_retries_when_configured(self) -> None:
        session = StubSession(requests.Timeout("slow"), _response(status_code=503, body={}), _response(body={}))

        payload = _connector(session, max_retries=2).fetch_payload()

        assert len(session.calls) == 3
        assert payload.sessions is None

    def test_client_error_raises_immediately(self) -> None:
        session = StubSession(_response(status_code=404, body={}), _response(body={}))

        with pytest.raises(ConnectorRequestError):
            _connector(session, max_retries=3).fetch_payload()
        assert len(session.calls) == 1


class TestWrites:
    def test_append_session_rows_posts_text_plain_json(self) -> None:
        session = StubSession(_response(body={}))
        rows = [["5/3/2024", "04/03/2024", "Rex", "Ana", "Entrenamiento"] + [""] * 11]

        _connector(session).append_session_rows(rows)

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["headers"]["Content-Type"] == "text/plain;charset=utf-8"
        body = json.loads(call["data"].decode("utf-8"))
        assert body == {"action": "save_raw_sessions", "rows": rows}

    def test_write_response_body_is_not_inspected(self) -> None:
        session = StubSession(_response(raw=b"not json at all"))

        _connector(session).append_session_rows([])

    def test_write_transport_failure_raises(self) -> None:
        session = StubSession(requests.ConnectionError("offline"))

        with pytest.raises(ConnectorRequestError):
            _connector(session).append_session_rows([["x"]])

    def test_add_dog_payload_uses_camel_case(self) -> None:
        session = StubSession(_response(body={}))
        dog = Dog(id="d9", name="Toby", breed="Beagle", age=2, level=CertificationLevel.NOVICE, avatar_url="u")

        _connector(session).add_dog(dog)

        body = json.loads(session.calls[0]["data"].decode("utf-8"))
        assert body["action"] == "addDog"
        assert body["payload"] == {
            "id": "d9",
            "name": "Toby",
            "breed": "Beagle",
            "age": 2,
            "level": "Novice",
            "handlerId": "",
            "avatarUrl": "u",
        }

    def test_add_trainer_payload(self) -> None:
        session = StubSession(_response(body={}))
        trainer = Trainer(id="t9", name="Eva", role="Guía", avatar_url="v")

        _connector(session).add_trainer(trainer)

        body = json.loads(session.calls[0]["data"].decode("utf-8"))
        assert body == {
            "action": "addTrainer",
            "payload": {"id": "t9", "name": "Eva", "role": "Guía", "avatarUrl": "v"},
        }
