"""
tests/test_session_builder.py

Pytest unit tests for session row ingestion.

Coverage
--------
- Row-drop invariant (missing dog or date)
- Operational and training counter derivation
- Auto-created dogs and the unknown trainer sentinel
- Defaults for optional columns
- End-to-end example row
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.domain.k9 import UNKNOWN_TRAINER_ID, CertificationLevel, SampleResult, SessionMode
from app.mappers.entity_reconciler import reconcile_dogs, reconcile_trainers
from app.mappers.session_builder import (
    AUTO_DOG_BREED,
    build_session,
    build_sessions,
    classify_mode,
    derive_counters,
)


@pytest.fixture()
def dogs():
    return reconcile_dogs([{"id": "d1", "name": "Luna"}])


@pytest.fixture()
def trainers():
    return reconcile_trainers([{"id": "t1", "name": "Ana"}])


# ---------------------------------------------------------------------------
# Row drop
# ---------------------------------------------------------------------------


class TestRowDrop:
    @pytest.mark.parametrize(
        "row",
        [
            {"DogName": "", "Date": "01/01/2024"},
            {"DogName": "Luna", "Date": ""},
            {"DogName": "   ", "Date": "01/01/2024"},
            {"Date": "01/01/2024"},
            {"DogName": "Luna"},
            {},
        ],
    )
    def test_rows_missing_dog_or_date_are_dropped(self, row, dogs, trainers) -> None:
        assert build_session(row, 0, dogs, trainers) is None

    def test_one_record_per_complete_row(self, dogs, trainers) -> None:
        rows = [
            {"DogName": "Luna", "Date": "01/01/2024"},
            {"DogName": "", "Date": "02/01/2024"},
            {"Perro": "Luna", "Fecha Sesión": "03/01/2024"},
            {"DogName": "Luna", "Date": None},
        ]

        sessions = build_sessions(rows, dogs, trainers)

        assert [session.id for session in sessions] == ["s-0", "s-2"]

    def test_dropped_rows_do_not_create_dogs(self, dogs, trainers) -> None:
        build_sessions([{"DogName": "Ghost", "Date": ""}], dogs, trainers)

        assert [dog.name for dog in dogs] == ["Luna"]


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------


class TestDeriveCounters:
    @pytest.mark.parametrize(
        ("result", "expected"),
        [
            (SampleResult.VP, (1, 0, 0)),
            (SampleResult.VN, (1, 0, 0)),
            (SampleResult.FN, (0, 1, 0)),
            (SampleResult.FP, (0, 1, 1)),
            (None, (0, 0, 0)),
        ],
    )
    def test_operational(self, result, expected) -> None:
        assert derive_counters(SessionMode.OPERATIONAL, result=result) == expected

    @pytest.mark.parametrize(("ua_c", "ua_i"), [(0, 0), (8, 2), (0, 5), (12, 0), (3.5, 1)])
    def test_training(self, ua_c, ua_i) -> None:
        assert derive_counters(SessionMode.TRAINING, ua_c=ua_c, ua_i=ua_i) == (ua_c, ua_i, 0)

    def test_training_ignores_result(self) -> None:
        assert derive_counters(SessionMode.TRAINING, ua_c=1, ua_i=1, result=SampleResult.FP) == (1, 1, 0)

    def test_unrecognized_result_text_counts_nothing(self, dogs, trainers) -> None:
        session = build_session(
            {"DogName": "Luna", "Date": "01/01/2024", "Modo": "Muestras", "Resultado": "maybe"},
            0,
            dogs,
            trainers,
        )

        assert session.result is None
        assert (session.hits, session.misses, session.false_positives) == (0, 0, 0)

    def test_result_text_is_trimmed_and_uppercased(self, dogs, trainers) -> None:
        session = build_session(
            {"DogName": "Luna", "Date": "01/01/2024", "Mode": "Operational", "Result": " fp "},
            0,
            dogs,
            trainers,
        )

        assert session.result is SampleResult.FP
        assert (session.hits, session.misses, session.false_positives) == (0, 1, 1)


class TestClassifyMode:
    @pytest.mark.parametrize("raw", ["Muestras", "MUESTRAS reales", "operational", "Operational"])
    def test_operational_labels(self, raw) -> None:
        assert classify_mode(raw) is SessionMode.OPERATIONAL

    @pytest.mark.parametrize("raw", ["Entrenamiento", "training", "", None, "otro"])
    def test_everything_else_is_training(self, raw) -> None:
        assert classify_mode(raw) is SessionMode.TRAINING


# ---------------------------------------------------------------------------
# Entity resolution
# ---------------------------------------------------------------------------


class TestEntityResolution:
    def test_unknown_dog_is_auto_created_once(self, dogs, trainers) -> None:
        session = build_session({"DogName": "Rex", "Date": "01/01/2024"}, 4, dogs, trainers)

        assert len(dogs) == 2
        auto_dog = dogs[-1]
        assert auto_dog.name == "Rex"
        assert auto_dog.id == "d-auto-4"
        assert auto_dog.breed == AUTO_DOG_BREED
        assert auto_dog.level is CertificationLevel.NOVICE
        assert session.dog_id == auto_dog.id

    def test_auto_created_dog_is_reused_by_later_rows(self, dogs, trainers) -> None:
        sessions = build_sessions(
            [{"DogName": "Rex", "Date": "01/01/2024"}, {"DogName": "REX", "Date": "02/01/2024"}],
            dogs,
            trainers,
        )

        assert len(dogs) == 2
        assert sessions[0].dog_id == sessions[1].dog_id == "d-auto-0"

    def test_known_dog_matches_case_insensitively(self, dogs, trainers) -> None:
        session = build_session({"dogname": "LUNA", "date": "01/01/2024"}, 0, dogs, trainers)

        assert session.dog_id == "d1"
        assert len(dogs) == 1

    def test_unknown_trainer_resolves_to_sentinel(self, dogs, trainers) -> None:
        session = build_session(
            {"DogName": "Luna", "Date": "01/01/2024", "TrainerName": "Pedro"},
            0,
            dogs,
            trainers,
        )

        assert session.trainer_id == UNKNOWN_TRAINER_ID
        assert len(trainers) == 1

    def test_missing_trainer_resolves_to_sentinel(self, dogs, trainers) -> None:
        session = build_session({"DogName": "Luna", "Date": "01/01/2024"}, 0, dogs, trainers)

        assert session.trainer_id == UNKNOWN_TRAINER_ID

    def test_known_trainer_matches_case_insensitively(self, dogs, trainers) -> None:
        session = build_session(
            {"DogName": "Luna", "Date": "01/01/2024", "Entrenador": " ana "},
            0,
            dogs,
            trainers,
        )

        assert session.trainer_id == "t1"


# ---------------------------------------------------------------------------
# Defaults and end-to-end
# ---------------------------------------------------------------------------


def test_optional_columns_default(dogs, trainers) -> None:
    session = build_session({"DogName": "Luna", "Date": "01/01/2024"}, 0, dogs, trainers)

    assert session.mode is SessionMode.TRAINING
    assert session.record_type == "Libre"
    assert session.reinforcer == "Comestible"
    assert session.schedule == "Fijo"
    assert session.module == ""
    assert session.notes == ""
    assert (session.ua_c, session.ua_i) == (0, 0)


def test_training_columns_are_read(dogs, trainers) -> None:
    session = build_session(
        {
            "DogName": "Luna",
            "Date": "05/02/2024",
            "Modulo": "Módulo Transición",
            "Objetivo": "OCP2",
            "Tipo Registro": "10UA",
            "UA C": "7",
            "UAI": "3",
            "Reinforcer": "Juguete",
            "Schedule": "Variable",
            "Notes": "buen día",
        },
        0,
        dogs,
        trainers,
    )

    assert session.module == "Módulo Transición"
    assert session.target_odor == "OCP2"
    assert session.record_type == "10UA"
    assert (session.hits, session.misses) == (7, 3)
    assert session.reinforcer == "Juguete"
    assert session.schedule == "Variable"
    assert session.notes == "buen día"


def test_end_to_end_example_row() -> None:
    dogs = reconcile_dogs([])
    trainers = reconcile_trainers([{"id": "t-ana", "name": "Ana"}])
    row = {"Name": "Rex", "Date": "01/01/2024", "TrainerName": "Ana", "Mode": "Entrenamiento", "UAC": "8", "UAL": "2"}

    sessions = build_sessions([row], dogs, trainers)

    assert len(dogs) == 1
    assert dogs[0].name == "Rex"
    assert len(sessions) == 1
    session = sessions[0]
    assert session.dog_id == dogs[0].id
    assert session.trainer_id == "t-ana"
    assert session.mode is SessionMode.TRAINING
    assert (session.hits, session.misses, session.false_positives) == (8, 2, 0)
    assert session.date == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
