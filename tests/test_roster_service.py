from __future__ import annotations

import pytest

from app.domain.k9 import SampleResult, SessionMode
from app.services.roster_service import (
    dog_profile,
    dog_roster,
    efficiency_label,
    history_groups,
    team_ranking,
    trainer_profile,
)

TRAINING = SessionMode.TRAINING
OPERATIONAL = SessionMode.OPERATIONAL


@pytest.fixture()
def sessions(make_session, utc):
    return [
        make_session("s1", utc(2024, 1, 1), module="Módulo Asociación", target_odor="OCP1", ua_c=6, ua_i=4),
        make_session("s2", utc(2024, 1, 3), module="Módulo Asociación", target_odor="OCP1", ua_c=8, ua_i=2),
        make_session("s3", utc(2024, 1, 2), module="Módulo Asociación", target_odor="OCP2", ua_c=5, ua_i=5),
        make_session("s4", utc(2024, 1, 5), module="Módulo Transición", target_odor="OCP1", ua_c=9, ua_i=1),
        make_session("o1", utc(2024, 1, 6), mode=OPERATIONAL, result=SampleResult.VP, sample_id="M-1"),
        make_session("o2", utc(2024, 1, 7), mode=OPERATIONAL, result=SampleResult.FP, sample_id="M-2"),
        make_session("x1", utc(2024, 1, 4), dog_id="d2", trainer_id="t2", ua_c=1, ua_i=1),
    ]


class TestDogProfile:
    def test_progress_and_history(self, make_dog, sessions) -> None:
        profile = dog_profile(make_dog("d1", "Rex"), sessions, TRAINING)

        assert len(profile.sessions) == 4
        assert profile.unique_modules == 2
        assert profile.progress_percent == 29
        assert profile.total_successes == 28
        assert [(group.module, group.objective) for group in profile.previous] == [
            ("Módulo Asociación", "OCP1"),
            ("Módulo Asociación", "OCP2"),
        ]
        assert profile.current.module == "Módulo Transición"
        assert profile.current.accuracy == 90.0
        assert profile.previous[0].accuracy == 14 / 20 * 100

    def test_operational_groups_by_sample(self, make_dog, sessions) -> None:
        profile = dog_profile(make_dog("d1", "Rex"), sessions, OPERATIONAL)

        assert profile.unique_modules == 0
        assert profile.progress_percent == 0
        assert profile.total_successes == 1
        assert profile.current.module == "Muestras"
        assert profile.current.objective == "M-2"
        assert profile.current.accuracy == 0.0

    def test_dog_without_sessions(self, make_dog, sessions) -> None:
        profile = dog_profile(make_dog("d9", "Nadie"), sessions, TRAINING)

        assert profile.current is None
        assert profile.previous == []
        assert profile.progress_percent == 0

    def test_progress_is_capped(self, make_dog, make_session, utc) -> None:
        many = [make_session(f"s{i}", utc(2024, 1, 1), module=f"M{i}") for i in range(9)]

        assert dog_profile(make_dog("d1", "Rex"), many, TRAINING).progress_percent == 100

    def test_history_falls_back_to_general(self, make_session, utc) -> None:
        (group,) = history_groups([make_session("s", utc(2024, 1, 1))], TRAINING)

        assert (group.module, group.objective) == ("Muestras", "General")


class TestDogRoster:
    def test_sorted_by_name_with_mode_metrics(self, make_dog, sessions) -> None:
        dogs = [make_dog("d1", "Rex"), make_dog("d2", "bruno")]

        training = dog_roster(dogs, sessions, TRAINING)
        operational = dog_roster(dogs, sessions, OPERATIONAL)

        assert [entry.dog.name for entry in training] == ["bruno", "Rex"]
        assert training[1].primary_metric == 2
        assert training[1].accuracy == 28 / 40 * 100
        assert operational[1].primary_metric == 1
        assert operational[1].accuracy == 50.0
        assert operational[0].total_sessions == 0


class TestTeam:
    def test_ranking_by_success_rate(self, make_trainer, sessions) -> None:
        trainers = [make_trainer("t2", "Luis"), make_trainer("t1", "Ana"), make_trainer("t3", "Eva")]

        ranking = team_ranking(trainers, sessions)

        assert [standing.trainer.name for standing in ranking] == ["Ana", "Luis", "Eva"]
        assert ranking[-1].success_rate == 0.0

    def test_trainer_profile(self, make_trainer, sessions) -> None:
        profile = trainer_profile(make_trainer("t1", "Ana"), sessions)

        assert profile.total_sessions == 6
        assert profile.unique_dogs == 1
        assert profile.total_successes == 28
        assert profile.average_per_session == 28 / 6
        assert profile.average_per_day == 28 / 6
        assert [stat.date.day for stat in profile.daily] == [1, 2, 3, 5, 6, 7]
        assert profile.daily[-1].accuracy == 0

    @pytest.mark.parametrize(
        ("rate", "label"),
        [(95, "Excelente"), (90, "Excelente"), (85, "Muy Buena"), (70, "Buena"), (69.9, "Regular")],
    )
    def test_efficiency_label(self, rate, label) -> None:
        assert efficiency_label(rate) == label
