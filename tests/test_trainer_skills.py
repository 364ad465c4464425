import pytest

from realmshards.progression.trainer import (
    SKILL_BRANCHES,
    TRAINER_SKILLS,
    can_unlock_skill,
    get_trainer_skill,
    passive_stat_multiplier,
    skills_by_branch,
    trainer_action_interval,
    unlock_skill,
)


def test_skill_table_shape():
    assert len(TRAINER_SKILLS) == 15
    grouped = skills_by_branch()
    assert set(grouped) == set(SKILL_BRANCHES)
    for skills in grouped.values():
        assert [s.tier for s in skills] == [1, 2, 3]
        assert [s.cost for s in skills] == [1, 2, 3]
    assert get_trainer_skill("ranger_1").name == "Quick Orders"
    assert get_trainer_skill("nope") is None


def test_unlock_spends_points(trainer):
    assert unlock_skill(trainer, "warlord_1")
    assert trainer.skill_points == 9
    assert trainer.unlocked_skills == ["warlord_1"]


def test_prerequisites_required(trainer):
    assert not can_unlock_skill(trainer, "warlord_2")
    assert not unlock_skill(trainer, "warlord_3")
    assert trainer.skill_points == 10
    assert unlock_skill(trainer, "warlord_1")
    assert unlock_skill(trainer, "warlord_2")
    assert trainer.skill_points == 7


def test_duplicate_and_unknown_rejected(trainer):
    assert unlock_skill(trainer, "commander_1")
    assert not unlock_skill(trainer, "commander_1")
    assert not unlock_skill(trainer, "nope")
    assert trainer.skill_points == 9


def test_insufficient_points(trainer):
    trainer.skill_points = 0
    assert not can_unlock_skill(trainer, "ranger_1")
    assert not unlock_skill(trainer, "ranger_1")
    assert trainer.unlocked_skills == []


def test_action_interval(trainer):
    assert trainer_action_interval(trainer) == 5
    assert trainer_action_interval(trainer, default=7) == 7
    unlock_skill(trainer, "ranger_1")
    assert trainer_action_interval(trainer) == 4
    unlock_skill(trainer, "ranger_2")
    unlock_skill(trainer, "ranger_3")
    assert trainer.skill_points == 4
    assert trainer_action_interval(trainer) == 3


def test_passive_multipliers(trainer):
    assert passive_stat_multiplier(None, "atk") == 1.0
    assert passive_stat_multiplier(trainer, "atk") == 1.0
    # Active (non-passive) skills never count
    unlock_skill(trainer, "warlord_1")
    assert passive_stat_multiplier(trainer, "atk") == 1.0
    unlock_skill(trainer, "warlord_2")
    assert passive_stat_multiplier(trainer, "atk") == pytest.approx(1.2)
    assert passive_stat_multiplier(trainer, "sp_atk") == pytest.approx(1.2)
    assert passive_stat_multiplier(trainer, "def") == 1.0


def test_defensive_and_speed_passives(trainer):
    for skill_id in ("commander_1", "commander_2", "ranger_1", "ranger_2"):
        assert unlock_skill(trainer, skill_id)
    assert passive_stat_multiplier(trainer, "def") == pytest.approx(1.2)
    assert passive_stat_multiplier(trainer, "sp_def") == pytest.approx(1.2)
    assert passive_stat_multiplier(trainer, "speed") == pytest.approx(1.2)
    assert passive_stat_multiplier(trainer, "atk") == 1.0
