import random

import pytest

from realmshards.battle.mechanics import (
    CONFUSION_HIT,
    attempt_capture,
    calculate_damage,
    capture_chance,
    flee_success,
)
from realmshards.data.catalog import Move
from realmshards.progression.models import Creature


FLAMETHROWER = Move("flamethrower", "Flamethrower", "fire", "special", power=90)
HEADBUTT = Move("headbutt", "Headbutt", "normal", "physical", power=40)
GROWL = Move("growl", "Growl", "normal", "status")


def _mon(types, level=50, **overrides):
    stats = {"hp": 100, "atk": 100, "def": 100, "sp_atk": 100, "sp_def": 100, "speed": 100}
    stats.update(overrides)
    return Creature(
        id="_".join(types), species_id=0, nickname=types[0].title(), level=level,
        current_hp=100, max_hp=100, stats=stats, types=tuple(types),
    )


def test_super_and_not_very_effective(fixed_rng):
    attacker = _mon(["fire"])
    hit = calculate_damage(attacker, _mon(["grass"]), FLAMETHROWER, fixed_rng(0.5))
    assert hit.damage == 113
    assert hit.effectiveness == 2.0
    assert not hit.critical
    resisted = calculate_damage(attacker, _mon(["water"]), FLAMETHROWER, fixed_rng(0.5))
    assert resisted.damage == 28
    assert resisted.effectiveness == 0.5


def test_burn_halves_physical_attack(fixed_rng):
    attacker = _mon(["normal"])
    target = _mon(["fighting"])
    assert calculate_damage(attacker, target, HEADBUTT, fixed_rng(0.5)).damage == 26
    attacker.status = "burn"
    assert calculate_damage(attacker, target, HEADBUTT, fixed_rng(0.5)).damage == 13


def test_burn_leaves_special_moves_alone(fixed_rng):
    attacker = _mon(["fire"])
    attacker.status = "burn"
    assert calculate_damage(attacker, _mon(["grass"]), FLAMETHROWER, fixed_rng(0.5)).damage == 113


def test_immunity_deals_nothing(fixed_rng):
    result = calculate_damage(_mon(["normal"]), _mon(["ghost"]), HEADBUTT, fixed_rng(0.0))
    assert result.damage == 0
    assert result.effectiveness == 0.0
    # An immune target can never be crit
    assert not result.critical


def test_status_moves_deal_no_damage(fixed_rng):
    result = calculate_damage(_mon(["normal"]), _mon(["normal"]), GROWL, fixed_rng(0.5))
    assert result.damage == 0
    assert result.effectiveness == 1.0


def test_critical_hits(fixed_rng):
    attacker, target = _mon(["normal"]), _mon(["fighting"])
    forced = calculate_damage(attacker, target, HEADBUTT, fixed_rng(0.5), force_crit=True)
    assert forced.critical
    assert forced.damage == 39
    rolled = calculate_damage(attacker, target, HEADBUTT, fixed_rng(0.01))
    assert rolled.critical


def test_stat_stages_and_multipliers(fixed_rng):
    attacker, target = _mon(["normal"]), _mon(["fighting"])
    attacker.stat_modifiers["atk"] = 2
    assert calculate_damage(attacker, target, HEADBUTT, fixed_rng(0.5)).damage == 51
    attacker.stat_modifiers["atk"] = 0
    boosted = calculate_damage(attacker, target, HEADBUTT, fixed_rng(0.5), attack_multiplier=2.0)
    assert boosted.damage == 51


def test_confusion_hit_is_typeless(fixed_rng):
    attacker = _mon(["normal"])
    result = calculate_damage(attacker, attacker, CONFUSION_HIT, fixed_rng(0.5))
    assert result.effectiveness == 1.0
    # no STAB: floor(19 * 0.925)
    assert result.damage == 17


def test_damage_stays_in_roll_range():
    rng = random.Random(99)
    attacker, target = _mon(["fire"]), _mon(["grass"])
    for _ in range(50):
        dmg = calculate_damage(attacker, target, FLAMETHROWER, rng).damage
        assert 104 <= dmg <= 184


def test_capture_chance():
    assert capture_chance(45, 40, 40, 1.0, None) == pytest.approx(15 / 255)
    assert capture_chance(45, 40, 40, 1.0, "sleep") == pytest.approx(30 / 255)
    assert capture_chance(255, 40, 1, 2.0, "sleep") == 1.0
    assert capture_chance(3, 40, 40, float("inf"), None) == 1.0


def test_attempt_capture(fixed_rng):
    assert attempt_capture(fixed_rng(0.99), 255, 40, 40, float("inf"), None).success
    caught = attempt_capture(fixed_rng(0.0), 45, 40, 40, 1.0, None)
    assert caught.success and caught.shakes == 3
    missed = attempt_capture(fixed_rng(0.99), 45, 40, 40, 1.0, None)
    assert not missed.success and missed.shakes == 0


def test_flee(fixed_rng):
    assert flee_success(fixed_rng(0.1), True)
    assert not flee_success(fixed_rng(0.9), True)
    assert not flee_success(fixed_rng(0.0), False)


def test_trainer_uses_fixed_combat_profile(trainer, fixed_rng):
    # def 30 against atk 100: floor(22 * 40 * 100 / 30 / 50 + 2) = 60, then STAB and roll
    hit = calculate_damage(_mon(["normal"]), trainer, HEADBUTT, fixed_rng(0.5))
    assert hit.effectiveness == 1.0
    assert hit.damage == 83
    # level 5, atk 30 and no types of its own, so no STAB
    assert calculate_damage(trainer, _mon(["normal"]), HEADBUTT, fixed_rng(0.5)).damage == 1
