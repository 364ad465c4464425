import random

import pytest

from realmshards.battle.effects import (
    ParsedEffect,
    accuracy_stage_multiplier,
    apply_stat_modifier,
    can_apply_major_status,
    check_confusion_end,
    check_freeze_thaw,
    check_paralysis,
    check_sleep_wake,
    clamp_stage,
    default_stat_modifiers,
    process_status_damage,
    reset_stat_modifiers,
    stat_display_name,
    stat_stage_multiplier,
    status_display_name,
)


def test_stat_stage_multipliers_exact():
    assert stat_stage_multiplier(0) == 1.0
    assert stat_stage_multiplier(1) == 1.5
    assert stat_stage_multiplier(-2) == 0.5
    assert stat_stage_multiplier(6) == 4
    assert stat_stage_multiplier(-6) == 0.25
    # Out-of-range stages clamp
    assert stat_stage_multiplier(9) == 4
    assert clamp_stage(-10) == -6


def test_accuracy_stage_multipliers():
    assert accuracy_stage_multiplier(0) == 1.0
    assert accuracy_stage_multiplier(3) == 2.0
    assert accuracy_stage_multiplier(-3) == 0.5
    assert accuracy_stage_multiplier(1) == pytest.approx(4 / 3)


def test_apply_stat_modifier_messages():
    mods = default_stat_modifiers()
    assert apply_stat_modifier(mods, 'atk', 1).message == 'rose!'
    assert apply_stat_modifier(mods, 'atk', 2).message == 'rose sharply!'
    assert apply_stat_modifier(mods, 'def', -1).message == 'fell!'
    assert apply_stat_modifier(mods, 'def', -2).message == 'fell harshly!'
    assert apply_stat_modifier(mods, 'speed', 3).message == 'rose drastically!'
    assert apply_stat_modifier(mods, 'sp_def', -3).message == 'fell severely!'
    assert mods['atk'] == 3
    assert mods['def'] == -3


def test_apply_stat_modifier_clamps():
    mods = default_stat_modifiers()
    mods['atk'] = 5
    change = apply_stat_modifier(mods, 'atk', 2)
    assert change.new_value == 6
    assert change.clamped
    assert change.message == "can't go any higher!"
    mods['evasion'] = -6
    change = apply_stat_modifier(mods, 'evasion', -1)
    assert change.new_value == -6
    assert change.message == "can't go any lower!"


def test_apply_stat_modifier_rejects_unknown_stat():
    with pytest.raises(KeyError):
        apply_stat_modifier(default_stat_modifiers(), 'luck', 1)


def test_reset_stat_modifiers():
    mods = default_stat_modifiers()
    mods['atk'] = 4
    mods['accuracy'] = -2
    reset_stat_modifiers(mods)
    assert set(mods.values()) == {0}


def test_status_damage():
    assert process_status_damage('poison', 100).damage == 12
    assert process_status_damage('badly_poisoned', 100, toxic_counter=3).damage == 18
    assert process_status_damage('burn', 100).damage == 6
    assert process_status_damage('poison', 5).damage == 1
    assert process_status_damage('paralysis', 100).damage == 0
    assert process_status_damage(None, 100).damage == 0
    assert process_status_damage('burn', 100).message == 'is hurt by its burn!'


def test_major_status_exclusive():
    assert can_apply_major_status(None)
    assert not can_apply_major_status('burn')


def test_status_rolls(fixed_rng):
    assert check_paralysis(fixed_rng(0.1))
    assert not check_paralysis(fixed_rng(0.3))
    assert check_freeze_thaw(fixed_rng(0.1))
    assert not check_freeze_thaw(fixed_rng(0.5))
    assert check_freeze_thaw(fixed_rng(0.99), 'fire')


def test_sleep_wake_forced_after_three_turns(fixed_rng):
    assert not check_sleep_wake(0, fixed_rng(0.0))
    assert not check_sleep_wake(1, fixed_rng(0.5))
    assert check_sleep_wake(1, fixed_rng(0.2))
    assert check_sleep_wake(3, fixed_rng(0.99))


def test_confusion_end(fixed_rng):
    assert not check_confusion_end(1, fixed_rng(0.0))
    assert check_confusion_end(2, fixed_rng(0.2))
    assert not check_confusion_end(4, fixed_rng(0.3))
    assert check_confusion_end(5, fixed_rng(0.99))


def test_status_rolls_with_seeded_rng():
    rng = random.Random(99)
    blocked = sum(check_paralysis(rng) for _ in range(4000))
    assert 800 < blocked < 1200


def test_display_names():
    assert status_display_name('badly_poisoned') == 'Badly Poisoned'
    assert status_display_name('confusion') == 'Confused'
    assert stat_display_name('sp_atk') == 'Sp. Atk'
    assert stat_display_name('evasion') == 'Evasion'


def test_parsed_effect_validation():
    with pytest.raises(ValueError):
        ParsedEffect(type='teleport')
    with pytest.raises(ValueError):
        ParsedEffect(type='heal', target='everyone')
    assert ParsedEffect(type='status', status='burn', chance=150).chance == 100
