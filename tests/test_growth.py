from realmshards.data.growth import (
    GROWTH_CURVES,
    MAX_LEVEL,
    clamp_level,
    experience_for_level,
    level_for_experience,
)


def test_level_one_is_zero_for_every_curve():
    for rate in GROWTH_CURVES:
        assert experience_for_level(rate, 1) == 0


def test_known_thresholds():
    assert experience_for_level(2, 10) == 1000
    assert experience_for_level(1, 100) == 1250000
    assert experience_for_level(3, 100) == 800000
    assert experience_for_level(4, 2) == 9
    assert experience_for_level(4, 5) == 135
    assert experience_for_level(5, 50) == 125000
    assert experience_for_level(6, 100) == 1640000


def test_curves_never_negative_and_non_decreasing():
    for rate in GROWTH_CURVES:
        values = [experience_for_level(rate, lvl) for lvl in range(1, MAX_LEVEL + 1)]
        assert min(values) >= 0
        assert values == sorted(values)


def test_unknown_rate_and_cap():
    assert experience_for_level(99, 50) == 0
    assert experience_for_level(2, 150) == experience_for_level(2, 100)


def test_level_for_experience():
    assert level_for_experience(2, 0) == 1
    assert level_for_experience(2, 999) == 9
    assert level_for_experience(2, 1000) == 10
    assert level_for_experience(2, 10 ** 9) == 100


def test_clamp_level():
    assert clamp_level(0) == 1
    assert clamp_level(150) == 100
    assert clamp_level(42) == 42
