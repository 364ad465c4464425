"""Experience growth curves.

Six curves keyed by growth-rate id (1 slow, 2 medium, 3 fast, 4 medium-slow,
5 erratic, 6 fluctuating). Every curve is 0 at level 1 and never negative.
"""
from __future__ import annotations
from functools import lru_cache
from typing import Callable, Dict

MIN_LEVEL = 1
MAX_LEVEL = 100
DEFAULT_GROWTH_RATE = 4


def _slow(n: int) -> int: return (5 * n ** 3) // 4

def _medium(n: int) -> int: return n ** 3

def _fast(n: int) -> int: return (4 * n ** 3) // 5

def _medium_slow(n: int) -> int: return (6 * n ** 3) // 5 - 15 * n ** 2 + 100 * n - 140

def _erratic(n: int) -> int:
    if n < 50:
        return (n ** 3 * (100 - n)) // 50
    if n < 68:
        return (n ** 3 * (150 - n)) // 100
    if n < 98:
        return (n ** 3 * ((1911 - 10 * n) // 3)) // 500
    return (n ** 3 * (160 - n)) // 100

def _fluctuating(n: int) -> int:
    if n < 15:
        return (n ** 3 * ((n + 1) // 3 + 24)) // 50
    if n < 36:
        return (n ** 3 * (n + 14)) // 50
    return (n ** 3 * (n // 2 + 32)) // 50


GROWTH_CURVES: Dict[int, Callable[[int], int]] = {
    1: _slow,
    2: _medium,
    3: _fast,
    4: _medium_slow,
    5: _erratic,
    6: _fluctuating,
}

GROWTH_RATE_NAMES: Dict[int, str] = {
    1: "slow",
    2: "medium",
    3: "fast",
    4: "medium-slow",
    5: "erratic",
    6: "fluctuating",
}


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(int(level), MAX_LEVEL))


@lru_cache(maxsize=None)
def experience_for_level(growth_rate_id: int, level: int) -> int:
    """Total experience needed to reach ``level``; 0 for an unknown curve.

    Levels above the cap use the cap's threshold so the value stays
    non-decreasing.
    """
    curve = GROWTH_CURVES.get(int(growth_rate_id))
    if curve is None or level <= MIN_LEVEL:
        return 0
    n = min(int(level), MAX_LEVEL)
    # Medium-slow dips below zero for the first couple of levels
    floor_value = max(0, curve(n))
    if n > 2:
        floor_value = max(floor_value, experience_for_level(growth_rate_id, n - 1))
    return floor_value


def level_for_experience(growth_rate_id: int, experience: int) -> int:
    """Highest level whose threshold is at or below ``experience``."""
    level = MIN_LEVEL
    for lvl in range(MIN_LEVEL, MAX_LEVEL + 1):
        if experience_for_level(growth_rate_id, lvl) <= experience:
            level = lvl
        else:
            break
    return level


__all__ = [
    "MIN_LEVEL", "MAX_LEVEL", "DEFAULT_GROWTH_RATE", "GROWTH_CURVES", "GROWTH_RATE_NAMES",
    "clamp_level", "experience_for_level", "level_for_experience",
]
