"""Damage, capture and flee rolls.

All randomness comes from the ``rng`` passed in so a seeded session replays
identically.
"""
from __future__ import annotations
from dataclasses import dataclass
import math
import random
from typing import Optional

from realmshards.data.catalog import Move
from .combatant import Combatant
from .effects import stat_stage_multiplier
from .type_chart import effectiveness as type_effectiveness

CRIT_CHANCE = 0.0625
CRIT_MULTIPLIER = 1.5
STAB_MULTIPLIER = 1.5
RANDOM_FACTOR_MIN = 0.85
WILD_FLEE_CHANCE = 0.5

# Self-hit while confused: typeless so neither STAB nor matchups apply
CONFUSION_HIT = Move(id="confusion_hit", name="Confusion", type="typeless", category="physical", power=40)


@dataclass(frozen=True)
class DamageResult:
    damage: int
    effectiveness: float
    critical: bool = False


def _stat(c: Combatant, key: str) -> float:
    return float(c.combat_stats.get(key, 0)) * stat_stage_multiplier(c.stat_modifiers.get(key, 0))


def calculate_damage(
    attacker: Combatant,
    defender: Combatant,
    move: Move,
    rng: random.Random,
    *,
    attack_multiplier: float = 1.0,
    defense_multiplier: float = 1.0,
    force_crit: bool = False,
) -> DamageResult:
    """Standard damage roll for ``move``.

    ``attack_multiplier``/``defense_multiplier`` carry passive trainer buffs
    for whichever side has them. Status moves and zero-power moves deal no
    damage and report neutral effectiveness.
    """
    if move.category == "status" or move.power <= 0:
        return DamageResult(0, 1.0, False)
    physical = move.category == "physical"
    atk_key, def_key = ("atk", "def") if physical else ("sp_atk", "sp_def")

    attack = _stat(attacker, atk_key)
    if physical and attacker.status == "burn":
        attack = math.floor(attack * 0.5)
    attack *= attack_multiplier
    defense = max(1.0, _stat(defender, def_key) * defense_multiplier)

    eff = type_effectiveness(move.type, defender.types)
    critical = False
    if eff > 0:
        critical = force_crit or rng.random() < CRIT_CHANCE
    crit_mult = CRIT_MULTIPLIER if critical else 1.0
    stab = STAB_MULTIPLIER if move.type in attacker.types else 1.0
    roll = rng.uniform(RANDOM_FACTOR_MIN, 1.0)

    level = attacker.combat_level
    base = math.floor(((2 * level / 5 + 2) * move.power * attack / defense) / 50 + 2)
    damage = math.floor(base * eff * crit_mult * stab * roll)
    return DamageResult(max(0, damage), eff, critical)

# ---------------------------------------------------------------------------
# Capture & flee
# ---------------------------------------------------------------------------

STATUS_BONUS = {
    "sleep": 2.0,
    "freeze": 2.0,
    "paralysis": 1.5,
    "burn": 1.5,
    "poison": 1.5,
    "badly_poisoned": 1.5,
}


@dataclass
class CaptureResult:
    success: bool
    shakes: int
    critical: bool = False


def capture_chance(capture_rate: int, max_hp: int, current_hp: int, ball_bonus: float, status: Optional[str]) -> float:
    if ball_bonus == float("inf"):
        return 1.0
    max_hp = max(1, max_hp)
    status_mod = STATUS_BONUS.get(status or "", 1.0)
    a = (((3 * max_hp - 2 * current_hp) * capture_rate * ball_bonus) / (3 * max_hp)) * status_mod
    if a > 255:
        a = 255
    return max(0.0, a / 255.0)


def attempt_capture(
    rng: random.Random,
    capture_rate: int,
    max_hp: int,
    current_hp: int,
    ball_bonus: float,
    status: Optional[str],
) -> CaptureResult:
    """Three shake checks whose combined odds equal ``capture_chance``."""
    if ball_bonus == float("inf"):
        return CaptureResult(True, 3, critical=True)
    chance = capture_chance(capture_rate, max_hp, current_hp, ball_bonus, status)
    per_shake = chance ** (1 / 3)
    shakes = 0
    for _ in range(3):
        if rng.random() < per_shake:
            shakes += 1
        else:
            break
    return CaptureResult(shakes == 3, shakes)


def flee_success(rng: random.Random, is_wild: bool) -> bool:
    if not is_wild:
        return False
    return rng.random() < WILD_FLEE_CHANCE


__all__ = [
    "CRIT_CHANCE", "CRIT_MULTIPLIER", "STAB_MULTIPLIER", "WILD_FLEE_CHANCE", "CONFUSION_HIT",
    "DamageResult", "calculate_damage", "STATUS_BONUS", "CaptureResult", "capture_chance",
    "attempt_capture", "flee_success",
]
