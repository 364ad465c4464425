"""Stat stages, status conditions and structured move effects.

Everything here is pure: functions take the modifier dict or counters they
operate on and an injected ``random.Random`` where a roll is involved.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import random

MIN_STAGE = -6
MAX_STAGE = 6

STAGE_STATS: Tuple[str, ...] = ("atk", "def", "sp_atk", "sp_def", "speed", "accuracy", "evasion")

# Major conditions are mutually exclusive and persist between battles
MAJOR_STATUSES: Tuple[str, ...] = ("poison", "badly_poisoned", "burn", "paralysis", "sleep", "freeze")
VOLATILE_STATUSES: Tuple[str, ...] = ("confusion", "flinch")

PARALYSIS_BLOCK_CHANCE = 0.25
FREEZE_THAW_CHANCE = 0.20
SLEEP_EARLY_WAKE_CHANCE = 0.33
SLEEP_FORCED_WAKE_TURNS = 3
CONFUSION_EARLY_END_CHANCE = 0.25
CONFUSION_FORCED_END_TURNS = 5
CONFUSION_SELF_HIT_CHANCE = 0.5

_STATUS_NAMES = {
    "poison": "Poisoned",
    "badly_poisoned": "Badly Poisoned",
    "burn": "Burned",
    "paralysis": "Paralyzed",
    "sleep": "Asleep",
    "freeze": "Frozen",
    "confusion": "Confused",
    "flinch": "Flinched",
}

_STAT_NAMES = {
    "hp": "HP",
    "atk": "Attack",
    "def": "Defense",
    "sp_atk": "Sp. Atk",
    "sp_def": "Sp. Def",
    "speed": "Speed",
    "accuracy": "Accuracy",
    "evasion": "Evasion",
}

# ---------------------------------------------------------------------------
# Stage helpers
# ---------------------------------------------------------------------------

def clamp_stage(stage: int) -> int: return max(MIN_STAGE, min(MAX_STAGE, int(stage)))

def stat_stage_multiplier(stage: int) -> float:
    s = clamp_stage(stage)
    return (2 + s)/2 if s >= 0 else 2/(2 - s)

def accuracy_stage_multiplier(stage: int) -> float:
    s = clamp_stage(stage)
    return (3 + s)/3 if s >= 0 else 3/(3 - s)

def stage_multiplier(stat: str, stage: int) -> float:
    if stat in ("accuracy", "evasion"):
        return accuracy_stage_multiplier(stage)
    return stat_stage_multiplier(stage)

def default_stat_modifiers() -> Dict[str, int]:
    return {s: 0 for s in STAGE_STATS}


@dataclass(frozen=True)
class StatChange:
    new_value: int
    clamped: bool
    message: str


def _stat_change_message(stages: int, clamped: bool) -> str:
    if clamped:
        return "can't go any higher!" if stages > 0 else "can't go any lower!"
    if stages >= 3: return "rose drastically!"
    if stages == 2: return "rose sharply!"
    if stages == 1: return "rose!"
    if stages == -1: return "fell!"
    if stages == -2: return "fell harshly!"
    if stages <= -3: return "fell severely!"
    return ""


def apply_stat_modifier(modifiers: Dict[str, int], stat: str, stages: int) -> StatChange:
    """Shift ``stat`` by ``stages`` in place and describe the outcome.

    ``clamped`` is set whenever the requested shift could not be applied in
    full, in which case the "can't go any higher/lower" message wins.
    """
    if stat not in STAGE_STATS:
        raise KeyError(f"Unknown stage stat '{stat}'")
    old = int(modifiers.get(stat, 0))
    wanted = old + int(stages)
    new = clamp_stage(wanted)
    clamped = new != wanted
    modifiers[stat] = new
    return StatChange(new, clamped, _stat_change_message(int(stages), clamped))


def reset_stat_modifiers(modifiers: Dict[str, int]) -> None:
    for s in STAGE_STATS:
        modifiers[s] = 0

# ---------------------------------------------------------------------------
# Status conditions
# ---------------------------------------------------------------------------

def is_major_status(status: Optional[str]) -> bool:
    return status in MAJOR_STATUSES

def can_apply_major_status(current: Optional[str]) -> bool:
    return current is None


@dataclass(frozen=True)
class StatusDamage:
    damage: int
    message: str


def process_status_damage(status: Optional[str], max_hp: int, toxic_counter: int = 1) -> StatusDamage:
    """End-of-turn chip damage for a major status.

    The message is the predicate only ("is hurt by poison!"); callers prefix
    the creature's name.
    """
    if status == "poison":
        return StatusDamage(max(1, max_hp // 8), "is hurt by poison!")
    if status == "badly_poisoned":
        counter = max(1, int(toxic_counter or 1))
        return StatusDamage(max(1, (max_hp * counter) // 16), "is badly hurt by poison!")
    if status == "burn":
        return StatusDamage(max(1, max_hp // 16), "is hurt by its burn!")
    return StatusDamage(0, "")


def check_paralysis(rng: random.Random) -> bool:
    """True when paralysis stops the creature from moving this turn."""
    return rng.random() < PARALYSIS_BLOCK_CHANCE


def check_freeze_thaw(rng: random.Random, move_type: Optional[str] = None) -> bool:
    if move_type == "fire":
        return True
    return rng.random() < FREEZE_THAW_CHANCE


def check_sleep_wake(turns_asleep: int, rng: random.Random) -> bool:
    if turns_asleep < 1:
        return False
    chance = 1.0 if turns_asleep >= SLEEP_FORCED_WAKE_TURNS else SLEEP_EARLY_WAKE_CHANCE
    return rng.random() < chance


def check_confusion_end(turns_confused: int, rng: random.Random) -> bool:
    if turns_confused < 2:
        return False
    chance = 1.0 if turns_confused >= CONFUSION_FORCED_END_TURNS else CONFUSION_EARLY_END_CHANCE
    return rng.random() < chance


def check_confusion_self_hit(rng: random.Random) -> bool:
    return rng.random() < CONFUSION_SELF_HIT_CHANCE


def status_display_name(status: str) -> str:
    return _STATUS_NAMES.get(status, status)

def stat_display_name(stat: str) -> str:
    return _STAT_NAMES.get(stat, stat)

# ---------------------------------------------------------------------------
# Structured move effects
# ---------------------------------------------------------------------------

EFFECT_KINDS = ("stat-change", "status", "heal", "drain", "recoil")

DEFAULT_HEAL_PERCENT = 50
DEFAULT_DRAIN_PERCENT = 50
DEFAULT_RECOIL_PERCENT = 25


@dataclass(frozen=True)
class ParsedEffect:
    type: str                       # stat-change | status | heal | drain | recoil
    chance: int = 100               # 0..100
    target: str = "opponent"        # self | opponent
    stat: Optional[str] = None
    stages: int = 0
    status: Optional[str] = None
    heal_percent: Optional[int] = None
    drain_percent: Optional[int] = None
    recoil_percent: Optional[int] = None

    def __post_init__(self):
        if self.type not in EFFECT_KINDS:
            raise ValueError(f"Unknown effect type '{self.type}'")
        if self.target not in ("self", "opponent"):
            raise ValueError(f"Unknown effect target '{self.target}'")
        object.__setattr__(self, "chance", max(0, min(100, int(self.chance))))


__all__ = [
    "MIN_STAGE", "MAX_STAGE", "STAGE_STATS", "MAJOR_STATUSES", "VOLATILE_STATUSES",
    "clamp_stage", "stat_stage_multiplier", "accuracy_stage_multiplier", "stage_multiplier",
    "default_stat_modifiers", "StatChange", "apply_stat_modifier", "reset_stat_modifiers",
    "is_major_status", "can_apply_major_status", "StatusDamage", "process_status_damage",
    "check_paralysis", "check_freeze_thaw", "check_sleep_wake", "check_confusion_end",
    "check_confusion_self_hit", "status_display_name", "stat_display_name",
    "ParsedEffect", "DEFAULT_HEAL_PERCENT", "DEFAULT_DRAIN_PERCENT", "DEFAULT_RECOIL_PERCENT",
]
