"""Mutable entities shared by progression and battle code."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from realmshards.battle.effects import default_stat_modifiers, is_major_status

MAX_ACTIVE_MOVES = 4
MAX_PARTY_SIZE = 6
MAX_ACTIVE_CREATURES = 3

# Fixed combat profile a trainer presents when it stands on either side of calculate_damage
TRAINER_COMBAT_LEVEL = 5
TRAINER_COMBAT_STATS: Dict[str, int] = {"atk": 30, "def": 30, "sp_atk": 20, "sp_def": 20, "speed": 15}


@dataclass
class Creature:
    id: str
    species_id: int
    nickname: str
    level: int
    current_hp: int
    max_hp: int
    stats: Dict[str, int]
    types: Tuple[str, ...]
    moves: List[str] = field(default_factory=list)
    learned_moves: List[str] = field(default_factory=list)
    exp: int = 0
    exp_to_next_level: int = 0
    is_fainted: bool = False
    is_wild: bool = False
    status: Optional[str] = None            # major status, persists between battles
    sleep_turns: int = 0
    toxic_counter: int = 0
    confusion_turns: Optional[int] = None   # None when not confused
    stat_modifiers: Dict[str, int] = field(default_factory=default_stat_modifiers)
    skill_points: int = 0
    unlocked_skill_nodes: List[str] = field(default_factory=lambda: ["start"])

    kind = "creature"

    def __post_init__(self):
        self.max_hp = max(1, int(self.max_hp))
        self.current_hp = max(0, min(int(self.current_hp), self.max_hp))
        if len(self.moves) > MAX_ACTIVE_MOVES:
            self.moves = self.moves[-MAX_ACTIVE_MOVES:]
        for m in self.moves:
            if m not in self.learned_moves:
                self.learned_moves.append(m)
        if "start" not in self.unlocked_skill_nodes:
            self.unlocked_skill_nodes.insert(0, "start")
        if self.status is not None and not is_major_status(self.status):
            raise ValueError(f"'{self.status}' is not a major status")

    # ---- combatant capability ----
    @property
    def name(self) -> str:
        return self.nickname

    @property
    def combat_level(self) -> int:
        return self.level

    @property
    def combat_stats(self) -> Dict[str, int]:
        return self.stats

    @property
    def speed(self) -> int:
        return int(self.stats.get("speed", 0))

    @property
    def confused(self) -> bool:
        return self.confusion_turns is not None

    @property
    def can_battle(self) -> bool:
        return not self.is_fainted and self.current_hp > 0

    def set_hp(self, value: int) -> int:
        """Clamp and store HP; returns the new value and syncs the fainted flag."""
        self.current_hp = max(0, min(int(value), self.max_hp))
        if self.current_hp <= 0:
            self.is_fainted = True
        elif self.is_fainted:
            self.is_fainted = False
        return self.current_hp

    def clear_volatile(self) -> None:
        self.stat_modifiers = default_stat_modifiers()
        self.confusion_turns = None
        self.toxic_counter = 1 if self.status == "badly_poisoned" else 0


@dataclass
class Trainer:
    id: str
    name: str
    level: int = 10
    exp: int = 0
    exp_to_next_level: int = 100
    stats: Dict[str, int] = field(default_factory=lambda: {"hp": 50, "speed": 15})
    current_hp: int = 50
    max_hp: int = 50
    skill_points: int = 10
    unlocked_skills: List[str] = field(default_factory=list)
    party: List[Creature] = field(default_factory=list)
    pc_box: List[Creature] = field(default_factory=list)
    inventory: Dict[str, int] = field(default_factory=dict)
    intro: Optional[str] = None

    kind = "trainer"
    types = ()

    def __post_init__(self):
        self.max_hp = max(1, int(self.max_hp))
        self.current_hp = max(0, min(int(self.current_hp), self.max_hp))

    # ---- combatant capability ----
    @property
    def combat_level(self) -> int:
        return TRAINER_COMBAT_LEVEL

    @property
    def combat_stats(self) -> Dict[str, int]:
        return {"hp": self.max_hp, **TRAINER_COMBAT_STATS, "speed": int(self.stats.get("speed", 15))}

    @property
    def speed(self) -> int:
        return int(self.stats.get("speed", 15))

    @property
    def is_fainted(self) -> bool:
        return self.current_hp <= 0

    @property
    def can_battle(self) -> bool:
        return self.current_hp > 0

    @property
    def status(self) -> Optional[str]:
        return None

    @property
    def stat_modifiers(self) -> Dict[str, int]:
        return default_stat_modifiers()

    def set_hp(self, value: int) -> int:
        self.current_hp = max(0, min(int(value), self.max_hp))
        return self.current_hp


__all__ = [
    "Creature", "Trainer", "MAX_ACTIVE_MOVES", "MAX_PARTY_SIZE", "MAX_ACTIVE_CREATURES",
    "TRAINER_COMBAT_LEVEL", "TRAINER_COMBAT_STATS",
]
