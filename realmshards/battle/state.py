"""Battle phases, action records and the per-battle state aggregate."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from realmshards.progression.models import Creature, Trainer
from .combatant import is_trainer as _is_trainer

DEFAULT_LOG_LIMIT = 10

# Special target ids a creature action may use instead of a combatant id
TARGET_ALL_OPPONENTS = "ALL_OPPONENTS"
TARGET_ALL_ALLIES = "ALL_ALLIES"
TARGET_ALL_FIELD = "ALL_FIELD"
GROUP_TARGETS = (TARGET_ALL_OPPONENTS, TARGET_ALL_ALLIES, TARGET_ALL_FIELD)

TRAINER_ACTION_TYPES = ("flee", "item", "switch", "skill", "command", "skip")
DAMAGE_NUMBER_KINDS = ("damage", "heal", "miss", "critical")


class BattlePhase(str, Enum):
    START = "start"
    TRAINER_SELECT = "trainer_select"
    CREATURE_SELECT = "creature_select"
    RESOLUTION = "resolution"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"

    @property
    def is_terminal(self) -> bool:
        return self in (BattlePhase.VICTORY, BattlePhase.DEFEAT, BattlePhase.FLED)


@dataclass
class TrainerAction:
    type: str                         # flee | item | switch | skill | command | skip
    item_id: Optional[str] = None
    switch_index: Optional[int] = None
    skill_id: Optional[str] = None

    def __post_init__(self):
        if self.type not in TRAINER_ACTION_TYPES:
            raise ValueError(f"Unknown trainer action '{self.type}'")


@dataclass
class CreatureAction:
    creature_id: str
    move_id: str
    target_id: str


@dataclass
class TurnPlan:
    trainer_action: Optional[TrainerAction] = None
    creature_actions: List[CreatureAction] = field(default_factory=list)


@dataclass
class QueuedAction:
    actor: Any                        # Creature | Trainer
    action: Any                       # CreatureAction | TrainerAction
    priority: float
    is_enemy: bool = False

    @property
    def is_trainer(self) -> bool:
        return _is_trainer(self.actor)


@dataclass
class DamageNumber:
    target_id: str
    value: int
    kind: str = "damage"              # damage | heal | miss | critical


@dataclass
class BattleState:
    player_trainer: Trainer
    active_creatures: List[Creature]
    enemy_creatures: List[Creature]
    is_wild: bool = True
    enemy_trainer: Optional[Trainer] = None
    phase: BattlePhase = BattlePhase.START
    active: bool = True
    turn_plan: Optional[TurnPlan] = None
    action_queue: List[QueuedAction] = field(default_factory=list)
    selected_creature_index: int = 0
    turn_number: int = 1
    trainer_action_interval: int = 5
    damage_numbers: List[DamageNumber] = field(default_factory=list)
    log: List[str] = field(default_factory=list)
    history: List[str] = field(default_factory=list)     # full transcript, never trimmed
    log_limit: int = DEFAULT_LOG_LIMIT
    participation: Dict[str, List[str]] = field(default_factory=dict)
    exp_awarded: Dict[str, int] = field(default_factory=dict)
    trainer_exp_awarded: int = 0
    captured_id: Optional[str] = None
    current_actor_id: Optional[str] = None

    def add_log(self, text: str) -> None:
        self.log.append(text)
        self.history.append(text)
        if len(self.log) > self.log_limit:
            del self.log[: len(self.log) - self.log_limit]

    def add_damage_number(self, target_id: str, value: int, kind: str = "damage") -> None:
        self.damage_numbers.append(DamageNumber(target_id, int(value), kind))

    def is_trainer_turn(self, turn: Optional[int] = None) -> bool:
        turn = self.turn_number if turn is None else turn
        return turn == 1 or turn % self.trainer_action_interval == 1

    def record_participation(self, enemy_id: str, creature_id: str) -> None:
        ids = self.participation.setdefault(enemy_id, [])
        if creature_id not in ids:
            ids.append(creature_id)

    # ---- lookups ----
    def player_creature(self, creature_id: str) -> Optional[Creature]:
        return next((c for c in self.active_creatures if c.id == creature_id), None)

    def enemy_creature(self, creature_id: str) -> Optional[Creature]:
        return next((c for c in self.enemy_creatures if c.id == creature_id), None)

    def find_creature(self, creature_id: str) -> Optional[Creature]:
        return self.player_creature(creature_id) or self.enemy_creature(creature_id)

    def is_enemy(self, creature: Creature) -> bool:
        return any(c is creature for c in self.enemy_creatures)

    def living_players(self) -> List[Creature]:
        return [c for c in self.active_creatures if not c.is_fainted]

    def living_enemies(self) -> List[Creature]:
        return [c for c in self.enemy_creatures if not c.is_fainted]

    def selectable_creatures(self) -> List[Creature]:
        return self.living_players()


@dataclass
class BattleSummary:
    outcome: str                      # victory | defeat | fled | unfinished phase value
    turns: int
    exp_awarded: Dict[str, int] = field(default_factory=dict)
    trainer_exp: int = 0
    captured_id: Optional[str] = None
    log: List[str] = field(default_factory=list)


__all__ = [
    "DEFAULT_LOG_LIMIT", "TARGET_ALL_OPPONENTS", "TARGET_ALL_ALLIES", "TARGET_ALL_FIELD", "GROUP_TARGETS",
    "TRAINER_ACTION_TYPES", "DAMAGE_NUMBER_KINDS", "BattlePhase", "TrainerAction", "CreatureAction",
    "TurnPlan", "QueuedAction", "DamageNumber", "BattleState", "BattleSummary",
]
