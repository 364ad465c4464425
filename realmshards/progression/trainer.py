"""Trainer construction, progression, skills, party/box and inventory.

Mutators take the trainer they change as their first argument and report
rejection through their return value (``False``/``None``) rather than raising.
"""
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from realmshards.core.logging import logger
from realmshards.data.catalog import Catalog
from realmshards.data.items import DEFAULT_INVENTORY
from .creature import create_creature
from .models import Creature, Trainer, MAX_ACTIVE_CREATURES, MAX_PARTY_SIZE

PLAYER_TRAINER_ID = "player"
STARTER_LEVEL = 5
DEFAULT_ACTION_INTERVAL = 5

SKILL_BRANCHES: Tuple[str, ...] = ("warlord", "commander", "ranger", "elementalist", "tactician")


@dataclass(frozen=True)
class SkillEffect:
    type: str                   # stat-buff | turn-frequency | type-boost | weather-extend | crit-boost | follow-up | damage-redirect | guaranteed-crit
    value: float = 0
    duration: int = 0           # turns; 0 = passive/permanent
    stat: Optional[str] = None
    element_type: Optional[str] = None


@dataclass(frozen=True)
class TrainerSkill:
    id: str
    name: str
    description: str
    cost: int
    branch: str
    tier: int
    prerequisites: Tuple[str, ...]
    passive: bool
    effect: SkillEffect


def _skill(id, name, description, cost, branch, tier, prereqs, passive, effect) -> TrainerSkill:
    return TrainerSkill(id, name, description, cost, branch, tier, tuple(prereqs), passive, effect)


TRAINER_SKILLS: Dict[str, TrainerSkill] = {s.id: s for s in (
    # Warlord (offense)
    _skill("warlord_1", "Battle Cry", "+10% ATK to all party for 3 turns.", 1, "warlord", 1, [], False,
           SkillEffect("stat-buff", 10, 3, stat="atk")),
    _skill("warlord_2", "Berserker Rage", "+20% ATK/SP.ATK to party (passive).", 2, "warlord", 2, ["warlord_1"], True,
           SkillEffect("stat-buff", 20, 0, stat="atk")),
    _skill("warlord_3", "Combo Master", "Next 3 attacks trigger 50% follow-up from strongest ally.", 3, "warlord", 3, ["warlord_2"], False,
           SkillEffect("follow-up", 50, 3)),
    # Commander (defense)
    _skill("commander_1", "Rally Defense", "+10% DEF to all party for 3 turns.", 1, "commander", 1, [], False,
           SkillEffect("stat-buff", 10, 3, stat="def")),
    _skill("commander_2", "Fortress", "+20% DEF/SP.DEF to party (passive).", 2, "commander", 2, ["commander_1"], True,
           SkillEffect("stat-buff", 20, 0, stat="def")),
    _skill("commander_3", "Guardian Shield", "Redirect 30% of damage to trainer for 3 turns.", 3, "commander", 3, ["commander_2"], False,
           SkillEffect("damage-redirect", 30, 3)),
    # Ranger (turn frequency)
    _skill("ranger_1", "Quick Orders", "Play every 4 turns instead of 5.", 1, "ranger", 1, [], True,
           SkillEffect("turn-frequency", 4, 0)),
    _skill("ranger_2", "Swift Strike", "+20% Speed to party (passive).", 2, "ranger", 2, ["ranger_1"], True,
           SkillEffect("stat-buff", 20, 0, stat="speed")),
    _skill("ranger_3", "Rapid Command", "Play every 3 turns instead of 5.", 3, "ranger", 3, ["ranger_2"], True,
           SkillEffect("turn-frequency", 3, 0)),
    # Elementalist (type/weather)
    _skill("elementalist_1", "Fire Affinity", "Fire moves +15% damage.", 1, "elementalist", 1, [], True,
           SkillEffect("type-boost", 15, 0, element_type="fire")),
    _skill("elementalist_2", "Weather Master", "Weather effects last +2 turns.", 2, "elementalist", 2, ["elementalist_1"], True,
           SkillEffect("weather-extend", 2, 0)),
    _skill("elementalist_3", "Elemental Surge", "Super-effective moves deal +25% damage.", 3, "elementalist", 3, ["elementalist_2"], True,
           SkillEffect("type-boost", 25, 0)),
    # Tactician (crit/accuracy)
    _skill("tactician_1", "Focus Command", "+10% crit rate for party this turn.", 1, "tactician", 1, [], False,
           SkillEffect("crit-boost", 10, 1)),
    _skill("tactician_2", "Precision", "+20% Accuracy for party (passive).", 2, "tactician", 2, ["tactician_1"], True,
           SkillEffect("stat-buff", 20, 0, stat="accuracy")),
    _skill("tactician_3", "Perfect Strategy", "First move each battle is guaranteed crit.", 3, "tactician", 3, ["tactician_2"], True,
           SkillEffect("guaranteed-crit", 1, 0)),
)}

# Passive stat buffs that also cover the special counterpart
_PAIRED_STATS = {("warlord_2", "sp_atk"): "atk", ("commander_2", "sp_def"): "def"}


def get_trainer_skill(skill_id: str) -> Optional[TrainerSkill]:
    return TRAINER_SKILLS.get(skill_id)


def skills_by_branch() -> Dict[str, List[TrainerSkill]]:
    out: Dict[str, List[TrainerSkill]] = {b: [] for b in SKILL_BRANCHES}
    for skill in TRAINER_SKILLS.values():
        out[skill.branch].append(skill)
    for skills in out.values():
        skills.sort(key=lambda s: s.tier)
    return out

# ---------------------------------------------------------------------------
# Construction & progression
# ---------------------------------------------------------------------------

def exp_to_next_level(level: int) -> int:
    return math.floor((level + 1) ** 3 * 0.8)


def create_trainer(
    catalog: Catalog,
    starter_species_id: int,
    name: str = "Player",
    *,
    rng: Optional[random.Random] = None,
) -> Trainer:
    """New player trainer holding a level-5 starter; raises ``SpeciesNotFound``."""
    starter = create_creature(catalog, starter_species_id, STARTER_LEVEL, rng=rng)
    trainer = Trainer(id=PLAYER_TRAINER_ID, name=name, party=[starter], inventory=dict(DEFAULT_INVENTORY))
    logger.debug("TrainerCreated", name=name, starter=starter.name)
    return trainer


def add_trainer_exp(trainer: Trainer, amount: int) -> int:
    """Add experience; returns how many levels were gained."""
    trainer.exp += max(0, int(amount))
    gained = 0
    while trainer.exp >= trainer.exp_to_next_level:
        trainer.exp -= trainer.exp_to_next_level
        trainer.level += 1
        trainer.exp_to_next_level = exp_to_next_level(trainer.level)
        trainer.skill_points += 1
        hp_gain = 5 + trainer.level // 2
        trainer.max_hp += hp_gain
        trainer.current_hp += hp_gain
        gained += 1
    return gained


def can_unlock_skill(trainer: Trainer, skill_id: str) -> bool:
    skill = TRAINER_SKILLS.get(skill_id)
    if skill is None:
        return False
    if skill_id in trainer.unlocked_skills:
        return False
    if trainer.skill_points < skill.cost:
        return False
    return all(p in trainer.unlocked_skills for p in skill.prerequisites)


def unlock_skill(trainer: Trainer, skill_id: str) -> bool:
    if not can_unlock_skill(trainer, skill_id):
        return False
    trainer.skill_points -= TRAINER_SKILLS[skill_id].cost
    trainer.unlocked_skills.append(skill_id)
    return True


def trainer_action_interval(trainer: Trainer, default: int = DEFAULT_ACTION_INTERVAL) -> int:
    if "ranger_3" in trainer.unlocked_skills:
        return 3
    if "ranger_1" in trainer.unlocked_skills:
        return 4
    return default


def passive_stat_multiplier(trainer: Optional[Trainer], stat: str) -> float:
    if trainer is None:
        return 1.0
    multiplier = 1.0
    for skill_id in trainer.unlocked_skills:
        skill = TRAINER_SKILLS.get(skill_id)
        if skill is None or not skill.passive or skill.effect.type != "stat-buff":
            continue
        if skill.effect.stat == stat or _PAIRED_STATS.get((skill_id, stat)) == skill.effect.stat:
            multiplier += skill.effect.value / 100
    return multiplier

# ---------------------------------------------------------------------------
# Party & box
# ---------------------------------------------------------------------------

def active_creatures(trainer: Trainer) -> List[Creature]:
    return [c for c in trainer.party if not c.is_fainted][:MAX_ACTIVE_CREATURES]


def find_creature(trainer: Trainer, creature_id: str) -> Optional[Creature]:
    for c in trainer.party:
        if c.id == creature_id:
            return c
    for c in trainer.pc_box:
        if c.id == creature_id:
            return c
    return None


def add_creature(trainer: Trainer, creature: Creature) -> str:
    """Append to the party while it has room, else to the box; returns where it went."""
    if len(trainer.party) < MAX_PARTY_SIZE:
        trainer.party.append(creature)
        return "party"
    trainer.pc_box.append(creature)
    return "box"


def swap_to_box(trainer: Trainer, party_index: int, box_index: int) -> bool:
    if not 0 <= party_index < len(trainer.party):
        return False
    if not 0 <= box_index < len(trainer.pc_box):
        return False
    trainer.party[party_index], trainer.pc_box[box_index] = trainer.pc_box[box_index], trainer.party[party_index]
    return True


def reorder_party(trainer: Trainer, from_index: int, to_index: int) -> bool:
    party = trainer.party
    if not 0 <= from_index < len(party) or not 0 <= to_index < len(party):
        return False
    party.insert(to_index, party.pop(from_index))
    return True


def heal_creature(trainer: Trainer, creature_id: str, amount: int) -> bool:
    creature = next((c for c in trainer.party if c.id == creature_id), None)
    if creature is None:
        return False
    creature.set_hp(creature.current_hp + max(0, int(amount)))
    return True


def damage_creature(trainer: Trainer, creature_id: str, amount: int) -> bool:
    """Returns True when the hit made the creature faint."""
    creature = next((c for c in trainer.party if c.id == creature_id), None)
    if creature is None:
        return False
    creature.set_hp(creature.current_hp - max(0, int(amount)))
    return creature.is_fainted


def full_heal(trainer: Trainer) -> None:
    trainer.current_hp = trainer.max_hp
    for c in trainer.party:
        c.set_hp(c.max_hp)

# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

def add_item(trainer: Trainer, item_id: str, quantity: int = 1) -> None:
    if quantity <= 0:
        return
    trainer.inventory[item_id] = trainer.inventory.get(item_id, 0) + quantity


def use_item(trainer: Trainer, item_id: str) -> bool:
    count = trainer.inventory.get(item_id, 0)
    if count <= 0:
        return False
    if count == 1:
        del trainer.inventory[item_id]
    else:
        trainer.inventory[item_id] = count - 1
    return True


def item_count(trainer: Trainer, item_id: str) -> int:
    return trainer.inventory.get(item_id, 0)


__all__ = [
    "PLAYER_TRAINER_ID", "STARTER_LEVEL", "DEFAULT_ACTION_INTERVAL", "SKILL_BRANCHES",
    "SkillEffect", "TrainerSkill", "TRAINER_SKILLS", "get_trainer_skill", "skills_by_branch",
    "exp_to_next_level", "create_trainer", "add_trainer_exp", "can_unlock_skill", "unlock_skill",
    "trainer_action_interval", "passive_stat_multiplier", "active_creatures", "find_creature",
    "add_creature", "swap_to_box", "reorder_party", "heal_creature", "damage_creature", "full_heal",
    "add_item", "use_item", "item_count",
]
