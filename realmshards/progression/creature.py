"""Creature construction, experience and level-up handling.

Stored stats are the species' base stats plus unlocked skill-node bonuses;
level drives skill points, the move list and the experience curve only.
"""
from __future__ import annotations
import itertools
import math
import random
from typing import List, Optional

from realmshards.core.logging import logger
from realmshards.data.catalog import Catalog
from realmshards.data.growth import MAX_LEVEL, clamp_level, experience_for_level
from .models import Creature, MAX_ACTIVE_MOVES
from .skill_tree import SkillTree, calculate_skill_points_for_level, get_skill_tree
from .skills import effective_stats, randomly_allocate_nodes

TRAINER_BATTLE_EXP_MULTIPLIER = 1.5

_ids = itertools.count(1)


def next_creature_id() -> str:
    return f"creature_{next(_ids)}"


def starting_moves(catalog: Catalog, species_id: int, level: int) -> List[str]:
    """Most recent (up to four) distinct level-up moves known at ``level``."""
    seen: List[str] = []
    for lm in catalog.species_level_up_moves(species_id):
        if lm.level <= level and lm.move_id not in seen:
            seen.append(lm.move_id)
    return seen[-MAX_ACTIVE_MOVES:]


def create_creature(
    catalog: Catalog,
    species_id: int,
    level: int = 5,
    is_wild: bool = False,
    *,
    rng: Optional[random.Random] = None,
    tree: Optional[SkillTree] = None,
    nickname: Optional[str] = None,
) -> Creature:
    """Build a fresh creature; raises ``SpeciesNotFound`` for an unknown species.

    Wild creatures spend their skill points immediately on random legal nodes.
    """
    species = catalog.require_species(species_id)
    level = clamp_level(level)
    moves = starting_moves(catalog, species.id, level)
    creature = Creature(
        id=next_creature_id(),
        species_id=species.id,
        nickname=nickname or species.name,
        level=level,
        current_hp=species.base_stats["hp"],
        max_hp=species.base_stats["hp"],
        stats=dict(species.base_stats),
        types=species.types,
        moves=list(moves),
        learned_moves=list(moves),
        exp=experience_for_level(species.growth_rate_id, level),
        exp_to_next_level=experience_for_level(species.growth_rate_id, level + 1),
        is_wild=is_wild,
        skill_points=calculate_skill_points_for_level(level),
    )
    if is_wild and creature.skill_points > 0:
        randomly_allocate_nodes(catalog, creature, creature.skill_points, rng, tree or get_skill_tree())
    logger.debug("CreatureCreated", id=creature.id, species=species.name, level=level, wild=is_wild)
    return creature


def exp_yield_for_faint(species_exp_yield: int, fainted_level: int, is_trainer_battle: bool, participant_count: int) -> int:
    multiplier = TRAINER_BATTLE_EXP_MULTIPLIER if is_trainer_battle else 1.0
    share = 1 / max(1, int(participant_count))
    return math.floor((species_exp_yield * fainted_level / 7) * multiplier * share)


def _level_up(catalog: Catalog, creature: Creature, tree: Optional[SkillTree], log: List[str]) -> None:
    species = catalog.require_species(creature.species_id)
    old_level = creature.level
    creature.level += 1
    log.append(f"{creature.name} grew to Lv. {creature.level}!")

    stats = effective_stats(catalog, creature, tree)
    hp_delta = stats["hp"] - creature.max_hp
    creature.stats = stats
    creature.max_hp = stats["hp"]
    creature.current_hp = max(0, min(creature.current_hp + hp_delta, creature.max_hp))
    creature.skill_points += (calculate_skill_points_for_level(creature.level)
                              - calculate_skill_points_for_level(old_level))
    creature.exp_to_next_level = experience_for_level(species.growth_rate_id, creature.level + 1)

    for lm in catalog.moves_learned_at(species.id, creature.level):
        mv = catalog.get_move(lm.move_id)
        if mv is None or lm.move_id in creature.moves:
            continue
        if lm.move_id not in creature.learned_moves:
            creature.learned_moves.append(lm.move_id)
        if len(creature.moves) < MAX_ACTIVE_MOVES:
            creature.moves.append(lm.move_id)
            log.append(f"{creature.name} learned {mv.name}!")
        else:
            log.append(f"{creature.name} wants to learn {mv.name}, but already knows {MAX_ACTIVE_MOVES} moves!")
    logger.debug("CreatureLevelUp", id=creature.id, level=creature.level)


def gain_exp(catalog: Catalog, creature: Creature, amount: int, tree: Optional[SkillTree] = None) -> List[str]:
    """Add experience, level up as many times as it covers; returns log lines."""
    log: List[str] = []
    amount = max(0, int(amount))
    creature.exp += amount
    log.append(f"{creature.name} gained {amount} Exp. Points!")
    while creature.exp >= creature.exp_to_next_level and creature.level < MAX_LEVEL:
        _level_up(catalog, creature, tree, log)
    return log


__all__ = [
    "TRAINER_BATTLE_EXP_MULTIPLIER", "next_creature_id", "starting_moves", "create_creature",
    "exp_yield_for_faint", "gain_exp",
]
