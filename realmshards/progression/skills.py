"""Skill-node allocation for creatures.

Stat nodes add their value to the node's stat. Move nodes resolve against the
creature's species: an admin-assigned ``(branch, slot)`` wins, otherwise the
species' unassigned level-up moves are dealt round-robin over the branches
(``MOVE_BRANCH_ORDER``) in level order. A move node with nothing behind it
grants a flat ``EMPTY_MOVE_STAT_VALUE`` to its branch stat instead.

Rejected unlocks return ``False`` and never raise.
"""
from __future__ import annotations
import random
from typing import Dict, List, Optional

from realmshards.core.types import STAT_KEYS
from realmshards.data.catalog import Catalog, LearnableMove, move_display_name
from realmshards.battle.effects import stat_display_name
from .models import Creature, MAX_ACTIVE_MOVES
from .skill_tree import (
    EMPTY_MOVE_STAT_VALUE,
    START_NODE_ID,
    SkillNode,
    SkillTree,
    calculate_skill_points_for_level,
    get_skill_tree,
)

MOVE_BRANCH_ORDER = ("atk", "sp_atk", "def", "sp_def", "hp", "speed")


def get_move_for_slot(catalog: Catalog, species_id: int, branch: str, slot_index: int) -> Optional[LearnableMove]:
    species = catalog.get_species(species_id)
    if species is None:
        return None
    for lm in species.learnable_moves:
        if lm.skill_tree_slot == (branch, slot_index):
            return lm
    if branch not in MOVE_BRANCH_ORDER:
        return None
    branch_index = MOVE_BRANCH_ORDER.index(branch)
    pool = sorted((m for m in species.learnable_moves if m.is_level_up and m.skill_tree_slot is None),
                  key=lambda m: m.level)
    for_branch = [m for i, m in enumerate(pool) if i % len(MOVE_BRANCH_ORDER) == branch_index]
    if 0 <= slot_index < len(for_branch):
        return for_branch[slot_index]
    return None


def is_empty_move_slot(catalog: Catalog, creature: Creature, node: SkillNode) -> bool:
    if not node.is_move or node.move_slot is None:
        return False
    return get_move_for_slot(catalog, creature.species_id, node.branch, node.move_slot) is None


def _node_bonus(catalog: Catalog, creature: Creature, node: SkillNode) -> Optional[tuple]:
    """(stat, value) granted by ``node`` for this creature, or None for a real move."""
    if not node.is_move:
        if node.stat and node.value:
            return node.stat, node.value
        return None
    if is_empty_move_slot(catalog, creature, node):
        return node.branch, EMPTY_MOVE_STAT_VALUE
    return None


def stat_bonuses_from_nodes(catalog: Catalog, creature: Creature, tree: Optional[SkillTree] = None) -> Dict[str, int]:
    tree = tree or get_skill_tree()
    bonuses = {k: 0 for k in STAT_KEYS}
    for nid in creature.unlocked_skill_nodes:
        node = tree.get(nid)
        if node is None:
            continue
        bonus = _node_bonus(catalog, creature, node)
        if bonus:
            bonuses[bonus[0]] += bonus[1]
    return bonuses


def effective_stats(catalog: Catalog, creature: Creature, tree: Optional[SkillTree] = None) -> Dict[str, int]:
    species = catalog.get_species(creature.species_id)
    if species is None:
        return dict(creature.stats)
    bonuses = stat_bonuses_from_nodes(catalog, creature, tree)
    return {k: species.base_stats[k] + bonuses[k] for k in STAT_KEYS}


def moves_from_nodes(catalog: Catalog, creature: Creature, tree: Optional[SkillTree] = None) -> List[str]:
    tree = tree or get_skill_tree()
    out: List[str] = []
    for nid in creature.unlocked_skill_nodes:
        node = tree.get(nid)
        if node is None or not node.is_move or node.move_slot is None:
            continue
        lm = get_move_for_slot(catalog, creature.species_id, node.branch, node.move_slot)
        if lm is not None:
            out.append(lm.move_id)
    return out


def can_unlock_node(creature: Creature, node_id: str, tree: Optional[SkillTree] = None) -> bool:
    tree = tree or get_skill_tree()
    if node_id not in tree:
        return False
    if node_id in creature.unlocked_skill_nodes:
        return False
    if creature.skill_points < 1:
        return False
    if node_id == START_NODE_ID:
        return True
    return any(adj in creature.unlocked_skill_nodes for adj in tree.adjacent(node_id))


def _add_stat(creature: Creature, stat: str, value: int) -> None:
    creature.stats[stat] = creature.stats.get(stat, 0) + value
    if stat == "hp":
        creature.max_hp += value
        creature.current_hp = min(creature.current_hp + value, creature.max_hp)


def unlock_node(catalog: Catalog, creature: Creature, node_id: str, tree: Optional[SkillTree] = None) -> bool:
    tree = tree or get_skill_tree()
    if not can_unlock_node(creature, node_id, tree):
        return False
    node = tree.nodes[node_id]
    creature.skill_points -= 1
    creature.unlocked_skill_nodes.append(node_id)

    if not node.is_move:
        if node.stat and node.value:
            _add_stat(creature, node.stat, node.value)
        return True

    lm = get_move_for_slot(catalog, creature.species_id, node.branch, node.move_slot or 0)
    if lm is None:
        _add_stat(creature, node.branch, EMPTY_MOVE_STAT_VALUE)
        return True
    if lm.move_id not in creature.learned_moves:
        creature.learned_moves.append(lm.move_id)
    if lm.move_id not in creature.moves and len(creature.moves) < MAX_ACTIVE_MOVES:
        creature.moves.append(lm.move_id)
    return True


def reset_skill_tree(catalog: Catalog, creature: Creature) -> int:
    """Refund every non-root node; returns the number of points refunded."""
    species = catalog.get_species(creature.species_id)
    if species is None:
        return 0
    refund = sum(1 for nid in creature.unlocked_skill_nodes if nid != START_NODE_ID)
    creature.skill_points += refund
    creature.unlocked_skill_nodes = [START_NODE_ID]
    creature.stats = dict(species.base_stats)
    creature.max_hp = species.base_stats["hp"]
    creature.current_hp = min(creature.current_hp, creature.max_hp)
    creature.moves = []
    return refund


def randomly_allocate_nodes(
    catalog: Catalog,
    creature: Creature,
    points: int,
    rng: Optional[random.Random] = None,
    tree: Optional[SkillTree] = None,
) -> List[str]:
    """Spend up to ``points`` on uniformly chosen legal nodes; returns what was unlocked."""
    rng = rng or random.Random()
    tree = tree or get_skill_tree()
    if START_NODE_ID not in creature.unlocked_skill_nodes:
        creature.unlocked_skill_nodes.insert(0, START_NODE_ID)
    picked: List[str] = []
    for _ in range(max(0, points)):
        if creature.skill_points <= 0:
            break
        available = [nid for nid in tree.frontier(set(creature.unlocked_skill_nodes))
                     if can_unlock_node(creature, nid, tree)]
        if not available:
            break
        choice = available[rng.randrange(len(available))]
        unlock_node(catalog, creature, choice, tree)
        picked.append(choice)
    return picked


def initialize_skill_tree(
    catalog: Catalog,
    creature: Creature,
    randomize: bool = False,
    rng: Optional[random.Random] = None,
    tree: Optional[SkillTree] = None,
) -> None:
    creature.skill_points = calculate_skill_points_for_level(creature.level)
    creature.unlocked_skill_nodes = [START_NODE_ID]
    species = catalog.get_species(creature.species_id)
    if species is not None:
        creature.stats = dict(species.base_stats)
        creature.max_hp = species.base_stats["hp"]
        creature.current_hp = creature.max_hp
    creature.moves = []
    if randomize and creature.skill_points > 0:
        randomly_allocate_nodes(catalog, creature, creature.skill_points, rng, tree)


def node_display_name(catalog: Catalog, creature: Creature, node: SkillNode) -> str:
    if not node.is_move:
        return f"+{node.value} {stat_display_name(node.stat or node.branch)}"
    lm = get_move_for_slot(catalog, creature.species_id, node.branch, node.move_slot or 0)
    if lm is not None:
        mv = catalog.get_move(lm.move_id)
        return mv.name if mv else move_display_name(lm.move_id)
    return f"+{EMPTY_MOVE_STAT_VALUE} {stat_display_name(node.branch)} (Empty)"


__all__ = [
    "MOVE_BRANCH_ORDER", "get_move_for_slot", "is_empty_move_slot", "stat_bonuses_from_nodes",
    "effective_stats", "moves_from_nodes", "can_unlock_node", "unlock_node", "reset_skill_tree",
    "randomly_allocate_nodes", "initialize_skill_tree", "node_display_name",
]
