"""Shared creature skill tree.

One graph serves every creature. Six branches (one per combat stat) fan out
from a central ``start`` node; each branch holds three parallel paths of five
tiered nodes, one node per path being a move slot. Bridge nodes sit between
neighbouring branches. Layout coordinates only feed edge derivation.

Edges are stored symmetrically at generation time, so ``adjacent()`` is a
plain lookup.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Set, Tuple

from realmshards.core.logging import logger

START_NODE_ID = "start"

CENTER_X = 500.0
CENTER_Y = 500.0
NODE_SPACING = 70.0
MIN_NODE_DISTANCE = 45.0
MAX_CONNECTION_DISTANCE = NODE_SPACING * 1.8
COLLISION_ITERATIONS = 15
MAX_CONNECTIONS = 3
EMPTY_MOVE_STAT_VALUE = 10

# Generation order; also the ring order used for bridges
BRANCHES: Tuple[str, ...] = ("speed", "sp_def", "def", "hp", "sp_atk", "atk")

BRANCH_ANGLES: Dict[str, float] = {
    "speed": -math.pi / 2,
    "sp_def": -math.pi / 6,
    "def": math.pi / 6,
    "hp": math.pi / 2,
    "sp_atk": math.pi * 5 / 6,
    "atk": -math.pi * 5 / 6,
}

PATH_OFFSETS = (-0.18, 0.0, 0.18)
NODES_PER_PATH = 5
# (path index, node index) pairs that hold move slots
MOVE_NODE_POSITIONS = frozenset({(1, 2), (0, 4), (2, 3)})


def stat_value_for_tier(tier: int) -> int:
    if tier <= 2: return 3
    if tier <= 5: return 5
    if tier <= 8: return 8
    return 12


def calculate_skill_points_for_level(level: int) -> int:
    level = max(1, int(level))
    return (level - 1) + level // 10


@dataclass(frozen=True)
class SkillNode:
    id: str
    kind: str                       # stat | move
    branch: str
    tier: int
    x: float
    y: float
    connections: Tuple[str, ...] = ()
    stat: Optional[str] = None      # stat nodes only
    value: int = 0                  # stat nodes only
    move_slot: Optional[int] = None # move nodes only

    @property
    def is_move(self) -> bool:
        return self.kind == "move"


@dataclass
class _Placement:
    x: float
    y: float
    branch: str
    tier: int
    is_move: bool


def _branch_zone(branch: str, base_angle: float) -> List[_Placement]:
    out: List[_Placement] = []
    for path_idx, offset in enumerate(PATH_OFFSETS):
        path_angle = base_angle + offset
        for node_idx in range(NODES_PER_PATH):
            radius = NODE_SPACING * 2 + node_idx * NODE_SPACING * 1.4
            angle = path_angle + math.sin(node_idx * 1.7 + path_idx) * 0.04
            out.append(_Placement(
                x=CENTER_X + math.cos(angle) * radius,
                y=CENTER_Y + math.sin(angle) * radius,
                branch=branch,
                tier=node_idx + 1,
                is_move=(path_idx, node_idx) in MOVE_NODE_POSITIONS,
            ))
    return out


def _bridges() -> List[_Placement]:
    out: List[_Placement] = []
    for i, current in enumerate(BRANCHES):
        nxt = BRANCHES[(i + 1) % len(BRANCHES)]
        a, b = BRANCH_ANGLES[current], BRANCH_ANGLES[nxt]
        mid = (a + b) / 2
        if abs(a - b) > math.pi:
            mid += math.pi
        for j in range(2):
            radius = NODE_SPACING * 4.5 + j * NODE_SPACING * 1.8
            out.append(_Placement(
                x=CENTER_X + math.cos(mid) * radius,
                y=CENTER_Y + math.sin(mid) * radius,
                branch=current if j % 2 == 0 else nxt,
                tier=3 + j,
                is_move=False,
            ))
    return out


def _resolve_collisions(placements: List[_Placement], iterations: int = COLLISION_ITERATIONS) -> None:
    for _ in range(iterations):
        for i in range(len(placements)):
            for j in range(i + 1, len(placements)):
                a, b = placements[i], placements[j]
                dx, dy = b.x - a.x, b.y - a.y
                dist = math.hypot(dx, dy)
                if 0 < dist < MIN_NODE_DISTANCE:
                    push = (MIN_NODE_DISTANCE - dist) / 2
                    nx, ny = dx / dist, dy / dist
                    a.x -= nx * push
                    a.y -= ny * push
                    b.x += nx * push
                    b.y += ny * push


class SkillTree:
    """Immutable node map plus a symmetric adjacency index."""

    def __init__(self, nodes: Dict[str, SkillNode]):
        self.nodes: Dict[str, SkillNode] = dict(nodes)
        self._adjacency: Dict[str, frozenset] = {nid: frozenset(n.connections) for nid, n in self.nodes.items()}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> Optional[SkillNode]:
        return self.nodes.get(node_id)

    @property
    def start(self) -> SkillNode:
        return self.nodes[START_NODE_ID]

    def adjacent(self, node_id: str) -> frozenset:
        return self._adjacency.get(node_id, frozenset())

    def are_adjacent(self, a: str, b: str) -> bool:
        return b in self._adjacency.get(a, ())

    def branch_nodes(self, branch: str) -> List[SkillNode]:
        return [n for n in self.nodes.values() if n.branch == branch and n.id != START_NODE_ID]

    def stat_nodes(self, branch: Optional[str] = None) -> List[SkillNode]:
        return [n for n in self.nodes.values()
                if n.kind == "stat" and n.id != START_NODE_ID and (branch is None or n.branch == branch)]

    def move_nodes(self, branch: Optional[str] = None) -> List[SkillNode]:
        return [n for n in self.nodes.values() if n.is_move and (branch is None or n.branch == branch)]

    def frontier(self, unlocked: Set[str]) -> List[str]:
        """Locked node ids adjacent to any unlocked node, in generation order."""
        reachable: Set[str] = set()
        for nid in unlocked:
            reachable |= self._adjacency.get(nid, frozenset())
        return [nid for nid in self.nodes if nid in reachable and nid not in unlocked]


def generate_skill_tree() -> SkillTree:
    placements: List[_Placement] = []
    for branch in BRANCHES:
        placements.extend(_branch_zone(branch, BRANCH_ANGLES[branch]))
    placements.extend(_bridges())
    _resolve_collisions(placements)

    # ---- materialize nodes (ids index every placement) ----
    raw: Dict[str, dict] = {
        START_NODE_ID: dict(id=START_NODE_ID, kind="stat", branch="hp", tier=0,
                            x=CENTER_X, y=CENTER_Y, stat="hp", value=0, move_slot=None),
    }
    slot_counters: Dict[str, int] = {b: 0 for b in BRANCHES}
    for index, p in enumerate(placements):
        nid = f"{p.branch}_{index}"
        node = dict(id=nid, kind="move" if p.is_move else "stat", branch=p.branch, tier=p.tier,
                    x=p.x, y=p.y, stat=None, value=0, move_slot=None)
        if p.is_move:
            node["move_slot"] = slot_counters[p.branch]
            slot_counters[p.branch] += 1
        else:
            node["stat"] = p.branch
            node["value"] = stat_value_for_tier(p.tier)
        raw[nid] = node

    # ---- edges, recorded in both directions ----
    edges: Dict[str, List[str]] = {nid: [] for nid in raw}

    def link(a: str, b: str) -> None:
        if b not in edges[a]:
            edges[a].append(b)
        if a not in edges[b]:
            edges[b].append(a)

    def dist(a: str, b: str) -> float:
        return math.hypot(raw[a]["x"] - raw[b]["x"], raw[a]["y"] - raw[b]["y"])

    outer = [nid for nid in raw if nid != START_NODE_ID]
    for nid in outer:
        nearby = sorted(
            ((dist(nid, other), other) for other in outer if other != nid),
            key=lambda t: t[0],
        )
        for d, other in nearby[:MAX_CONNECTIONS]:
            if d <= MAX_CONNECTION_DISTANCE:
                link(nid, other)

    # Root joins the closest node of every branch
    by_center = sorted(outer, key=lambda nid: dist(START_NODE_ID, nid))
    joined: Set[str] = set()
    for nid in by_center:
        branch = raw[nid]["branch"]
        if branch not in joined:
            link(START_NODE_ID, nid)
            joined.add(branch)
        if len(joined) == len(BRANCHES):
            break

    for nid in outer:
        if not edges[nid]:
            closest = sorted((o for o in raw if o != nid), key=lambda o: dist(nid, o))[:2]
            for other in closest:
                link(nid, other)

    nodes = {nid: SkillNode(connections=tuple(edges[nid]), **fields) for nid, fields in raw.items()}
    logger.debug("SkillTreeGenerated", nodes=len(nodes), edges=sum(len(e) for e in edges.values()) // 2)
    return SkillTree(nodes)


@lru_cache(maxsize=1)
def get_skill_tree() -> SkillTree:
    return generate_skill_tree()


__all__ = [
    "START_NODE_ID", "BRANCHES", "BRANCH_ANGLES", "EMPTY_MOVE_STAT_VALUE", "MIN_NODE_DISTANCE",
    "MAX_CONNECTION_DISTANCE", "NODE_SPACING", "SkillNode", "SkillTree",
    "stat_value_for_tier", "calculate_skill_points_for_level", "generate_skill_tree", "get_skill_tree",
]
