"""Species and move reference data.

The catalog is built once from a normalized dataset (a list of species
records, each carrying its full move list with per-move combat metadata) and
is read-only afterwards. Move records are derived from the first occurrence
of each move name across all species.

Record shape (camelCase keys as exported by the data tools)::

    {"id": 4, "name": "Emberling", "types": ["fire"],
     "baseStats": {"hp": 39, "atk": 52, "def": 43, "spAtk": 60, "spDef": 50, "speed": 65},
     "captureRate": 45, "expYield": 62, "growthRateId": 4,
     "moves": [{"name": "ember", "level": 7, "method": 1, "type": "fire",
                "category": "special", "power": 40, "accuracy": 100, "pp": 25,
                "target": "selected-pokemon", "effectChance": 10,
                "effect": {"short_effect": "Has a 10% chance to burn the target."},
                "skillTreeSlot": {"branch": "spAtk", "slot": 0}}]}
"""
from __future__ import annotations
import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from realmshards.core.errors import CatalogIntegrityError, DataLoadError, MoveNotFound, SpeciesNotFound
from realmshards.core.logging import logger
from realmshards.core.paths import SPECIES_FILE
from realmshards.core.types import STAT_KEYS, normalize_stat_key
from realmshards.battle.effects import ParsedEffect
from realmshards.battle.type_chart import is_known_type
from realmshards.data.effect_parser import parse_effect_description
from realmshards.data.growth import DEFAULT_GROWTH_RATE, GROWTH_CURVES

MOVE_CATEGORIES = ("physical", "special", "status")

# PokeAPI move-learn method ids
LEARN_METHODS = {1: "level-up", 2: "egg", 3: "tutor", 4: "machine"}

_SEPARATORS = re.compile(r"[-\s]+")


def normalize_move_id(name: str) -> str:
    """``"Thunder-Punch"`` / ``"thunder punch"`` -> ``"thunder_punch"``."""
    return _SEPARATORS.sub("_", str(name).strip().lower())


def move_display_name(name: str) -> str:
    return " ".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s]+", str(name).strip()) if part)


def normalize_category(raw: Any) -> str:
    value = str(raw or "").lower()
    if value == "special":
        return "special"
    if value in ("status", "no-damage"):
        return "status"
    return "physical"


def _int_or(raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class LearnableMove:
    move_id: str
    level: int
    method: str = "level-up"
    skill_tree_slot: Optional[Tuple[str, int]] = None   # (branch, slot) assigned by an admin

    @property
    def is_level_up(self) -> bool:
        return self.method == "level-up"


@dataclass(frozen=True)
class Species:
    id: int
    name: str
    types: Tuple[str, ...]
    base_stats: Dict[str, int]
    learnable_moves: Tuple[LearnableMove, ...] = ()
    capture_rate: int = 45
    exp_yield: int = 64
    growth_rate_id: int = DEFAULT_GROWTH_RATE
    description: str = ""
    sprite: Optional[str] = None


@dataclass(frozen=True)
class Move:
    id: str
    name: str
    type: str
    category: str                 # physical | special | status
    target: str = "selected-pokemon"
    power: int = 0
    accuracy: int = 100
    pp: int = 0
    effect: str = ""
    effect_chance: int = 100
    parsed_effects: Tuple[ParsedEffect, ...] = field(default_factory=tuple)


def move_from_record(raw: Dict[str, Any]) -> Move:
    effect = raw.get("effect")
    effect_text = effect.get("short_effect", "") if isinstance(effect, dict) else str(effect or "")
    effect_chance = _int_or(raw.get("effectChance"), 100)
    target = str(raw.get("target") or "selected-pokemon")
    return Move(
        id=normalize_move_id(raw["name"]),
        name=move_display_name(raw["name"]),
        type=str(raw.get("type") or "normal").lower(),
        category=normalize_category(raw.get("category")),
        target=target,
        power=_int_or(raw.get("power"), 0),
        accuracy=_int_or(raw.get("accuracy"), 100),
        pp=_int_or(raw.get("pp"), 0),
        effect=effect_text,
        effect_chance=effect_chance,
        parsed_effects=tuple(parse_effect_description(effect_text, effect_chance, target)),
    )


def _learnable_from_record(raw: Dict[str, Any]) -> LearnableMove:
    method = raw.get("method", 1)
    if isinstance(method, int) or str(method).isdigit():
        method = LEARN_METHODS.get(int(method), str(method))
    slot = raw.get("skillTreeSlot")
    skill_slot = None
    if isinstance(slot, dict) and slot.get("branch") is not None and slot.get("slot") is not None:
        skill_slot = (normalize_stat_key(str(slot["branch"])), int(slot["slot"]))
    return LearnableMove(
        move_id=normalize_move_id(raw["name"]),
        level=_int_or(raw.get("level"), 1),
        method=str(method),
        skill_tree_slot=skill_slot,
    )


def species_from_record(raw: Dict[str, Any]) -> Species:
    stats_raw = raw.get("baseStats") or raw.get("base_stats") or {}
    base_stats = {normalize_stat_key(k): int(v) for k, v in stats_raw.items()}
    return Species(
        id=int(raw["id"]),
        name=str(raw["name"]),
        types=tuple(str(t).lower() for t in raw.get("types", ())),
        base_stats=base_stats,
        learnable_moves=tuple(_learnable_from_record(m) for m in raw.get("moves", ())),
        capture_rate=_int_or(raw.get("captureRate"), 45),
        exp_yield=_int_or(raw.get("expYield"), 64),
        growth_rate_id=_int_or(raw.get("growthRateId"), DEFAULT_GROWTH_RATE),
        description=str(raw.get("description") or ""),
        sprite=raw.get("sprite"),
    )


class Catalog:
    def __init__(self, species: Dict[int, Species], moves: Dict[str, Move], *, validate: bool = True):
        self._species = dict(species)
        self._moves = dict(moves)
        if validate:
            self.validate()

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], *, validate: bool = True) -> "Catalog":
        species: Dict[int, Species] = {}
        moves: Dict[str, Move] = {}
        duplicates: List[str] = []
        for raw in records:
            sp = species_from_record(raw)
            if sp.id in species:
                duplicates.append(f"duplicate species id {sp.id}")
            species[sp.id] = sp
            for m in raw.get("moves", ()):
                move_id = normalize_move_id(m["name"])
                if move_id not in moves:
                    moves[move_id] = move_from_record(m)
        if duplicates and validate:
            for d in duplicates:
                logger.warn("CatalogIntegrity", problem=d)
            raise CatalogIntegrityError(duplicates)
        return cls(species, moves, validate=validate)

    @classmethod
    def from_file(cls, path: Path) -> "Catalog":
        try:
            records = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DataLoadError(str(path), str(e)) from e
        if isinstance(records, dict):
            records = records.get("species", [])
        catalog = cls.from_records(records)
        logger.debug("CatalogLoaded", path=str(path), species=len(catalog._species), moves=len(catalog._moves))
        return catalog

    # ---------------- Integrity -----------------
    def integrity_problems(self) -> List[str]:
        problems: List[str] = []
        for mv in self._moves.values():
            if not is_known_type(mv.type):
                problems.append(f"move {mv.id} has unknown type '{mv.type}'")
            if not 0 <= mv.accuracy <= 100:
                problems.append(f"move {mv.id} accuracy {mv.accuracy} outside 0..100")
        for sp in self._species.values():
            if not 1 <= len(sp.types) <= 2:
                problems.append(f"species {sp.id} must have one or two types")
            for t in sp.types:
                if not is_known_type(t):
                    problems.append(f"species {sp.id} has unknown type '{t}'")
            missing = [k for k in STAT_KEYS if k not in sp.base_stats]
            if missing:
                problems.append(f"species {sp.id} missing base stats {missing}")
            if sp.growth_rate_id not in GROWTH_CURVES:
                problems.append(f"species {sp.id} has unknown growth rate {sp.growth_rate_id}")
            if any(v <= 0 for v in sp.base_stats.values()):
                problems.append(f"species {sp.id} has a non-positive base stat")
            for lm in sp.learnable_moves:
                if lm.move_id not in self._moves:
                    problems.append(f"species {sp.id} references unknown move '{lm.move_id}'")
                if lm.skill_tree_slot and lm.skill_tree_slot[0] not in STAT_KEYS:
                    problems.append(f"species {sp.id} move {lm.move_id} has invalid skill branch '{lm.skill_tree_slot[0]}'")
        return problems

    def validate(self) -> None:
        problems = self.integrity_problems()
        if problems:
            for p in problems:
                logger.warn("CatalogIntegrity", problem=p)
            raise CatalogIntegrityError(problems)

    # ---------------- Species -----------------
    def get_species(self, species_id: int) -> Optional[Species]:
        return self._species.get(int(species_id))

    def require_species(self, species_id: int) -> Species:
        sp = self.get_species(species_id)
        if sp is None:
            raise SpeciesNotFound(f"Species id {species_id} not found")
        return sp

    def find_species(self, name: str) -> Optional[Species]:
        name_lower = name.lower()
        for sp in self._species.values():
            if sp.name.lower() == name_lower:
                return sp
        return None

    def all_species(self) -> List[Species]:
        return list(self._species.values())

    def species_ids(self) -> Tuple[int, ...]:
        return tuple(self._species)

    def species_level_up_moves(self, species_id: int) -> List[LearnableMove]:
        sp = self.require_species(species_id)
        return sorted((m for m in sp.learnable_moves if m.is_level_up), key=lambda m: m.level)

    def moves_learned_at(self, species_id: int, level: int) -> List[LearnableMove]:
        return [m for m in self.species_level_up_moves(species_id) if m.level == level]

    # ---------------- Moves -----------------
    def get_move(self, move_id: str) -> Optional[Move]:
        key = normalize_move_id(move_id)
        mv = self._moves.get(key)
        if mv is not None:
            return mv
        for candidate in self._moves.values():
            if normalize_move_id(candidate.name) == key:
                return candidate
        return None

    def require_move(self, move_id: str) -> Move:
        mv = self.get_move(move_id)
        if mv is None:
            raise MoveNotFound(f"Move '{move_id}' not found")
        return mv

    def all_moves(self) -> List[Move]:
        return list(self._moves.values())

    def __len__(self) -> int:
        return len(self._species)


@lru_cache(maxsize=None)
def load_catalog(path: Optional[str] = None) -> Catalog:
    return Catalog.from_file(Path(path) if path else SPECIES_FILE)


__all__ = [
    "Catalog", "Species", "Move", "LearnableMove", "MOVE_CATEGORIES", "LEARN_METHODS",
    "normalize_move_id", "move_display_name", "normalize_category",
    "move_from_record", "species_from_record", "load_catalog",
]
