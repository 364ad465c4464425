"""Shared stat keys and elemental type display metadata.

Provides:
  STAT_KEYS: the six combat stats, in display order
  STAT_KEY_ALIASES: dataset spellings (camelCase) -> internal keys
  TYPE_COLORS_HEX / TYPE_ABBREVIATIONS: presentation helpers for rich markup
"""
from __future__ import annotations
from typing import Dict, Iterable, Tuple

STAT_KEYS: Tuple[str, ...] = ("hp", "atk", "def", "sp_atk", "sp_def", "speed")

STAT_KEY_ALIASES: Dict[str, str] = {
    "hp": "hp",
    "atk": "atk",
    "attack": "atk",
    "def": "def",
    "defense": "def",
    "spAtk": "sp_atk",
    "sp_atk": "sp_atk",
    "specialAttack": "sp_atk",
    "spDef": "sp_def",
    "sp_def": "sp_def",
    "specialDefense": "sp_def",
    "speed": "speed",
    "spd": "speed",
}

def normalize_stat_key(key: str) -> str:
    try:
        return STAT_KEY_ALIASES[key]
    except KeyError:
        return STAT_KEY_ALIASES.get(key.lower(), key.lower())

TYPE_COLORS_HEX: Dict[str, str] = {
    "normal": "#A8A77A",
    "fire": "#EE8130",
    "water": "#6390F0",
    "electric": "#F7D02C",
    "grass": "#7AC74C",
    "ice": "#96D9D6",
    "fighting": "#C22E28",
    "poison": "#A33EA1",
    "ground": "#E2BF65",
    "flying": "#A98FF3",
    "psychic": "#F95587",
    "bug": "#A6B91A",
    "rock": "#B6A136",
    "ghost": "#735797",
    "dragon": "#6F35FC",
    "dark": "#705746",
    "steel": "#B7B7CE",
    "fairy": "#D685AD",
}

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "normal": "NRM",
    "fire": "FIR",
    "water": "WTR",
    "grass": "GRS",
    "electric": "ELE",
    "ice": "ICE",
    "fighting": "FGT",
    "poison": "PSN",
    "ground": "GRN",
    "flying": "FLY",
    "psychic": "PSY",
    "bug": "BUG",
    "rock": "RCK",
    "ghost": "GHO",
    "dragon": "DRA",
    "dark": "DRK",
    "steel": "STL",
    "fairy": "FAI",
}

def type_abbreviation(type_name: str) -> str:
    return TYPE_ABBREVIATIONS.get(type_name.lower(), type_name[:3].upper())

def type_markup(type_name: str, text: str) -> str:
    """Wrap ``text`` in rich markup using the type's colour."""
    hex_val = TYPE_COLORS_HEX.get(type_name.lower())
    if not hex_val:
        return text
    return f"[bold {hex_val}]{text}[/]"

def format_types(types: Iterable[str]) -> str:
    return "/".join(type_markup(t, type_abbreviation(t)) for t in types)

__all__ = [
    "STAT_KEYS", "STAT_KEY_ALIASES", "normalize_stat_key",
    "TYPE_COLORS_HEX", "TYPE_ABBREVIATIONS", "type_abbreviation", "type_markup", "format_types",
]
