"""Item catalog: healing, capture and battle-boost items."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

REVIVE_HALF_HP = -1


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    category: str               # healing | capture | buff
    description: str
    effect: str                 # heal_hp | capture | boost
    value: float = 0
    stat: Optional[str] = None  # boost items only

    @property
    def is_capture(self) -> bool:
        return self.category == "capture"

    @property
    def is_revive(self) -> bool:
        return self.effect == "heal_hp" and self.value == REVIVE_HALF_HP


ITEMS: Dict[str, Item] = {
    "potion": Item("potion", "Potion", "healing", "Restores 20 HP to a creature.", "heal_hp", 20),
    "super_potion": Item("super_potion", "Super Potion", "healing", "Restores 50 HP to a creature.", "heal_hp", 50),
    "hyper_potion": Item("hyper_potion", "Hyper Potion", "healing", "Restores 200 HP to a creature.", "heal_hp", 200),
    "revive": Item("revive", "Revive", "healing", "Revives a fainted creature with half HP.", "heal_hp", REVIVE_HALF_HP),
    "capture_ball": Item("capture_ball", "Capture Ball", "capture", "A basic ball for capturing wild creatures.", "capture", 1.0),
    "great_ball": Item("great_ball", "Great Ball", "capture", "An improved ball with higher capture rate.", "capture", 1.5),
    "ultra_ball": Item("ultra_ball", "Ultra Ball", "capture", "A high-performance ball for tough captures.", "capture", 2.0),
    "master_ball": Item("master_ball", "Master Ball", "capture", "Never fails to capture any creature.", "capture", float("inf")),
    "x_attack": Item("x_attack", "X Attack", "buff", "Raises a creature's Attack.", "boost", 1, stat="atk"),
    "x_defense": Item("x_defense", "X Defense", "buff", "Raises a creature's Defense.", "boost", 1, stat="def"),
    "x_speed": Item("x_speed", "X Speed", "buff", "Raises a creature's Speed.", "boost", 1, stat="speed"),
}

DEFAULT_INVENTORY: Dict[str, int] = {"potion": 5, "capture_ball": 10}


def get_item(item_id: str) -> Optional[Item]:
    return ITEMS.get(item_id)


def is_capture_item(item_id: str) -> bool:
    item = ITEMS.get(item_id)
    if item is not None:
        return item.is_capture
    return "ball" in item_id or "capture" in item_id


__all__ = ["Item", "ITEMS", "DEFAULT_INVENTORY", "REVIVE_HALF_HP", "get_item", "is_capture_item"]
