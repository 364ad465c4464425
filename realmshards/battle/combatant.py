"""Capability shared by everything that can stand on the battle field.

Trainers and creatures are distinct dataclasses; damage and targeting code
only relies on the attributes below and tells the two apart by ``kind``.
"""
from __future__ import annotations
from typing import Dict, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Combatant(Protocol):
    kind: str                      # "creature" | "trainer"
    id: str
    name: str
    current_hp: int
    max_hp: int

    @property
    def types(self) -> Sequence[str]: ...

    @property
    def speed(self) -> int: ...

    @property
    def combat_level(self) -> int: ...

    @property
    def combat_stats(self) -> Dict[str, int]: ...

    @property
    def stat_modifiers(self) -> Dict[str, int]: ...

    @property
    def status(self) -> Optional[str]: ...

    def set_hp(self, value: int) -> int: ...


def is_trainer(c: Combatant) -> bool:
    return c.kind == "trainer"


__all__ = ["Combatant", "is_trainer"]
