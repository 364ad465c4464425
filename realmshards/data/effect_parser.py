"""Turn short move-effect sentences into ``ParsedEffect`` records.

This is a data-preparation helper run while the catalog is built. It knows
the sentence templates the move dataset uses ("Raises the user's Attack by
two stages.", "Has a 10% chance to burn the target.", "Drains half the
damage inflicted to heal the user.") and nothing more; text it does not
recognise simply yields no effects.
"""
from __future__ import annotations
import re
from typing import List, Optional

from realmshards.battle.effects import (
    ParsedEffect,
    DEFAULT_HEAL_PERCENT,
    DEFAULT_DRAIN_PERCENT,
    DEFAULT_RECOIL_PERCENT,
)

STAT_WORDS = {
    "attack": "atk",
    "defense": "def",
    "special attack": "sp_atk",
    "special defense": "sp_def",
    "sp. atk": "sp_atk",
    "sp. def": "sp_def",
    "speed": "speed",
    "accuracy": "accuracy",
    "evasion": "evasion",
    "evasiveness": "evasion",
}
ALL_STATS = ("atk", "def", "sp_atk", "sp_def", "speed")

STAGE_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "sharply": 2,
    "drastically": 3,
}

_CHANCE = r"(?:has\s+an?\s+\$?(?P<chance>\d+)%?\s+chance\s+to\s+)?"
_STAT = "|".join(re.escape(w) for w in sorted(STAT_WORDS, key=len, reverse=True)) + "|stats"
_STAT_LIST = rf"(?:{_STAT})(?:\s*(?:,\s*and|,|and)\s*(?:{_STAT}))*"

_STAT_CHANGE_RX = re.compile(
    _CHANCE
    + r"(?:(?P<mod>sharply|drastically)\s+)?"
    + r"(?P<dir>raise|lower)s?\s+(?:all\s+of\s+)?(?:the\s+)?(?P<who>user|target)(?:'s|s'|s)?\s+"
    + rf"(?P<stats>{_STAT_LIST})"
    + r"(?:\s+by\s+(?P<amount>one|two|three|four|\d+)\s+stages?)?"
)
_STAT_SPLIT_RX = re.compile(_STAT)

_STATUS_RULES = (
    ("poison", r"(?:badly\s+)?poison"),
    ("burn", r"burn"),
    ("paralysis", r"paraly[sz]"),
    ("sleep", r"sleep"),
    ("freeze", r"freez|froze"),
    ("confusion", r"confus"),
    ("flinch", r"flinch"),
)
_STATUS_RXS = [(status, re.compile(_CHANCE + rf"(?:[\w\s']*?)?(?P<kw>{kw})")) for status, kw in _STATUS_RULES]

_HEAL_RX = re.compile(r"\b(?:restores?|heals?|recovers?)\b(?P<body>[^.]*?)\bhp\b")
_DRAIN_RX = re.compile(r"\bdrains?\b(?P<body>[^.]*?)\bdamage\b")
_RECOIL_RX = re.compile(r"\b(?:takes?|receives?|suffers?)\b(?P<body>[^.]*?)\brecoil\b")
_PERCENT_RX = re.compile(r"(\d+)\s*%")
_FRACTION_RX = re.compile(r"(\d+)\s*/\s*(\d+)")


def _percent_in(body: str, default: int) -> int:
    m = _PERCENT_RX.search(body)
    if m:
        return int(m.group(1))
    m = _FRACTION_RX.search(body)
    if m and int(m.group(2)) > 0:
        return (100 * int(m.group(1))) // int(m.group(2))
    if "half" in body:
        return 50
    return default


def _stage_count(mod: Optional[str], amount: Optional[str]) -> int:
    if mod:
        return STAGE_WORDS[mod]
    if amount:
        if amount.isdigit():
            return int(amount)
        return STAGE_WORDS.get(amount, 1)
    return 1


def _parse_stat_changes(text: str, effect_chance: int) -> List[ParsedEffect]:
    out: List[ParsedEffect] = []
    for m in _STAT_CHANGE_RX.finditer(text):
        chance = int(m.group("chance")) if m.group("chance") else effect_chance
        direction = 1 if m.group("dir") == "raise" else -1
        target = "self" if m.group("who") == "user" else "opponent"
        stages = _stage_count(m.group("mod"), m.group("amount"))
        stats: List[str] = []
        for word in _STAT_SPLIT_RX.findall(m.group("stats")):
            keys = ALL_STATS if word == "stats" else (STAT_WORDS[word],)
            stats.extend(k for k in keys if k not in stats)
        for stat in stats:
            out.append(ParsedEffect(type="stat-change", stat=stat, stages=direction * stages,
                                    chance=chance, target=target))
    return out


def _parse_statuses(text: str, effect_chance: int, move_target: str) -> List[ParsedEffect]:
    out: List[ParsedEffect] = []
    target = "self" if move_target == "user" else "opponent"
    for status, rx in _STATUS_RXS:
        m = rx.search(text)
        if not m:
            continue
        if status == "poison" and "badly poison" in text:
            status = "badly_poisoned"
        if m.group("chance"):
            chance = int(m.group("chance"))
        else:
            chance = effect_chance if "chance" in text else 100
        out.append(ParsedEffect(type="status", status=status, chance=chance, target=target))
    return out


def parse_effect_description(
    text: Optional[str],
    effect_chance: Optional[int] = 100,
    move_target: str = "selected-pokemon",
) -> List[ParsedEffect]:
    if not text:
        return []
    text = " ".join(text.lower().split())
    chance = 100 if effect_chance is None else int(effect_chance)

    effects = _parse_stat_changes(text, chance)
    effects.extend(_parse_statuses(text, chance, move_target))

    m = _HEAL_RX.search(text)
    if m:
        effects.append(ParsedEffect(type="heal", target="self",
                                    heal_percent=_percent_in(m.group("body"), DEFAULT_HEAL_PERCENT)))
    m = _DRAIN_RX.search(text)
    if m:
        effects.append(ParsedEffect(type="drain", target="self",
                                    drain_percent=_percent_in(m.group("body"), DEFAULT_DRAIN_PERCENT)))
    m = _RECOIL_RX.search(text)
    if m:
        effects.append(ParsedEffect(type="recoil", target="self",
                                    recoil_percent=_percent_in(m.group("body"), DEFAULT_RECOIL_PERCENT)))
    return effects


__all__ = ["parse_effect_description", "STAT_WORDS", "STAGE_WORDS"]
