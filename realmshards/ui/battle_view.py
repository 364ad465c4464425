"""Read-only terminal rendering of a battle using rich.

Nothing here mutates battle state: the view takes a ``BattleState`` (or a
``BattleSummary``) and builds rich renderables. ``console`` defaults to a
module-level ``Console`` so callers and tests can swap in a recording one.
"""
from __future__ import annotations
from typing import List, Optional, Sequence

from rich.align import Align
from rich.box import DOUBLE, ROUNDED
from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from realmshards.battle.effects import STAGE_STATS, stat_display_name
from realmshards.battle.state import BattlePhase, BattleState, BattleSummary
from realmshards.core.types import format_types
from realmshards.progression.models import Creature, Trainer

console = Console()

HP_BAR_WIDTH = 20

_STATUS_ABBR = {
    "poison": "PSN",
    "badly_poisoned": "TOX",
    "burn": "BRN",
    "paralysis": "PAR",
    "sleep": "SLP",
    "freeze": "FRZ",
}

_PHASE_TITLES = {
    BattlePhase.START: "BATTLE START",
    BattlePhase.TRAINER_SELECT: "TRAINER TURN",
    BattlePhase.CREATURE_SELECT: "CHOOSE MOVES",
    BattlePhase.RESOLUTION: "RESOLVING",
    BattlePhase.VICTORY: "VICTORY",
    BattlePhase.DEFEAT: "DEFEAT",
    BattlePhase.FLED: "GOT AWAY",
}


def status_abbr(status: Optional[str]) -> str:
    """Three-letter tag for a major status, or an empty string."""
    return _STATUS_ABBR.get(status or "", "")


def hp_bar(current: int, max_hp: int, width: int = HP_BAR_WIDTH) -> str:
    if max_hp <= 0 or current <= 0:
        return "[red]FAINTED[/red]"
    percent = min(1.0, current / max_hp)
    filled = max(1, int(percent * width))

    if percent > 0.5:
        color = "green"
    elif percent > 0.25:
        color = "yellow"
    else:
        color = "red"

    bar = "█" * filled + "░" * (width - filled)
    return f"[{color}]{bar}[/{color}]"


def _stage_line(creature: Creature) -> str:
    parts = []
    for stat in STAGE_STATS:
        stage = creature.stat_modifiers.get(stat, 0)
        if stage:
            parts.append(f"{stat_display_name(stat)} {stage:+d}")
    return ", ".join(parts)


def creature_lines(creature: Creature) -> List[str]:
    header = f"[bold bright_white]{creature.name} Lv{creature.level}[/bold bright_white]"
    tag = status_abbr(creature.status)
    if tag:
        header += f" [bold magenta]{tag}[/bold magenta]"
    if creature.confused:
        header += " [magenta]CNF[/magenta]"
    lines = [
        header,
        f"[bright_white][[/bright_white]{format_types(creature.types)}[bright_white]][/bright_white]",
        f"HP: {creature.current_hp}/{creature.max_hp}",
        hp_bar(creature.current_hp, creature.max_hp),
    ]
    stages = _stage_line(creature)
    if stages:
        lines.append(f"[dim]{stages}[/dim]")
    return lines


def side_panel(title: str, creatures: Sequence[Creature], trainer: Optional[Trainer] = None) -> Panel:
    blocks: List[str] = []
    if trainer is not None:
        blocks.append(
            f"[bold cyan]{trainer.name}[/bold cyan] Lv{trainer.level}  "
            f"HP: {trainer.current_hp}/{trainer.max_hp}\n{hp_bar(trainer.current_hp, trainer.max_hp)}"
        )
    for creature in creatures:
        blocks.append("\n".join(creature_lines(creature)))
    return Panel(
        "\n\n".join(blocks) or "[dim]-[/dim]",
        title=f"[bright_white bold]{title}[/bright_white bold]",
        box=ROUNDED,
        style="bright_white",
        width=45,
        padding=(0, 1),
    )


def log_panel(lines: Sequence[str]) -> Panel:
    table = Table(box=None, show_header=False, padding=(0, 1))
    table.add_column("Log", style="bright_white", justify="left")
    for line in lines:
        table.add_row(line)
    return Panel(table, title="[bold]BATTLE LOG[/bold]", box=ROUNDED, style="bright_white", width=94)


def render_battle(state: BattleState) -> Group:
    """Both sides, the bounded log and a phase banner as one renderable."""
    opponent_title = "WILD" if state.is_wild else (state.enemy_trainer.name.upper() if state.enemy_trainer else "OPPONENT")
    enemy = side_panel(opponent_title, state.enemy_creatures)
    player = side_panel("YOUR TEAM", state.active_creatures, state.player_trainer)
    banner = Panel(
        Align.center(f"[bold bright_white]{_PHASE_TITLES.get(state.phase, state.phase.value)}[/bold bright_white]"
                     f"  [dim]turn {state.turn_number}[/dim]"),
        box=DOUBLE,
        style="bright_white",
        width=94,
    )
    return Group(
        banner,
        Columns([enemy, player], equal=True, expand=False, padding=(0, 4)),
        log_panel(state.log),
    )


def render_summary(summary: BattleSummary) -> Panel:
    table = Table(box=ROUNDED, show_header=False, style="bright_white")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Outcome", summary.outcome.upper())
    table.add_row("Turns", str(summary.turns))
    for creature_id, amount in summary.exp_awarded.items():
        table.add_row(f"Exp ({creature_id})", str(amount))
    table.add_row("Trainer Exp", str(summary.trainer_exp))
    if summary.captured_id:
        table.add_row("Captured", summary.captured_id)
    return Panel(table, title="[bold]BATTLE OVER[/bold]", box=DOUBLE, style="bright_white")


def print_battle(state: BattleState, out: Optional[Console] = None) -> None:
    (out or console).print(render_battle(state))


def print_summary(summary: BattleSummary, out: Optional[Console] = None) -> None:
    (out or console).print(render_summary(summary))


__all__ = [
    "console", "HP_BAR_WIDTH", "status_abbr", "hp_bar", "creature_lines", "side_panel",
    "log_panel", "render_battle", "render_summary", "print_battle", "print_summary",
]
