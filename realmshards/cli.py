from __future__ import annotations
import argparse
from typing import List, Optional

from realmshards.battle.session import GameSession
from realmshards.battle.state import BattleSummary
from realmshards.core.errors import RealmShardsError
from realmshards.core.logging import logger
from realmshards.system.settings import Settings
from realmshards.ui.battle_view import console, print_battle, print_summary

DEFAULT_STARTER = 4
DEFAULT_WILD = 16
DEFAULT_WILD_LEVEL = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="realmshards-demo", description="Play a headless wild battle.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible battle")
    parser.add_argument("--species", type=int, default=DEFAULT_STARTER, help="Starter species id")
    parser.add_argument("--wild", type=int, nargs="+", default=[DEFAULT_WILD], help="Wild species id(s), up to three")
    parser.add_argument("--level", type=int, default=DEFAULT_WILD_LEVEL, help="Level of the wild creatures")
    parser.add_argument("--turns", type=int, default=50, help="Give up after this many turns")
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    parser.add_argument("--debug", action="store_true", help="Verbose engine diagnostics")
    return parser


def play(session: GameSession, wild: List[int], level: int, max_turns: int, quiet: bool = False) -> BattleSummary:
    engine = session.start_wild_battle([(species_id, level) for species_id in wild])
    engine.advance_from_start()
    state = engine.state
    resolved = 0
    while not state.phase.is_terminal and resolved < max_turns:
        engine.auto_select()
        engine.run_turn()
        resolved += 1
        if not quiet:
            print_battle(state)
    return session.end_battle()


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    changes = {}
    if args.seed is not None:
        changes["rng_seed"] = args.seed
    if args.debug:
        changes["debug"] = True
    settings.update(**changes)
    session = GameSession(settings)
    try:
        session.new_game(args.species)
        summary = play(session, args.wild, args.level, args.turns, args.quiet)
    except RealmShardsError as e:
        logger.error("DemoFailed", error=str(e))
        console.print(f"[red]{e}[/red]")
        return 1
    print_summary(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
