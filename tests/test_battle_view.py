import random

from rich.console import Console

from realmshards.battle.engine import BattleEngine
from realmshards.battle.state import BattleSummary
from realmshards.progression.models import Trainer
from realmshards.progression.creature import create_creature
from realmshards.ui.battle_view import (
    HP_BAR_WIDTH,
    creature_lines,
    hp_bar,
    print_battle,
    print_summary,
    status_abbr,
)


def recording_console():
    return Console(record=True, width=120, color_system=None)


def test_hp_bar_colours():
    assert hp_bar(0, 10) == "[red]FAINTED[/red]"
    assert hp_bar(10, 10) == "[green]" + "█" * HP_BAR_WIDTH + "[/green]"
    assert hp_bar(4, 10) == "[yellow]" + "█" * 8 + "░" * 12 + "[/yellow]"
    assert hp_bar(1, 100) == "[red]█" + "░" * 19 + "[/red]"


def test_status_abbr():
    assert status_abbr("badly_poisoned") == "TOX"
    assert status_abbr("sleep") == "SLP"
    assert status_abbr(None) == ""


def test_creature_lines(trainer):
    charmander = trainer.party[0]
    charmander.status = "burn"
    charmander.confusion_turns = 2
    charmander.stat_modifiers["atk"] = 1
    lines = creature_lines(charmander)
    assert "Charmander Lv5" in lines[0]
    assert "BRN" in lines[0] and "CNF" in lines[0]
    assert "HP: 39/39" in lines
    assert "Attack +1" in lines[-1]


def test_render_wild_battle(catalog, trainer, settings, tree):
    engine = BattleEngine(catalog, trainer, rng=random.Random(3), settings=settings, tree=tree)
    engine.start_wild_battle([(16, 2)])
    out = recording_console()
    print_battle(engine.state, out)
    text = out.export_text()
    assert "BATTLE START" in text
    assert "turn 1" in text
    assert "WILD" in text
    assert "YOUR TEAM" in text
    assert "Wild Pidgey appeared!" in text
    assert "Charmander Lv5" in text


def test_render_trainer_battle(catalog, trainer, settings, tree):
    rival = Trainer(id="rival", name="Rival", party=[create_creature(catalog, 16, 3, tree=tree)])
    engine = BattleEngine(catalog, trainer, rng=random.Random(3), settings=settings, tree=tree)
    engine.start_trainer_battle(rival)
    out = recording_console()
    print_battle(engine.state, out)
    assert "RIVAL" in out.export_text()


def test_render_summary():
    out = recording_console()
    print_summary(BattleSummary(outcome="victory", turns=3, exp_awarded={"creature_1": 14},
                                trainer_exp=4, captured_id="wild_9"), out)
    text = out.export_text()
    assert "BATTLE OVER" in text
    assert "VICTORY" in text
    assert "creature_1" in text
    assert "wild_9" in text
