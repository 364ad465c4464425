"""Top-level game controller.

``GameSession`` owns everything a play session mutates: settings, the loaded
catalog, the shared skill tree, one seeded random source, the player trainer
and at most one running battle. Subsystems receive what they need from it
explicitly; nothing here is module-global.
"""
from __future__ import annotations
import random
from typing import Optional, Sequence

from realmshards.core.logging import logger
from realmshards.data.catalog import Catalog, load_catalog
from realmshards.progression.creature import create_creature
from realmshards.progression.models import Creature, Trainer
from realmshards.progression.skill_tree import SkillTree, get_skill_tree
from realmshards.progression.trainer import create_trainer, full_heal
from realmshards.system.settings import Settings
from .engine import BattleEngine, EnemySpec
from .state import BattleSummary


class GameSession:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[Catalog] = None,
        *,
        rng: Optional[random.Random] = None,
        tree: Optional[SkillTree] = None,
    ):
        self.settings = settings or Settings.defaults()
        self.settings.apply_logging()
        self.catalog = catalog or load_catalog()
        self.tree = tree or get_skill_tree()
        self.rng = rng or random.Random(self.settings.data.rng_seed)
        self.trainer: Optional[Trainer] = None
        self.battle: Optional[BattleEngine] = None
        self.settings.on_change(lambda _data: self.settings.apply_logging())

    def new_game(self, starter_species_id: int, name: str = "Player") -> Trainer:
        self.trainer = create_trainer(self.catalog, starter_species_id, name, rng=self.rng)
        self.battle = None
        logger.info("NewGame", trainer=name, starter=starter_species_id)
        return self.trainer

    def require_trainer(self) -> Trainer:
        if self.trainer is None:
            raise RuntimeError("No trainer; call new_game() first")
        return self.trainer

    def create_creature(self, species_id: int, level: int = 5, is_wild: bool = False) -> Creature:
        return create_creature(self.catalog, species_id, level, is_wild, rng=self.rng, tree=self.tree)

    def _new_engine(self) -> BattleEngine:
        if self.battle is not None and self.battle.state is not None and self.battle.state.active:
            logger.debug("BattleDiscarded", turn=self.battle.state.turn_number)
        self.battle = BattleEngine(self.catalog, self.require_trainer(), rng=self.rng, settings=self.settings, tree=self.tree)
        return self.battle

    def start_wild_battle(self, enemies: Sequence[EnemySpec]) -> BattleEngine:
        engine = self._new_engine()
        engine.start_wild_battle(enemies)
        return engine

    def start_trainer_battle(self, enemy_trainer: Trainer, intro: Optional[str] = None) -> BattleEngine:
        engine = self._new_engine()
        engine.start_trainer_battle(enemy_trainer, intro)
        return engine

    def end_battle(self) -> Optional[BattleSummary]:
        if self.battle is None or self.battle.state is None:
            return None
        summary = self.battle.end_battle()
        self.battle = None
        return summary

    def heal_party(self) -> None:
        full_heal(self.require_trainer())


__all__ = ["GameSession"]
