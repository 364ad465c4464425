"""Turn resolution state machine.

One ``BattleEngine`` drives one battle: it records the turn plan, builds the
priority-ordered action queue, resolves every action in strict order and
projects the results (HP, status, experience, captures) back onto the
persistent trainer and creature objects.

Phase flow::

    start -> trainer_select | creature_select -> resolution
          -> trainer_select | creature_select (next turn) | victory | defeat | fled
"""
from __future__ import annotations
import math
import random
import time
from typing import Dict, List, Optional, Sequence, Tuple, Union

from realmshards.core.logging import logger
from realmshards.data.catalog import Catalog, Move, normalize_move_id
from realmshards.data.items import get_item, is_capture_item
from realmshards.progression.creature import create_creature, exp_yield_for_faint, gain_exp
from realmshards.progression.models import Creature, Trainer, MAX_ACTIVE_CREATURES
from realmshards.progression.skill_tree import SkillTree
from realmshards.progression.trainer import (
    active_creatures,
    add_creature,
    add_trainer_exp,
    get_trainer_skill,
    passive_stat_multiplier,
    trainer_action_interval,
    use_item,
)
from realmshards.system.settings import Settings
from .effects import (
    ParsedEffect,
    apply_stat_modifier,
    can_apply_major_status,
    check_confusion_end,
    check_confusion_self_hit,
    check_freeze_thaw,
    check_paralysis,
    check_sleep_wake,
    process_status_damage,
    reset_stat_modifiers,
    stage_multiplier,
    stat_display_name,
)
from .mechanics import CONFUSION_HIT, attempt_capture, calculate_damage, flee_success
from .state import (
    GROUP_TARGETS,
    TARGET_ALL_ALLIES,
    TARGET_ALL_FIELD,
    TARGET_ALL_OPPONENTS,
    BattlePhase,
    BattleState,
    BattleSummary,
    CreatureAction,
    DamageNumber,
    QueuedAction,
    TrainerAction,
    TurnPlan,
)

PLAYER_TRAINER_PRIORITY = 1000
ENEMY_TRAINER_PRIORITY = 999
TRAINER_EXP_SHARE = 0.3
DEFAULT_EXP_YIELD = 50

SELF_TARGETS = frozenset({"user", "self"})
OPPONENT_GROUP_TARGETS = frozenset({"all-opponents"})
ALLY_GROUP_TARGETS = frozenset({"user-and-allies", "all-allies", "users-field"})
EVERYONE_ELSE_TARGETS = frozenset({"all-other-pokemon"})
FIELD_TARGETS = frozenset({"entire-field"})
# Enemy moves that also reach the player trainer at full damage
SPLASH_TARGETS = frozenset({"all-opponents", "entire-field", "all-other-pokemon", "users-field"})
GRAZE_POWER = 100

# Type immunities to major statuses
STATUS_IMMUNITIES: Dict[str, Tuple[str, ...]] = {
    "burn": ("fire",),
    "poison": ("poison", "steel"),
    "badly_poisoned": ("poison", "steel"),
    "freeze": ("ice",),
    "paralysis": ("electric",),
}

_INFLICT_MESSAGES = {
    "poison": "was poisoned!",
    "badly_poisoned": "was badly poisoned!",
    "burn": "was burned!",
    "paralysis": "is paralyzed! It may be unable to move!",
    "sleep": "fell asleep!",
    "freeze": "was frozen solid!",
}

EnemySpec = Union[Creature, Tuple[int, int]]


def default_target_for(move: Move, user: Creature, opponents: Sequence[Creature], rng: random.Random) -> Optional[str]:
    """Target id a headless chooser should pick for ``move``."""
    if move.target in SELF_TARGETS:
        return user.id
    if move.target in OPPONENT_GROUP_TARGETS or move.target in EVERYONE_ELSE_TARGETS:
        return TARGET_ALL_OPPONENTS
    if move.target in FIELD_TARGETS:
        return TARGET_ALL_FIELD
    if move.target in ALLY_GROUP_TARGETS:
        return TARGET_ALL_ALLIES
    living = [c for c in opponents if not c.is_fainted]
    if not living:
        return None
    return living[rng.randrange(len(living))].id


class BattleEngine:
    def __init__(
        self,
        catalog: Catalog,
        trainer: Trainer,
        *,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
        tree: Optional[SkillTree] = None,
    ):
        self.catalog = catalog
        self.trainer = trainer
        self.rng = rng or random.Random()
        self.settings = settings or Settings.defaults()
        self.tree = tree
        self.state: Optional[BattleState] = None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def _new_state(self, enemies: List[Creature], *, is_wild: bool, enemy_trainer: Optional[Trainer] = None) -> BattleState:
        data = self.settings.data
        players = active_creatures(self.trainer)
        for c in players + enemies:
            reset_stat_modifiers(c.stat_modifiers)
            c.confusion_turns = None
        return BattleState(
            player_trainer=self.trainer,
            active_creatures=players,
            enemy_creatures=enemies,
            is_wild=is_wild,
            enemy_trainer=enemy_trainer,
            trainer_action_interval=trainer_action_interval(self.trainer, data.default_trainer_action_interval),
            log_limit=data.battle_log_limit,
        )

    def start_wild_battle(self, enemies: Sequence[EnemySpec]) -> BattleState:
        """Begin a wild battle against creatures or ``(species_id, level)`` pairs."""
        wild: List[Creature] = []
        for spec in enemies:
            if isinstance(spec, Creature):
                wild.append(spec)
            else:
                species_id, level = spec
                wild.append(create_creature(self.catalog, species_id, level, is_wild=True, rng=self.rng, tree=self.tree))
        self.state = self._new_state(wild[:MAX_ACTIVE_CREATURES], is_wild=True)
        for c in self.state.enemy_creatures:
            self.state.add_log(f"Wild {c.name} appeared!")
        logger.info("BattleStart", kind="wild", enemies=len(self.state.enemy_creatures))
        return self.state

    def start_trainer_battle(self, enemy_trainer: Trainer, intro: Optional[str] = None) -> BattleState:
        enemies = [c for c in enemy_trainer.party if not c.is_fainted][:MAX_ACTIVE_CREATURES]
        self.state = self._new_state(enemies, is_wild=False, enemy_trainer=enemy_trainer)
        self.state.add_log(intro or enemy_trainer.intro or f"{enemy_trainer.name} wants to battle!")
        logger.info("BattleStart", kind="trainer", opponent=enemy_trainer.name, enemies=len(enemies))
        return self.state

    def _require_state(self) -> BattleState:
        if self.state is None:
            raise RuntimeError("No battle in progress")
        return self.state

    def _set_phase(self, phase: BattlePhase) -> None:
        st = self._require_state()
        if st.phase != phase:
            logger.debug("PhaseChange", old=st.phase.value, new=phase.value, turn=st.turn_number)
        st.phase = phase
        if phase.is_terminal:
            st.active = False

    def _enter_selection(self) -> None:
        st = self._require_state()
        st.selected_creature_index = 0
        if st.is_trainer_turn():
            st.turn_plan = None
            self._set_phase(BattlePhase.TRAINER_SELECT)
        else:
            st.turn_plan = TurnPlan()
            self._set_phase(BattlePhase.CREATURE_SELECT)
            if not st.selectable_creatures():
                self._set_phase(BattlePhase.RESOLUTION)

    def advance_from_start(self) -> BattlePhase:
        st = self._require_state()
        if st.phase == BattlePhase.START:
            self._pause(self.settings.data.start_delay_ms)
            self._enter_selection()
        return st.phase

    def is_trainer_turn(self) -> bool:
        return self._require_state().is_trainer_turn()

    # ------------------------------------------------------------------
    # Turn plan
    # ------------------------------------------------------------------
    def set_trainer_action(self, action: TrainerAction) -> bool:
        st = self._require_state()
        if st.phase != BattlePhase.TRAINER_SELECT:
            return False
        st.turn_plan = TurnPlan(trainer_action=action)
        st.selected_creature_index = 0
        if st.selectable_creatures():
            self._set_phase(BattlePhase.CREATURE_SELECT)
        else:
            self._set_phase(BattlePhase.RESOLUTION)
        return True

    def current_selector(self) -> Optional[Creature]:
        st = self._require_state()
        if st.phase != BattlePhase.CREATURE_SELECT:
            return None
        choices = st.selectable_creatures()
        if st.selected_creature_index < len(choices):
            return choices[st.selected_creature_index]
        return None

    def _valid_target(self, target_id: str) -> bool:
        st = self._require_state()
        if target_id in GROUP_TARGETS:
            return True
        target = st.find_creature(target_id)
        return target is not None and not target.is_fainted

    def _advance_cursor(self) -> None:
        st = self._require_state()
        st.selected_creature_index += 1
        if st.selected_creature_index >= len(st.selectable_creatures()):
            self._set_phase(BattlePhase.RESOLUTION)

    def set_creature_action(self, move_id: str, target_id: str) -> bool:
        """Record the current creature's move; returns False when it isn't legal."""
        creature = self.current_selector()
        if creature is None:
            return False
        move_id = normalize_move_id(move_id)
        if move_id not in creature.moves or not self._valid_target(target_id):
            return False
        st = self._require_state()
        if st.turn_plan is None:
            st.turn_plan = TurnPlan()
        st.turn_plan.creature_actions.append(CreatureAction(creature.id, move_id, target_id))
        self._advance_cursor()
        return True

    def skip_creature_action(self) -> bool:
        """Let the current creature sit this turn out."""
        if self.current_selector() is None:
            return False
        self._advance_cursor()
        return True

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------
    def effective_speed(self, creature: Creature) -> float:
        speed = creature.speed * stage_multiplier("speed", creature.stat_modifiers.get("speed", 0))
        if not self._require_state().is_enemy(creature):
            speed *= passive_stat_multiplier(self.trainer, "speed")
        return speed

    def _enemy_action(self, enemy: Creature) -> Optional[CreatureAction]:
        st = self._require_state()
        if not enemy.moves:
            logger.warn("EnemyHasNoMoves", id=enemy.id)
            return None
        targets = st.living_players()
        if not targets:
            return None
        move_id = enemy.moves[self.rng.randrange(len(enemy.moves))]
        target = targets[self.rng.randrange(len(targets))]
        return CreatureAction(enemy.id, move_id, target.id)

    def build_action_queue(self) -> List[QueuedAction]:
        """Highest priority first; equal priorities keep insertion order."""
        st = self._require_state()
        plan = st.turn_plan or TurnPlan()
        queue: List[QueuedAction] = []
        if plan.trainer_action is not None and st.is_trainer_turn():
            queue.append(QueuedAction(st.player_trainer, plan.trainer_action, PLAYER_TRAINER_PRIORITY))
        if st.enemy_trainer is not None:
            queue.append(QueuedAction(st.enemy_trainer, TrainerAction("skip"), ENEMY_TRAINER_PRIORITY, is_enemy=True))
        for action in plan.creature_actions:
            creature = st.player_creature(action.creature_id)
            if creature is not None and not creature.is_fainted:
                queue.append(QueuedAction(creature, action, self.effective_speed(creature)))
        for enemy in st.living_enemies():
            action = self._enemy_action(enemy)
            if action is not None:
                queue.append(QueuedAction(enemy, action, self.effective_speed(enemy), is_enemy=True))
        queue.sort(key=lambda q: -q.priority)
        st.action_queue = queue
        logger.debug("QueueBuilt", turn=st.turn_number, size=len(queue))
        return queue

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def run_turn(self) -> BattlePhase:
        """Resolve the recorded plan, apply end-of-turn effects and check for the end."""
        st = self._require_state()
        if st.phase != BattlePhase.RESOLUTION:
            return st.phase
        for item in self.build_action_queue():
            if not st.active:
                break
            if self._is_decided():
                break
            if item.actor.current_hp <= 0:
                continue
            st.current_actor_id = item.actor.id
            if item.is_trainer:
                if not item.is_enemy:
                    self._execute_trainer_action(item.action)
            elif self._pre_action_gate(item.actor):
                self._execute_creature_action(item.actor, item.action, item.is_enemy)
            st.current_actor_id = None
            self._pause(self.settings.data.action_delay_ms)
        st.action_queue = []
        if not st.active:
            return st.phase
        if not self._is_decided():
            self._end_of_turn()
        return self.check_battle_end()

    def _is_decided(self) -> bool:
        st = self._require_state()
        return (st.player_trainer.current_hp <= 0
                or not st.living_enemies()
                or not st.living_players())

    def _pre_action_gate(self, creature: Creature) -> bool:
        """Status checks before a creature acts; False blocks the action."""
        st = self._require_state()
        name = creature.name
        if creature.status == "sleep":
            creature.sleep_turns -= 1
            if creature.sleep_turns <= 0 or check_sleep_wake(creature.sleep_turns, self.rng):
                creature.status = None
                creature.sleep_turns = 0
                st.add_log(f"{name} woke up!")
            else:
                st.add_log(f"{name} is fast asleep.")
                return False
        elif creature.status == "freeze":
            if check_freeze_thaw(self.rng):
                creature.status = None
                st.add_log(f"{name} thawed out!")
            else:
                st.add_log(f"{name} is frozen solid!")
                return False
        elif creature.status == "paralysis":
            if check_paralysis(self.rng):
                st.add_log(f"{name} is paralyzed! It can't move!")
                return False

        if creature.confused:
            creature.confusion_turns -= 1
            if creature.confusion_turns <= 0 or check_confusion_end(creature.confusion_turns, self.rng):
                creature.confusion_turns = None
                st.add_log(f"{name} snapped out of confusion!")
            else:
                st.add_log(f"{name} is confused!")
                if check_confusion_self_hit(self.rng):
                    st.add_log("It hurt itself in its confusion!")
                    hit = calculate_damage(creature, creature, CONFUSION_HIT, self.rng)
                    creature.set_hp(creature.current_hp - hit.damage)
                    st.add_damage_number(creature.id, hit.damage, "damage")
                    if creature.is_fainted:
                        self._on_faint(creature)
                    return False
        return True

    # ---- trainer actions ----
    def _execute_trainer_action(self, action: TrainerAction) -> None:
        st = self._require_state()
        trainer = st.player_trainer
        if action.type == "flee":
            if flee_success(self.rng, st.is_wild):
                st.add_log("Got away safely!")
                self._set_phase(BattlePhase.FLED)
            else:
                st.add_log("Can't escape!")
        elif action.type == "item":
            if action.item_id:
                self._use_item(action.item_id)
        elif action.type == "switch":
            st.add_log(f"{trainer.name} called for a switch!")
        elif action.type == "skill":
            skill = get_trainer_skill(action.skill_id or "")
            if skill is not None:
                st.add_log(f"{trainer.name} used {skill.name}!")

    def _item_target(self, item) -> Optional[Creature]:
        st = self._require_state()
        if item.is_revive:
            return next((c for c in st.active_creatures if c.is_fainted), None)
        if item.effect == "heal_hp":
            return next((c for c in st.living_players() if c.current_hp < c.max_hp), None)
        if item.effect == "boost" and item.stat:
            return next(iter(st.living_players()), None)
        return None

    def _use_item(self, item_id: str) -> None:
        """Capture items are spent on the throw; others only when they can take effect."""
        st = self._require_state()
        item = get_item(item_id)
        item_name = item.name if item else item_id
        if st.player_trainer.inventory.get(item_id, 0) <= 0:
            st.add_log(f"You don't have any {item_name}!")
            return
        if is_capture_item(item_id):
            use_item(st.player_trainer, item_id)
            st.add_log(f"Used {item_name}!")
            self._attempt_capture(item.value if item else 1.0)
            return
        target = self._item_target(item) if item else None
        if target is None:
            st.add_log("It won't have any effect.")
            return
        use_item(st.player_trainer, item_id)
        st.add_log(f"Used {item_name}!")
        if item.is_revive:
            target.set_hp(max(1, target.max_hp // 2))
            st.add_damage_number(target.id, target.current_hp, "heal")
            st.add_log(f"{target.name} was revived!")
        elif item.effect == "heal_hp":
            before = target.current_hp
            target.set_hp(before + int(item.value))
            healed = target.current_hp - before
            st.add_damage_number(target.id, healed, "heal")
            st.add_log(f"{target.name} recovered {healed} HP!")
        else:
            change = apply_stat_modifier(target.stat_modifiers, item.stat, int(item.value))
            st.add_log(f"{target.name}'s {stat_display_name(item.stat)} {change.message}")

    def _attempt_capture(self, ball_bonus: float) -> None:
        st = self._require_state()
        if not st.is_wild:
            st.add_log("The trainer blocked the ball!")
            return
        candidates = st.living_enemies()
        if not candidates:
            st.add_log("There is no one to capture!")
            return
        target = candidates[self.rng.randrange(len(candidates))]
        species = self.catalog.get_species(target.species_id)
        capture_rate = species.capture_rate if species else 45
        result = attempt_capture(self.rng, capture_rate, target.max_hp, target.current_hp, ball_bonus, target.status)
        if not result.success:
            st.add_log("Oh no! The creature broke free!")
            return
        st.add_log(f"Gotcha! {target.name} was caught!")
        target.is_wild = False
        add_creature(st.player_trainer, target)
        st.captured_id = target.id
        logger.info("CreatureCaptured", id=target.id, species=target.species_id, shakes=result.shakes)
        self._set_phase(BattlePhase.VICTORY)

    # ---- creature actions ----
    def _resolve_targets(self, attacker: Creature, action: CreatureAction, move: Move, is_enemy: bool) -> List[Creature]:
        st = self._require_state()
        allies = st.living_enemies() if is_enemy else st.living_players()
        opponents = st.living_players() if is_enemy else st.living_enemies()
        target_id = action.target_id
        if move.target in SELF_TARGETS:
            return [attacker]
        if target_id == TARGET_ALL_OPPONENTS or move.target in OPPONENT_GROUP_TARGETS:
            return opponents
        if move.target in EVERYONE_ELSE_TARGETS:
            return opponents + [c for c in allies if c is not attacker]
        if target_id == TARGET_ALL_FIELD or move.target in FIELD_TARGETS:
            return st.living_players() + st.living_enemies()
        if target_id == TARGET_ALL_ALLIES or move.target in ALLY_GROUP_TARGETS:
            return allies
        target = st.find_creature(target_id)
        if target is not None and target.is_fainted:
            # Retarget onto the first standing creature on the same side
            same_side = st.living_enemies() if st.is_enemy(target) else st.living_players()
            target = same_side[0] if same_side else None
        return [target] if target is not None else []

    def _execute_creature_action(self, attacker: Creature, action: CreatureAction, is_enemy: bool) -> None:
        st = self._require_state()
        move = self.catalog.get_move(action.move_id)
        if move is None:
            logger.warn("UnknownMove", move=action.move_id, actor=attacker.id)
            st.add_log(f"{attacker.name} tried to use an unknown move!")
            return
        st.add_log(f"{attacker.name} used {move.name}!")
        targets = self._resolve_targets(attacker, action, move, is_enemy)
        if not targets:
            st.add_log("But there was no target...")
            return
        for target in targets:
            if attacker.is_fainted:
                break
            self._apply_move_to_target(attacker, target, move, is_enemy)

    def _attack_multiplier(self, attacker: Creature, move: Move) -> float:
        if self._require_state().is_enemy(attacker):
            return 1.0
        return passive_stat_multiplier(self.trainer, "atk" if move.category == "physical" else "sp_atk")

    def _defense_multiplier(self, defender: Creature, move: Move) -> float:
        if self._require_state().is_enemy(defender):
            return 1.0
        return passive_stat_multiplier(self.trainer, "def" if move.category == "physical" else "sp_def")

    def _apply_move_to_target(self, attacker: Creature, target: Creature, move: Move, is_enemy: bool) -> None:
        st = self._require_state()
        if target.is_fainted:
            return
        if self.rng.uniform(0, 100) > move.accuracy:
            st.add_log(f"Missed {target.name}!")
            st.add_damage_number(target.id, 0, "miss")
            return
        result = calculate_damage(
            attacker, target, move, self.rng,
            attack_multiplier=self._attack_multiplier(attacker, move),
            defense_multiplier=self._defense_multiplier(target, move),
        )
        if move.category != "status":
            if result.effectiveness == 0:
                st.add_log("It had no effect...")
                return
            if result.damage > 0:
                target.set_hp(target.current_hp - result.damage)
                if not is_enemy and st.is_enemy(target):
                    st.record_participation(target.id, attacker.id)
                st.add_damage_number(target.id, result.damage, "critical" if result.critical else "damage")
                if result.effectiveness > 1:
                    st.add_log("It's super effective!")
                elif result.effectiveness < 1:
                    st.add_log("It's not very effective...")
                if result.critical:
                    st.add_log("A critical hit!")
                if target.status == "freeze" and not target.is_fainted and move.type == "fire":
                    target.status = None
                    st.add_log(f"{target.name} thawed out!")
                if target.is_fainted:
                    self._on_faint(target)
                if is_enemy and not st.is_enemy(target):
                    self._splash_trainer(move, result.damage)
        for effect in move.parsed_effects:
            self._apply_effect(effect, attacker, target, result.damage)

    def _splash_trainer(self, move: Move, damage: int) -> None:
        st = self._require_state()
        trainer = st.player_trainer
        if move.target in SPLASH_TARGETS:
            st.add_log("The attack also hit the trainer!")
            amount = damage
        elif move.power >= GRAZE_POWER:
            st.add_log("The powerful attack grazed the trainer!")
            amount = damage // 2
        else:
            return
        trainer.set_hp(trainer.current_hp - amount)
        st.add_damage_number(trainer.id, amount, "damage")
        if trainer.current_hp <= 0:
            st.add_log("You blacked out!")

    def _apply_effect(self, effect: ParsedEffect, attacker: Creature, target: Creature, damage: int) -> None:
        st = self._require_state()
        if effect.chance < 100 and self.rng.uniform(0, 100) > effect.chance:
            return
        subject = attacker if effect.target == "self" else target
        if subject.is_fainted:
            return
        name = subject.name

        if effect.type == "stat-change" and effect.stat and effect.stages:
            change = apply_stat_modifier(subject.stat_modifiers, effect.stat, effect.stages)
            st.add_log(f"{name}'s {stat_display_name(effect.stat)} {change.message}")
        elif effect.type == "status" and effect.status:
            self._inflict_status(subject, effect.status)
        elif effect.type == "heal" and effect.heal_percent:
            amount = math.floor(subject.max_hp * effect.heal_percent / 100)
            subject.set_hp(subject.current_hp + amount)
            st.add_damage_number(subject.id, amount, "heal")
            st.add_log(f"{name} regained health!")
        elif effect.type == "drain" and effect.drain_percent and damage > 0:
            amount = max(1, math.floor(damage * effect.drain_percent / 100))
            attacker.set_hp(attacker.current_hp + amount)
            st.add_damage_number(attacker.id, amount, "heal")
            st.add_log(f"{attacker.name} drained energy!")
        elif effect.type == "recoil" and effect.recoil_percent and damage > 0:
            amount = max(1, math.floor(damage * effect.recoil_percent / 100))
            attacker.set_hp(attacker.current_hp - amount)
            st.add_damage_number(attacker.id, amount, "damage")
            st.add_log(f"{attacker.name} is hit with recoil!")
            if attacker.is_fainted:
                self._on_faint(attacker)

    def _inflict_status(self, subject: Creature, status: str) -> None:
        st = self._require_state()
        if status == "confusion":
            if subject.confused:
                st.add_log("But it failed!")
                return
            subject.confusion_turns = self.rng.randint(2, 5)
            st.add_log(f"{subject.name} became confused!")
            return
        if status not in _INFLICT_MESSAGES:
            return      # flinch has no lasting state
        if not can_apply_major_status(subject.status):
            st.add_log("But it failed!")
            return
        if any(t in subject.types for t in STATUS_IMMUNITIES.get(status, ())):
            st.add_log(f"It doesn't affect {subject.name}...")
            return
        subject.status = status
        if status == "sleep":
            subject.sleep_turns = self.rng.randint(1, 3)
        elif status == "badly_poisoned":
            subject.toxic_counter = 1
        st.add_log(f"{subject.name} {_INFLICT_MESSAGES[status]}")

    # ---- fainting & experience ----
    def _on_faint(self, creature: Creature) -> None:
        st = self._require_state()
        st.add_log(f"{creature.name} fainted!")
        if st.is_enemy(creature):
            self._award_exp(creature)

    def _award_exp(self, fainted: Creature) -> None:
        st = self._require_state()
        species = self.catalog.get_species(fainted.species_id)
        exp_yield = species.exp_yield if species else DEFAULT_EXP_YIELD
        trainer_battle = not st.is_wild
        participants = st.participation.get(fainted.id, [])
        amount = exp_yield_for_faint(exp_yield, fainted.level, trainer_battle, max(1, len(participants)))
        for creature in st.active_creatures:
            if creature.id not in participants or creature.is_fainted:
                continue
            for line in gain_exp(self.catalog, creature, amount, self.tree):
                st.add_log(line)
            st.exp_awarded[creature.id] = st.exp_awarded.get(creature.id, 0) + amount

        trainer_exp = math.floor(exp_yield_for_faint(exp_yield, fainted.level, trainer_battle, 1) * TRAINER_EXP_SHARE)
        if trainer_exp > 0:
            levels = add_trainer_exp(st.player_trainer, trainer_exp)
            st.trainer_exp_awarded += trainer_exp
            st.add_log(f"Trainer gained {trainer_exp} Exp. Points!")
            if levels:
                st.add_log(f"Trainer leveled up to Lv. {st.player_trainer.level}!")
                st.add_log(f"Trainer gained {levels} Skill Point{'s' if levels > 1 else ''}!")

    # ---- end of turn ----
    def _end_of_turn(self) -> None:
        st = self._require_state()
        for creature in st.living_players() + st.living_enemies():
            if not creature.status:
                continue
            if creature.status == "badly_poisoned":
                creature.toxic_counter = max(1, creature.toxic_counter)
            tick = process_status_damage(creature.status, creature.max_hp, creature.toxic_counter)
            if tick.damage <= 0:
                continue
            creature.set_hp(creature.current_hp - tick.damage)
            st.add_log(f"{creature.name} {tick.message}")
            st.add_damage_number(creature.id, tick.damage, "damage")
            if creature.status == "badly_poisoned":
                creature.toxic_counter += 1
            if creature.is_fainted:
                self._on_faint(creature)

    def check_battle_end(self) -> BattlePhase:
        st = self._require_state()
        if st.phase.is_terminal:
            return st.phase
        if st.player_trainer.current_hp <= 0:
            self._set_phase(BattlePhase.DEFEAT)
        elif not st.living_enemies():
            self._set_phase(BattlePhase.VICTORY)
        elif not st.living_players():
            st.add_log("All your creatures fainted!")
            self._set_phase(BattlePhase.DEFEAT)
        else:
            st.turn_number += 1
            self._enter_selection()
        return st.phase

    def end_battle(self) -> BattleSummary:
        """Reset volatile battle state and report the outcome."""
        st = self._require_state()
        st.active = False
        players = list(st.player_trainer.party)
        if st.captured_id is not None:
            players += [c for c in st.enemy_creatures if c.id == st.captured_id and c not in players]
        for c in players:
            c.clear_volatile()
        summary = BattleSummary(
            outcome=st.phase.value,
            turns=st.turn_number,
            exp_awarded=dict(st.exp_awarded),
            trainer_exp=st.trainer_exp_awarded,
            captured_id=st.captured_id,
            log=list(st.history),
        )
        logger.info("BattleEnd", outcome=summary.outcome, turns=summary.turns, captured=summary.captured_id)
        return summary

    # ------------------------------------------------------------------
    # Headless play
    # ------------------------------------------------------------------
    def auto_select(self, rng: Optional[random.Random] = None) -> BattlePhase:
        """Fill in random legal choices until the turn is ready to resolve."""
        rng = rng or self.rng
        st = self._require_state()
        if st.phase == BattlePhase.START:
            self.advance_from_start()
        if st.phase == BattlePhase.TRAINER_SELECT:
            self.set_trainer_action(self._auto_trainer_action())
        while st.phase == BattlePhase.CREATURE_SELECT:
            creature = self.current_selector()
            if creature is None:
                break
            known = [m for m in (self.catalog.get_move(mid) for mid in creature.moves) if m is not None]
            move = known[rng.randrange(len(known))] if known else None
            target_id = default_target_for(move, creature, st.enemy_creatures, rng) if move else None
            if move is None or target_id is None or not self.set_creature_action(move.id, target_id):
                self.skip_creature_action()
        return st.phase

    def _auto_trainer_action(self) -> TrainerAction:
        st = self._require_state()
        hurt = [c for c in st.living_players() if c.current_hp * 3 < c.max_hp]
        if hurt and st.player_trainer.inventory.get("potion", 0) > 0:
            return TrainerAction("item", item_id="potion")
        return TrainerAction("command")

    def run_auto(self, max_turns: int = 100) -> BattleSummary:
        st = self._require_state()
        resolved = 0
        while not st.phase.is_terminal and resolved < max_turns:
            self.auto_select()
            self.run_turn()
            resolved += 1
        return self.end_battle()

    def pop_damage_numbers(self) -> List[DamageNumber]:
        st = self._require_state()
        out, st.damage_numbers = st.damage_numbers, []
        return out

    def _pause(self, ms: int) -> None:
        if ms > 0:
            time.sleep(ms / 1000)


__all__ = [
    "PLAYER_TRAINER_PRIORITY", "ENEMY_TRAINER_PRIORITY", "TRAINER_EXP_SHARE", "SPLASH_TARGETS",
    "STATUS_IMMUNITIES", "BattleEngine", "default_target_for",
]
