"""The simulation engine that drives bullets, rules and the action queue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .bullet import MIN_FADE_OUT, Bullet, new_chain_id
from .grid import Cell, Grid
from .performance import BulletManager
from .rules import Action, ActionType, BasicRule, Rule, RuleSet
from .types import CellState, Pattern3x3

DEFAULT_MAX_ACTIONS_PER_FRAME = 2000
DEFAULT_GHOST_FADE_TICKS = 30
DEFAULT_DEATH_COOLDOWN_MULTIPLIER = 1.0
UNLIMITED_ACTIONS = -1


@dataclass(frozen=True)
class SimulationStats:
    """A snapshot of the simulation's counters."""

    step_counter: int
    frame_counter: int
    live_bullets: int
    dead_bullets: int
    queued_actions: int
    paused: bool


class RuleRegistry:
    """Named rules and rule sets, plus the default rule set for new bullets."""

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}
        self._rule_sets: Dict[str, RuleSet] = {}
        self._default_rule_set = RuleSet("Default")

    def register_rule(self, name: str, rule: Rule) -> None:
        """Store a rule under a name, replacing any earlier one."""
        self._rules[name] = rule

    def rule(self, name: str) -> Optional[Rule]:
        """The rule registered under ``name``, or None."""
        return self._rules.get(name)

    def register_rule_set(self, name: str, rule_set: RuleSet) -> None:
        """Store a rule set under a name, replacing any earlier one."""
        self._rule_sets[name] = rule_set

    def rule_set(self, name: str) -> Optional[RuleSet]:
        """The rule set registered under ``name``, or None."""
        return self._rule_sets.get(name)

    def default_rule_set(self) -> RuleSet:
        """A copy of the default rule set."""
        return self._default_rule_set.clone()


class SimulationEngine:
    """Steps the automaton: ages bullets, applies their rules, runs actions."""

    def __init__(self, width: int, height: int) -> None:
        self.grid = Grid(width, height)
        self.bullet_manager = BulletManager(width, height)
        self.rule_registry = RuleRegistry()
        self.paused = False
        self.step_counter = 0
        self.frame_counter = 0
        self.death_cooldown_multiplier = DEFAULT_DEATH_COOLDOWN_MULTIPLIER
        self.last_action_count = 0
        self.last_queued_count = 0
        self._max_actions_per_frame = DEFAULT_MAX_ACTIONS_PER_FRAME
        self._ghost_fade_ticks = DEFAULT_GHOST_FADE_TICKS
        self._action_queue: List[Action] = []
        self._assigned_default_rule_set: Optional[RuleSet] = None

    # Settings -----------------------------------------------------------

    @property
    def max_actions_per_frame(self) -> int:
        """Actions accepted per step; -1 means unlimited."""
        return self._max_actions_per_frame

    @max_actions_per_frame.setter
    def max_actions_per_frame(self, value: int) -> None:
        if value < UNLIMITED_ACTIONS:
            value = UNLIMITED_ACTIONS
        elif value == 0:
            value = 1
        self._max_actions_per_frame = value

    @property
    def ghost_fade_ticks(self) -> int:
        """How many ticks ghosts fade over (at least 1)."""
        return self._ghost_fade_ticks

    @ghost_fade_ticks.setter
    def ghost_fade_ticks(self, ticks: int) -> None:
        self._ghost_fade_ticks = max(ticks, 1)

    @property
    def default_rule_set(self) -> RuleSet:
        """A copy of the registry's default rule set.

        Assigning stores a rule set on the engine but reads still come
        from the registry.
        """
        return self.rule_registry.default_rule_set()

    @default_rule_set.setter
    def default_rule_set(self, rule_set: Optional[RuleSet]) -> None:
        self._assigned_default_rule_set = rule_set

    @property
    def queued_actions(self) -> int:
        """Number of actions currently waiting in the queue."""
        return len(self._action_queue)

    # Bullets ------------------------------------------------------------

    def add_bullet(self, x: int, y: int, rule_set: Optional[RuleSet]) -> Bullet:
        """Create a bullet at (x, y) with its own copy of ``rule_set``."""
        bullet = self.bullet_manager.create_bullet(x, y, rule_set)
        self.grid.set_bullet_at(x, y, bullet)
        return bullet

    def remove_bullet(self, x: int, y: int) -> None:
        """Kill and remove the bullet at (x, y), starting its chain's cooldown."""
        bullet = self.grid.remove_bullet_at(x, y)
        if bullet is None:
            return
        bullet.kill()
        self.bullet_manager.remove_bullet(bullet)
        cell = self.grid.cell(x, y)
        if cell is not None:
            self._mark_death(cell, bullet)

    def add_bullet_with_default_rules(self, x: int, y: int) -> Optional[Bullet]:
        """Place a bullet on a new chain with the default rules; None if refused."""
        chain_id = new_chain_id()
        cell = self.grid.cell(x, y)
        if cell is None or not cell.can_accept_new_bullet(self.step_counter, chain_id):
            return None
        rule_set = self.default_rule_set
        if rule_set is None:
            rule_set = self.basic_rule_set()
        bullet = self.bullet_manager.create_bullet(x, y, rule_set)
        bullet.chain_id = chain_id
        self.grid.set_bullet_at(x, y, bullet)
        return bullet

    def basic_rule_set(self) -> RuleSet:
        """A rule set whose single rule keeps a living cell alive."""
        rule_set = RuleSet("Basic")
        rule = BasicRule("Stay Alive")
        any_, alive = CellState.ANY, CellState.ALIVE
        area = (
            (any_, any_, any_),
            (any_, alive, any_),
            (any_, any_, any_),
        )
        rule.add_pattern(Pattern3x3(area, area))
        rule_set.add_rule(rule)
        return rule_set

    # Stepping -----------------------------------------------------------

    def update(self) -> None:
        """Advance one frame, and one simulation step unless paused."""
        self.frame_counter += 1
        if self.paused:
            return
        self.step_counter += 1
        self.last_queued_count = 0
        self.bullet_manager.update()
        self._sync_grid_with_bullets()
        self._apply_rules_to_bullets()
        self._process_action_queue()

    def clear(self) -> None:
        """Remove every bullet and drop all queued actions."""
        self.grid.clear()
        self.bullet_manager.clear()
        self._action_queue.clear()

    def stats(self) -> SimulationStats:
        """Current counters of the simulation."""
        live, pooled = self.bullet_manager.stats()
        return SimulationStats(
            step_counter=self.step_counter,
            frame_counter=self.frame_counter,
            live_bullets=live,
            dead_bullets=pooled,
            queued_actions=len(self._action_queue),
            paused=self.paused,
        )

    # Internals ----------------------------------------------------------

    def _cooldown_for(self, bullet: Bullet) -> int:
        fade_out = max(int(bullet.max_lifetime / 4), MIN_FADE_OUT)
        return int(fade_out * self.death_cooldown_multiplier)

    def _mark_death(self, cell: Cell, bullet: Bullet) -> None:
        cell.mark_death(self.step_counter, self._cooldown_for(bullet), bullet.chain_id)

    def _apply_rules_to_bullets(self) -> None:
        dead: List[Bullet] = []
        for bullet in self.bullet_manager.living_bullets():
            if not bullet.alive:
                dead.append(bullet)
                continue
            if bullet.is_in_fade_out():
                continue
            if bullet.max_lifetime - bullet.lifetime <= 0:
                continue
            if bullet.rule_set is None:
                continue
            actions = bullet.rule_set.apply(self.grid, bullet.x, bullet.y)
            if actions:
                self._queue_actions(actions)
        for bullet in dead:
            self.bullet_manager.remove_bullet(bullet)

    def _queue_actions(self, actions: List[Action]) -> None:
        if self._max_actions_per_frame != UNLIMITED_ACTIONS:
            room = self._max_actions_per_frame - len(self._action_queue)
            if room <= 0:
                return
            actions = actions[:room]
        self._action_queue.extend(actions)
        self.last_queued_count += len(actions)

    def _process_action_queue(self) -> None:
        actions, self._action_queue = self._action_queue, []
        self.last_action_count = len(actions)
        handlers: Dict[ActionType, Callable[[Action], None]] = {
            ActionType.CREATE_BULLET: self._create_bullet,
            ActionType.KILL_BULLET: self._kill_bullet,
            ActionType.MOVE_BULLET: self._move_bullet,
            ActionType.MODIFY_BULLET: self._modify_bullet,
        }
        for action in actions:
            handler = handlers.get(action.type)
            if handler is not None:
                handler(action)

    def _create_bullet(self, action: Action) -> None:
        if not self.grid.in_bounds(action.x, action.y):
            return
        rule_set: Optional[RuleSet] = None
        max_lifetime = 0
        chain_id = 0
        data: Any = action.data
        if isinstance(data, dict):
            if isinstance(data.get("rule_set"), RuleSet):
                rule_set = data["rule_set"]
            if isinstance(data.get("max_lifetime"), int):
                max_lifetime = data["max_lifetime"]
            if isinstance(data.get("chain_id"), int):
                chain_id = data["chain_id"]
        elif isinstance(data, RuleSet):
            rule_set = data
        if chain_id == 0:
            chain_id = new_chain_id()
        cell = self.grid.cell(action.x, action.y)
        if cell is None or not cell.can_accept_new_bullet(self.step_counter, chain_id):
            return
        if rule_set is None:
            rule_set = self.rule_registry.default_rule_set()
        bullet = self.bullet_manager.create_bullet(action.x, action.y, rule_set)
        bullet.chain_id = chain_id
        self.grid.set_bullet_at(action.x, action.y, bullet)
        if max_lifetime > 0:
            bullet.max_lifetime = max_lifetime

    def _kill_bullet(self, action: Action) -> None:
        cell = self.grid.cell(action.x, action.y)
        if cell is None or not cell.is_alive:
            return
        self.remove_bullet(action.x, action.y)

    def _move_bullet(self, action: Action) -> None:
        target = action.data
        if not isinstance(target, (tuple, list)) or len(target) != 2:
            return
        new_x, new_y = target
        if not self.grid.in_bounds(new_x, new_y):
            return
        bullet = self.grid.remove_bullet_at(action.x, action.y)
        if bullet is None:
            return
        destination = self.grid.cell(new_x, new_y)
        if destination is not None and destination.is_alive:
            bullet.kill()
            self.bullet_manager.remove_bullet(bullet)
            return
        self.grid.set_bullet_at(new_x, new_y, bullet)

    def _modify_bullet(self, action: Action) -> None:
        cell = self.grid.cell(action.x, action.y)
        if cell is None or not cell.is_alive:
            return
        if callable(action.data):
            action.data(cell.bullet)

    def _sync_grid_with_bullets(self) -> None:
        for _, _, cell in self.grid.cells():
            bullet = cell.bullet
            if bullet is not None and not bullet.alive:
                self._mark_death(cell, bullet)
                cell.remove_bullet()