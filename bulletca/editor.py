"""Interactive editor for the precedent/consequent patterns of a custom rule."""

from __future__ import annotations

from enum import Enum, auto
from typing import List, Optional, Tuple

from .bullet import Bullet
from .rules import BasicRule, RuleSet
from .simulation import UNLIMITED_ACTIONS, SimulationEngine
from .types import Area, CellState, Pattern3x3

EDITOR_X = 600
EDITOR_Y = 10
EDITOR_WIDTH = 280
EDITOR_HEIGHT = 500
GRID_SIZE = 3
CELL_SIZE = 20
GRID_SPACING = 100

ACTIONS_STEP = 100
MIN_LIMITED_ACTIONS = 100
RESTORED_ACTION_LIMIT = 1000
LIFETIME_STEP = 5
MIN_LIFETIME = 5
MAX_LIFETIME = 500
INITIAL_LIFETIME = 30

_NEXT_STATE = {
    CellState.EMPTY: CellState.ALIVE,
    CellState.ALIVE: CellState.ANY,
    CellState.ANY: CellState.EMPTY,
}

_KEY_STATES = {}  # filled below, after EditorKey is defined


class EditorKey(Enum):
    """Keys the editor reacts to."""

    NEW_PATTERN = auto()
    DELETE_PATTERN = auto()
    PREVIOUS_PATTERN = auto()
    NEXT_PATTERN = auto()
    SET_EMPTY = auto()
    SET_ALIVE = auto()
    SET_ANY = auto()
    TEST_BULLET = auto()
    CLEAR = auto()
    MORE_ACTIONS = auto()
    FEWER_ACTIONS = auto()
    TOGGLE_UNLIMITED = auto()
    SHORTER_LIFETIME = auto()
    LONGER_LIFETIME = auto()


_KEY_STATES.update(
    {
        EditorKey.SET_EMPTY: CellState.EMPTY,
        EditorKey.SET_ALIVE: CellState.ALIVE,
        EditorKey.SET_ANY: CellState.ANY,
    }
)


def _uniform_area(state: CellState) -> Area:
    return tuple(tuple(state for _ in range(GRID_SIZE)) for _ in range(GRID_SIZE))


def _with_cell(area: Area, x: int, y: int, state: CellState) -> Area:
    return tuple(
        tuple(state if (cx, cy) == (x, y) else value for cx, value in enumerate(row))
        for cy, row in enumerate(area)
    )


class RuleEditor:
    """Edits the patterns of a custom rule and feeds it to the simulation."""

    def __init__(self, simulation: SimulationEngine) -> None:
        self.simulation = simulation
        self.current_rule = BasicRule("Custom Rule")
        self.current_rule_set = RuleSet("Custom")
        self.selected_pattern = 0
        self.precedent_origin = (EDITOR_X + 10, EDITOR_Y + 120)
        self.consequent_origin = (EDITOR_X + GRID_SPACING + 10, EDITOR_Y + 120)
        self._initialize_default_pattern()

    def _initialize_default_pattern(self) -> None:
        any_, alive, empty = CellState.ANY, CellState.ALIVE, CellState.EMPTY
        condition = (
            (any_, any_, any_),
            (any_, alive, any_),
            (any_, any_, any_),
        )
        result = (
            (alive, any_, alive),
            (any_, empty, any_),
            (alive, any_, alive),
        )
        self.current_rule.add_pattern(Pattern3x3(condition, result))
        self.current_rule_set.add_rule(self.current_rule)
        self.current_rule_set.default_lifetime = INITIAL_LIFETIME

    # Selection ----------------------------------------------------------

    @property
    def pattern(self) -> Optional[Pattern3x3]:
        """The currently selected pattern, if the selection is valid."""
        patterns = self.current_rule.patterns
        if 0 <= self.selected_pattern < len(patterns):
            return patterns[self.selected_pattern]
        return None

    # Input --------------------------------------------------------------

    def handle_key(self, key: EditorKey, cursor: Tuple[int, int] = (0, 0)) -> None:
        """React to a key press; ``cursor`` is the screen position of the pointer."""
        if key is EditorKey.NEW_PATTERN:
            self.add_new_pattern()
        elif key is EditorKey.DELETE_PATTERN:
            self.remove_current_pattern()
        elif key is EditorKey.PREVIOUS_PATTERN:
            if self.selected_pattern > 0:
                self.selected_pattern -= 1
        elif key is EditorKey.NEXT_PATTERN:
            if self.selected_pattern < len(self.current_rule.patterns) - 1:
                self.selected_pattern += 1
        elif key in _KEY_STATES:
            hit = self.screen_to_grid(*cursor)
            if hit is not None:
                grid_x, grid_y, is_consequent = hit
                self.set_cell_state(grid_x, grid_y, _KEY_STATES[key], is_consequent)
        elif key is EditorKey.TEST_BULLET:
            self.create_test_bullet()
        elif key is EditorKey.CLEAR:
            self.clear_all_bullets()
        elif key is EditorKey.MORE_ACTIONS:
            current = self.simulation.max_actions_per_frame
            self.simulation.max_actions_per_frame = current + ACTIONS_STEP
        elif key is EditorKey.FEWER_ACTIONS:
            current = self.simulation.max_actions_per_frame
            self.simulation.max_actions_per_frame = max(
                current - ACTIONS_STEP, MIN_LIMITED_ACTIONS
            )
        elif key is EditorKey.TOGGLE_UNLIMITED:
            if self.simulation.max_actions_per_frame == UNLIMITED_ACTIONS:
                self.simulation.max_actions_per_frame = RESTORED_ACTION_LIMIT
            else:
                self.simulation.max_actions_per_frame = UNLIMITED_ACTIONS
        elif key is EditorKey.SHORTER_LIFETIME:
            lifetime = self.current_rule_set.default_lifetime
            self.current_rule_set.default_lifetime = max(lifetime - LIFETIME_STEP, MIN_LIFETIME)
        elif key is EditorKey.LONGER_LIFETIME:
            lifetime = self.current_rule_set.default_lifetime
            self.current_rule_set.default_lifetime = min(lifetime + LIFETIME_STEP, MAX_LIFETIME)
        self.apply_rules()

    def handle_click(self, screen_x: int, screen_y: int) -> None:
        """Cycle the clicked cell Empty -> Alive -> Any -> Empty."""
        hit = self.screen_to_grid(screen_x, screen_y)
        pattern = self.pattern
        if hit is not None and pattern is not None:
            grid_x, grid_y, is_consequent = hit
            area = pattern.result if is_consequent else pattern.condition
            new_state = _NEXT_STATE[area[grid_y][grid_x]]
            self.set_cell_state(grid_x, grid_y, new_state, is_consequent)
        self.apply_rules()

    def _in_grid(self, origin: Tuple[int, int], screen_x: int, screen_y: int) -> bool:
        ox, oy = origin
        span = GRID_SIZE * CELL_SIZE
        return ox <= screen_x < ox + span and oy <= screen_y < oy + span

    def screen_to_grid(
        self, screen_x: int, screen_y: int
    ) -> Optional[Tuple[int, int, bool]]:
        """(grid_x, grid_y, is_consequent) under a screen point, or None."""
        if self._in_grid(self.precedent_origin, screen_x, screen_y):
            origin, is_consequent = self.precedent_origin, False
        elif self._in_grid(self.consequent_origin, screen_x, screen_y):
            origin, is_consequent = self.consequent_origin, True
        else:
            return None
        grid_x = (screen_x - origin[0]) // CELL_SIZE
        grid_y = (screen_y - origin[1]) // CELL_SIZE
        if 0 <= grid_x < GRID_SIZE and 0 <= grid_y < GRID_SIZE:
            return grid_x, grid_y, is_consequent
        return None

    # Editing ------------------------------------------------------------

    def set_cell_state(
        self, grid_x: int, grid_y: int, state: CellState, is_consequent: bool
    ) -> None:
        """Set one cell of the selected pattern's condition or result."""
        patterns = self.current_rule.patterns
        if self.selected_pattern >= len(patterns):
            return
        old = patterns[self.selected_pattern]
        if is_consequent:
            edited = Pattern3x3(old.condition, _with_cell(old.result, grid_x, grid_y, state))
        else:
            edited = Pattern3x3(_with_cell(old.condition, grid_x, grid_y, state), old.result)
        patterns[self.selected_pattern] = edited
        self._rebuild_rule(patterns)

    def add_new_pattern(self) -> None:
        """Append an all-empty pattern and select it."""
        empty = _uniform_area(CellState.EMPTY)
        self.current_rule.add_pattern(Pattern3x3(empty, empty))
        self.selected_pattern = len(self.current_rule.patterns) - 1
        self._update_rule_set()

    def remove_current_pattern(self) -> None:
        """Remove the selected pattern, always keeping at least one."""
        patterns = self.current_rule.patterns
        if len(patterns) <= 1:
            return
        del patterns[self.selected_pattern : self.selected_pattern + 1]
        self._rebuild_rule(patterns)
        if self.selected_pattern >= len(patterns):
            self.selected_pattern = len(patterns) - 1

    def _rebuild_rule(self, patterns: List[Pattern3x3]) -> None:
        rule = BasicRule(self.current_rule.name)
        for pattern in patterns:
            rule.add_pattern(pattern)
        self.current_rule = rule
        self._update_rule_set()

    def _update_rule_set(self) -> None:
        self.current_rule_set = RuleSet("Custom")
        self.current_rule_set.add_rule(self.current_rule)

    # Simulation ---------------------------------------------------------

    def apply_rules(self) -> None:
        """Register the current rule set as "custom" and as the default."""
        self.simulation.rule_registry.register_rule_set("custom", self.current_rule_set.clone())
        self.simulation.default_rule_set = self.current_rule_set.clone()

    def create_test_bullet(self) -> Bullet:
        """Place a bullet with the current rules at the centre of the grid."""
        self.apply_rules()
        grid = self.simulation.grid
        return self.simulation.add_bullet(
            grid.width // 2, grid.height // 2, self.current_rule_set
        )

    def clear_all_bullets(self) -> None:
        """Kill every managed bullet and empty the grid."""
        for bullet in self.simulation.bullet_manager.living_bullets():
            bullet.kill()
        self.simulation.grid.clear()

    # Display ------------------------------------------------------------

    def status_lines(self) -> List[str]:
        """The text the editor panel shows, top to bottom."""
        max_actions = self.simulation.max_actions_per_frame
        if max_actions == UNLIMITED_ACTIONS:
            perf = "(+/-) Max Actions: UNLIMITED"
        else:
            perf = f"(+/-) Max Actions: {max_actions}"
        return [
            "CA Rule Editor",
            f"Pattern {self.selected_pattern + 1}/{len(self.current_rule.patterns)}",
            "Precedent",
            "Consequent",
            "Instructions:",
            "Click grids: Edit cells",
            "1: Empty  2: Alive  3: Any",
            "←→: Navigate patterns",
            "N: New pattern",
            "Del: Remove pattern",
            "Space: Create test bullet",
            "C: Clear all",
            perf,
            f"Actions: {self.simulation.last_action_count} p/ "
            f"{self.simulation.last_queued_count}",
            f"([/])Step Limit: {self.current_rule_set.default_lifetime}",
        ]