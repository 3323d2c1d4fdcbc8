"""The automaton playground: simulation, rule editor and input handling."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .bullet import Bullet
from .editor import EditorKey, RuleEditor
from .simulation import SimulationEngine

SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
GRID_WIDTH = 100
GRID_HEIGHT = 100
WINDOW_TITLE = "Cellular Automata Playground"

DEFAULT_TPS = 240
TPS_STEP = 30
PIXELS_PER_CELL = 6
COOLDOWN_STEP = 0.25
MAX_COOLDOWN_MULTIPLIER = 3.0

_EDITOR_KEYS = {
    "n": EditorKey.NEW_PATTERN,
    "delete": EditorKey.DELETE_PATTERN,
    "left": EditorKey.PREVIOUS_PATTERN,
    "right": EditorKey.NEXT_PATTERN,
    "1": EditorKey.SET_EMPTY,
    "2": EditorKey.SET_ALIVE,
    "3": EditorKey.SET_ANY,
    "space": EditorKey.TEST_BULLET,
    "c": EditorKey.CLEAR,
    "=": EditorKey.MORE_ACTIONS,
    "+": EditorKey.MORE_ACTIONS,
    "-": EditorKey.FEWER_ACTIONS,
    "backspace": EditorKey.TOGGLE_UNLIMITED,
    "[": EditorKey.SHORTER_LIFETIME,
    "]": EditorKey.LONGER_LIFETIME,
}


class Playground:
    """Ties the simulation to the rule editor and reacts to keys and clicks.

    Keys are given as lower-case names: single characters such as ``"e"``,
    ``"["`` or ``"1"``, or ``"space"``, ``"delete"``, ``"backspace"``,
    ``"left"`` and ``"right"``.
    """

    def __init__(self) -> None:
        self.simulation = SimulationEngine(GRID_WIDTH, GRID_HEIGHT)
        self.editor = RuleEditor(self.simulation)
        self.ticks_per_second = DEFAULT_TPS
        self.pixels_per_cell = PIXELS_PER_CELL
        self.show_debug_info = False
        self.show_editor = True
        self.show_stats = True
        self.frame_count = 0

    def update(self) -> None:
        """Advance one frame of the simulation and keep the editor's rules applied."""
        self.frame_count += 1
        self.simulation.update()
        if self.show_editor:
            self.editor.apply_rules()

    def handle_key(self, key: str, cursor: Tuple[int, int] = (0, 0)) -> None:
        """React to a key press; ``cursor`` is the pointer's screen position."""
        key = key.lower()
        sim = self.simulation
        if key == "e":
            self.show_editor = not self.show_editor
        if key == "d":
            self.show_debug_info = not self.show_debug_info

        if key == "c":
            sim.clear()
        elif key == "[":
            if self.ticks_per_second > TPS_STEP:
                self.ticks_per_second -= TPS_STEP
        elif key == "]":
            self.ticks_per_second += TPS_STEP
        elif not self.show_editor:
            if key == "p":
                sim.paused = not sim.paused
            elif key == "-":
                sim.death_cooldown_multiplier = max(
                    sim.death_cooldown_multiplier - COOLDOWN_STEP, 0.0
                )
            elif key == "=":
                sim.death_cooldown_multiplier = min(
                    sim.death_cooldown_multiplier + COOLDOWN_STEP, MAX_COOLDOWN_MULTIPLIER
                )

        if self.show_editor:
            editor_key = _EDITOR_KEYS.get(key)
            if editor_key is None:
                self.editor.apply_rules()
            else:
                self.editor.handle_key(editor_key, cursor)

    def handle_click(self, screen_x: int, screen_y: int) -> Optional[Bullet]:
        """Place a bullet under the pointer; in editor mode also edit patterns."""
        # Truncating division, so small negative offsets land in column/row 0.
        grid_x = int(screen_x / self.pixels_per_cell)
        grid_y = int(screen_y / self.pixels_per_cell)
        bullet: Optional[Bullet] = None
        if self.simulation.grid.in_bounds(grid_x, grid_y):
            if self.show_editor:
                self.editor.apply_rules()
                bullet = self.simulation.add_bullet(
                    grid_x, grid_y, self.editor.current_rule_set
                )
            else:
                bullet = self.simulation.add_bullet_with_default_rules(grid_x, grid_y)
        if self.show_editor:
            self.editor.handle_click(screen_x, screen_y)
        return bullet

    def bullet_color(self, bullet: Bullet) -> Tuple[int, int, int, int]:
        """RGBA colour: redder with age, alpha following the bullet's opacity."""
        red, green, blue = bullet.color
        if bullet.max_lifetime > 0:
            ratio = bullet.lifetime / bullet.max_lifetime
            red = min(int(red + ratio * 255), 255)
        alpha = int(bullet.opacity() * 255)
        return red, green, blue, alpha

    def stats_lines(self) -> List[str]:
        """Statistics text, followed by debug text when debug info is shown."""
        stats = self.simulation.stats()
        lines: List[str] = []
        if self.show_stats:
            lines += [
                f"Steps: {stats.step_counter}",
                f"Bullets: {stats.live_bullets}",
                f"TPS: {self.ticks_per_second}",
                f"Death Cooldown: {self.simulation.death_cooldown_multiplier:.2f}",
                "PAUSED" if stats.paused else "RUNNING",
            ]
        if self.show_debug_info:
            lines += [
                "=== DEBUG INFO ===",
                f"Frame: {stats.frame_counter}",
                f"Actions: {stats.queued_actions}",
                f"Dead: {stats.dead_bullets}",
            ]
        return lines