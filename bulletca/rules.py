"""Rules that turn matching 3x3 neighbourhoods into grid actions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, List, Optional

from .types import CellState, Pattern3x3

if TYPE_CHECKING:
    from .bullet import Bullet
    from .grid import Grid

DEFAULT_RULE_SET_LIFETIME = 100


class ActionType(Enum):
    """Kinds of change a rule can ask the simulation to make."""

    CREATE_BULLET = auto()
    KILL_BULLET = auto()
    MOVE_BULLET = auto()
    MODIFY_BULLET = auto()


@dataclass
class Action:
    """A pending change at (x, y), with optional extra data.

    For CREATE_BULLET the data is a dict holding "rule_set" and, when the
    action was produced by a parent bullet, "max_lifetime" and "chain_id".
    """

    type: ActionType
    x: int
    y: int
    data: Any = None


class Rule(ABC):
    """Behaviour that inspects the grid around a cell and yields actions."""

    name: str

    @property
    @abstractmethod
    def patterns(self) -> List[Pattern3x3]:
        """The patterns this rule is made of."""

    @abstractmethod
    def apply(self, grid: "Grid", x: int, y: int) -> List[Action]:
        """Return the actions this rule produces at (x, y)."""

    @abstractmethod
    def matches_at(self, grid: "Grid", x: int, y: int) -> bool:
        """True if the rule applies at (x, y)."""


class BasicRule(Rule):
    """A rule made of 3x3 patterns; the first matching pattern wins."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._patterns: List[Pattern3x3] = []

    @property
    def patterns(self) -> List[Pattern3x3]:
        """A copy of the rule's patterns."""
        return list(self._patterns)

    def add_pattern(self, pattern: Pattern3x3) -> None:
        """Append a pattern to the rule."""
        self._patterns.append(pattern)

    def matches_at(self, grid: "Grid", x: int, y: int) -> bool:
        """True if any pattern matches the neighbourhood of (x, y)."""
        area = grid.area_3x3(x, y)
        return any(pattern.matches(area) for pattern in self._patterns)

    def apply(
        self,
        grid: "Grid",
        x: int,
        y: int,
        rule_set: Optional["RuleSet"] = None,
        parent: Optional["Bullet"] = None,
    ) -> List[Action]:
        """Actions of the first matching pattern, or an empty list.

        New bullets carry ``rule_set``; with a ``parent`` they also inherit
        its chain and one step less than its remaining lifetime (at least 1).
        """
        area = grid.area_3x3(x, y)
        for pattern in self._patterns:
            if pattern.matches(area):
                return self._actions_for(pattern, area, x, y, rule_set, parent)
        return []

    @staticmethod
    def _actions_for(
        pattern: Pattern3x3,
        area: Any,
        center_x: int,
        center_y: int,
        rule_set: Optional["RuleSet"],
        parent: Optional["Bullet"],
    ) -> List[Action]:
        actions: List[Action] = []
        for dy, (current_row, new_row) in enumerate(zip(area, pattern.apply()), -1):
            for dx, (current, new) in enumerate(zip(current_row, new_row), -1):
                if new is CellState.ANY:
                    continue
                nx, ny = center_x + dx, center_y + dy
                if current == CellState.EMPTY and new == CellState.ALIVE:
                    data = {"rule_set": rule_set}
                    if parent is not None:
                        remaining = parent.max_lifetime - parent.lifetime
                        data["max_lifetime"] = max(remaining - 1, 1)
                        data["chain_id"] = parent.chain_id
                    actions.append(Action(ActionType.CREATE_BULLET, nx, ny, data))
                elif current == CellState.ALIVE and new == CellState.EMPTY:
                    actions.append(Action(ActionType.KILL_BULLET, nx, ny))
        return actions


class RuleSet:
    """A named collection of rules plus the lifetime its bullets start with."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._rules: List[Rule] = []
        self.default_lifetime = DEFAULT_RULE_SET_LIFETIME

    @property
    def rules(self) -> List[Rule]:
        """A copy of the rules in the set."""
        return list(self._rules)

    def add_rule(self, rule: Rule) -> None:
        """Append a rule."""
        self._rules.append(rule)

    def remove_rule(self, rule: Rule) -> None:
        """Remove the first occurrence of this very rule object, if present."""
        for index, existing in enumerate(self._rules):
            if existing is rule:
                del self._rules[index]
                return

    def apply(self, grid: "Grid", x: int, y: int) -> List[Action]:
        """Combined actions of every rule at (x, y)."""
        cell = grid.cell(x, y)
        parent = cell.bullet if cell is not None and cell.is_alive else None
        actions: List[Action] = []
        for rule in self._rules:
            if isinstance(rule, BasicRule):
                actions.extend(rule.apply(grid, x, y, self, parent))
            else:
                actions.extend(rule.apply(grid, x, y) or [])
        return actions

    def has_matching_rule(self, grid: "Grid", x: int, y: int) -> bool:
        """True if any rule matches at (x, y)."""
        return any(rule.matches_at(grid, x, y) for rule in self._rules)

    def clone(self) -> "RuleSet":
        """A new set with the same name, lifetime and (shared) rules."""
        copy = RuleSet(self.name)
        copy.default_lifetime = self.default_lifetime
        copy._rules = list(self._rules)
        return copy

    def __str__(self) -> str:
        return (
            f"RuleSet{{name: {self.name}, rules: {len(self._rules)}, "
            f"lifetime: {self.default_lifetime}}}"
        )