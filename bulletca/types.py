"""Cell states and 3x3 rewrite patterns for the automaton."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Tuple

Area = Tuple[Tuple["CellState", ...], ...]


class CellState(IntEnum):
    """State of a grid cell; ANY is a wildcard used only in patterns."""

    EMPTY = 0
    ALIVE = 1
    ANY = 2

    def __str__(self) -> str:
        return self.name.capitalize()


def _as_area(rows: Iterable[Iterable[CellState]]) -> Area:
    area = tuple(tuple(CellState(state) for state in row) for row in rows)
    if len(area) != 3 or any(len(row) != 3 for row in area):
        raise ValueError("a pattern area must be 3x3")
    return area


@dataclass(frozen=True)
class Pattern3x3:
    """A condition area and the area it turns into when it matches."""

    condition: Area
    result: Area

    def __post_init__(self) -> None:
        object.__setattr__(self, "condition", _as_area(self.condition))
        object.__setattr__(self, "result", _as_area(self.result))

    def matches(self, area: Iterable[Iterable[CellState]]) -> bool:
        """Return True if every non-wildcard condition cell equals the area's."""
        for wanted_row, actual_row in zip(self.condition, area):
            for wanted, actual in zip(wanted_row, actual_row):
                if wanted is not CellState.ANY and wanted != actual:
                    return False
        return True

    def apply(self) -> Area:
        """Return the resulting area of this pattern."""
        return self.result