"""The two-dimensional cell grid and per-chain death cooldowns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .bullet import Bullet
from .types import Area, CellState


@dataclass(frozen=True)
class DeathInfo:
    """When a bullet of a chain died in a cell and how long it blocks."""

    timestamp: int
    cooldown: int


@dataclass
class Cell:
    """One grid cell, holding at most one bullet."""

    x: int
    y: int
    bullet: Optional[Bullet] = None
    deaths_by_chain: Dict[int, DeathInfo] = field(default_factory=dict)

    @property
    def is_alive(self) -> bool:
        """True if the cell holds a living bullet."""
        return self.bullet is not None and self.bullet.alive

    def state(self) -> CellState:
        """ALIVE if a living bullet is here, else EMPTY."""
        return CellState.ALIVE if self.is_alive else CellState.EMPTY

    def set_bullet(self, bullet: Optional[Bullet]) -> None:
        """Place a bullet here and move it to this cell's position."""
        self.bullet = bullet
        if bullet is not None:
            bullet.x, bullet.y = self.x, self.y

    def remove_bullet(self) -> Optional[Bullet]:
        """Take the bullet out of the cell and return it."""
        bullet, self.bullet = self.bullet, None
        return bullet

    def mark_death(self, current_step: int, cooldown: int, chain_id: int) -> None:
        """Record a death for a chain at the given step."""
        self.deaths_by_chain[chain_id] = DeathInfo(current_step, cooldown)

    def is_in_death_cooldown(self, current_step: int, chain_id: int) -> bool:
        """True while the chain's last death here still blocks new bullets."""
        info = self.deaths_by_chain.get(chain_id)
        if info is None or info.cooldown <= 0:
            return False
        return current_step - info.timestamp < info.cooldown

    def has_any_cooldown(self, current_step: int) -> bool:
        """True if any chain is still in cooldown here."""
        return any(
            self.is_in_death_cooldown(current_step, chain_id)
            for chain_id in self.deaths_by_chain
        )

    def can_accept_new_bullet(self, current_step: int, chain_id: int) -> bool:
        """True if the cell is free and not cooling down for the chain."""
        return not self.is_alive and not self.is_in_death_cooldown(current_step, chain_id)


class Grid:
    """A fixed-size grid of cells addressed by (x, y)."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._rows: List[List[Cell]] = [
            [Cell(x, y) for x in range(width)] for y in range(height)
        ]

    def in_bounds(self, x: int, y: int) -> bool:
        """True if (x, y) lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at (x, y), or None outside the grid."""
        return self._rows[y][x] if self.in_bounds(x, y) else None

    def set_bullet_at(self, x: int, y: int, bullet: Optional[Bullet]) -> bool:
        """Place a bullet; return False if (x, y) is outside the grid."""
        cell = self.cell(x, y)
        if cell is None:
            return False
        cell.set_bullet(bullet)
        return True

    def remove_bullet_at(self, x: int, y: int) -> Optional[Bullet]:
        """Remove and return the bullet at (x, y), if any."""
        cell = self.cell(x, y)
        return cell.remove_bullet() if cell is not None else None

    def area_3x3(self, x: int, y: int) -> Area:
        """States around (x, y); cells outside the grid count as EMPTY."""
        return tuple(
            tuple(
                cell.state() if (cell := self.cell(x + dx, y + dy)) else CellState.EMPTY
                for dx in (-1, 0, 1)
            )
            for dy in (-1, 0, 1)
        )

    def cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """Yield (x, y, cell) row by row."""
        for row in self._rows:
            for cell in row:
                yield cell.x, cell.y, cell

    def living_bullets(self) -> List[Bullet]:
        """All living bullets in row order."""
        return [cell.bullet for _, _, cell in self.cells() if cell.is_alive]

    def clear(self) -> None:
        """Remove every bullet from the grid."""
        for _, _, cell in self.cells():
            cell.remove_bullet()