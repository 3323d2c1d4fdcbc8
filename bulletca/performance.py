"""Bullet pooling, spatial lookup and bullet lifecycle management."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .bullet import DEFAULT_MAX_LIFETIME, Bullet, new_bullet_id
from .rules import RuleSet

WHITE = (255, 255, 255)


class ObjectPool:
    """Keeps up to ``max_size`` spent bullets for reuse."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self.bullets: List[Bullet] = []

    def get_bullet(self) -> Bullet:
        """Take a pooled bullet, or make a fresh one if the pool is empty."""
        if self.bullets:
            return self.bullets.pop()
        return Bullet()

    def put_bullet(self, bullet: Optional[Bullet]) -> None:
        """Reset a bullet and keep it if there is room."""
        if bullet is None:
            return
        bullet.x = 0
        bullet.y = 0
        bullet.rule_set = None
        bullet.generation = 0
        bullet.color = WHITE
        bullet.alive = False
        bullet.lifetime = 0
        bullet.max_lifetime = DEFAULT_MAX_LIFETIME
        bullet.display_frames = 0
        if len(self.bullets) < self.max_size:
            self.bullets.append(bullet)


class SpatialIndex:
    """Buckets bullets into square cells for neighbourhood queries."""

    def __init__(self, world_width: int, world_height: int, cell_size: int) -> None:
        self.cell_size = float(cell_size)
        self.grid_width = (world_width + cell_size - 1) // cell_size
        self.grid_height = (world_height + cell_size - 1) // cell_size
        self._cells: List[List[List[Bullet]]] = [
            [[] for _ in range(self.grid_width)] for _ in range(self.grid_height)
        ]

    def clear(self) -> None:
        """Empty every bucket."""
        for row in self._cells:
            for bucket in row:
                bucket.clear()

    def _bucket_coord(self, value: int) -> int:
        return int(value / self.cell_size)

    def insert(self, bullet: Optional[Bullet]) -> None:
        """Add a bullet to the bucket covering its position; ignore outsiders."""
        if bullet is None:
            return
        gx = self._bucket_coord(bullet.x)
        gy = self._bucket_coord(bullet.y)
        if 0 <= gx < self.grid_width and 0 <= gy < self.grid_height:
            self._cells[gy][gx].append(bullet)

    def query_area(self, x: int, y: int, radius: int) -> List[Bullet]:
        """Living bullets within ``radius`` (inclusive) of (x, y)."""
        min_gx = max(self._bucket_coord(x - radius), 0)
        max_gx = min(self._bucket_coord(x + radius), self.grid_width - 1)
        min_gy = max(self._bucket_coord(y - radius), 0)
        max_gy = min(self._bucket_coord(y + radius), self.grid_height - 1)
        limit = radius * radius
        return [
            bullet
            for row in self._cells[min_gy : max_gy + 1]
            for bucket in row[min_gx : max_gx + 1]
            for bullet in bucket
            if bullet.alive and (bullet.x - x) ** 2 + (bullet.y - y) ** 2 <= limit
        ]


class BulletManager:
    """Owns the living bullets: creation, ageing, removal and lookup."""

    POOL_SIZE = 1000
    INDEX_CELL_SIZE = 10

    def __init__(self, world_width: int, world_height: int) -> None:
        self.pool = ObjectPool(self.POOL_SIZE)
        self.spatial_index = SpatialIndex(world_width, world_height, self.INDEX_CELL_SIZE)
        self._live: List[Bullet] = []

    def create_bullet(self, x: int, y: int, rule_set: Optional[RuleSet]) -> Bullet:
        """Make a live bullet at (x, y) with its own copy of ``rule_set``."""
        bullet = self.pool.get_bullet()
        cloned = rule_set.clone() if rule_set is not None else None
        bullet.x = x
        bullet.y = y
        bullet.rule_set = cloned
        bullet.generation = 0
        bullet.id = new_bullet_id()
        bullet.color = WHITE
        bullet.alive = True
        bullet.lifetime = 0
        bullet.display_frames = 0
        bullet.max_lifetime = (
            cloned.default_lifetime if cloned is not None else DEFAULT_MAX_LIFETIME
        )
        self._live.append(bullet)
        self.spatial_index.insert(bullet)
        return bullet

    def update(self) -> None:
        """Age every bullet, drop the dead ones and rebuild the index."""
        self.spatial_index.clear()
        survivors: List[Bullet] = []
        for bullet in self._live:
            if bullet.alive:
                bullet.age()
            if bullet.alive:
                survivors.append(bullet)
                self.spatial_index.insert(bullet)
            else:
                self.pool.put_bullet(bullet)
        self._live = survivors

    def remove_bullet(self, bullet: Optional[Bullet]) -> None:
        """Remove this very bullet at once and return it to the pool."""
        if bullet is None:
            return
        for index, live in enumerate(self._live):
            if live is bullet:
                self._live[index] = self._live[-1]
                self._live.pop()
                self.pool.put_bullet(bullet)
                return

    def living_bullets(self) -> List[Bullet]:
        """A copy of the list of managed bullets."""
        return list(self._live)

    def bullets_near(self, x: int, y: int, radius: int) -> List[Bullet]:
        """Living bullets within ``radius`` of (x, y)."""
        return self.spatial_index.query_area(x, y, radius)

    def trim_memory(self) -> None:
        """Shrink the pool to half its maximum size if it has grown past that."""
        limit = self.pool.max_size // 2
        if len(self.pool.bullets) > limit:
            del self.pool.bullets[limit:]

    def clear(self) -> None:
        """Return every bullet to the pool."""
        for bullet in self._live:
            self.pool.put_bullet(bullet)
        self._live = []
        self.spatial_index.clear()

    def stats(self) -> Tuple[int, int]:
        """(live bullets, bullets waiting in the pool)."""
        return len(self._live), len(self.pool.bullets)