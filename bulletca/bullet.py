"""Bullets: the live cells of the automaton."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Optional, Tuple

DEFAULT_MAX_LIFETIME = 100
MIN_FADE_OUT = 10

_id_lock = threading.Lock()
_bullet_ids = itertools.count(1)
_chain_ids = itertools.count(1)


def new_bullet_id() -> int:
    """Return a fresh, unique bullet id."""
    with _id_lock:
        return next(_bullet_ids)


def new_chain_id() -> int:
    """Return a fresh, unique chain id."""
    with _id_lock:
        return next(_chain_ids)


def _fade_out_duration(max_lifetime: int) -> int:
    return max(int(max_lifetime / 4), MIN_FADE_OUT)


class Bullet:
    """An active cell that ages, fades out and carries its own rule set."""

    def __init__(
        self,
        x: int = 0,
        y: int = 0,
        rule_set: Optional[Any] = None,
        *,
        chain_id: Optional[int] = None,
        max_lifetime: Optional[int] = None,
    ) -> None:
        self.x = x
        self.y = y
        self.rule_set = rule_set.clone() if rule_set is not None else None
        self.id = new_bullet_id()
        self.chain_id = new_chain_id() if chain_id is None else chain_id
        self.generation = 0
        self.alive = True
        self.lifetime = 0
        self.display_frames = 0
        self.color: Tuple[int, int, int] = (255, 255, 255)
        if max_lifetime is not None:
            self.max_lifetime = max_lifetime
        elif self.rule_set is not None:
            self.max_lifetime = self.rule_set.default_lifetime
        else:
            self.max_lifetime = DEFAULT_MAX_LIFETIME

    def kill(self) -> None:
        """Mark the bullet as dead."""
        self.alive = False

    def age(self) -> None:
        """Advance one step; die once the fade-out period is over."""
        self.display_frames += 1
        self.lifetime += 1
        if self.lifetime > self.max_lifetime + _fade_out_duration(self.max_lifetime):
            self.kill()

    def opacity(self) -> float:
        """Opacity in [0, 1]: full during the lifetime, fading linearly after."""
        if self.max_lifetime <= 0 or self.lifetime <= self.max_lifetime:
            return 1.0
        fade = _fade_out_duration(self.max_lifetime)
        value = 1.0 - (self.lifetime - self.max_lifetime) / fade
        return min(max(value, 0.0), 1.0)

    def is_in_fade_out(self) -> bool:
        """True while alive but past the functional lifetime."""
        return self.lifetime > self.max_lifetime and self.alive

    def lifetime_progress(self) -> float:
        """Fraction of the functional lifetime used so far."""
        if self.max_lifetime <= 0:
            return 0.0
        return self.lifetime / self.max_lifetime

    def clone(self) -> "Bullet":
        """Return a child bullet: new id, next generation, same chain and rules."""
        child = Bullet(
            self.x,
            self.y,
            chain_id=self.chain_id,
            max_lifetime=self.max_lifetime,
        )
        child.rule_set = self.rule_set
        child.generation = self.generation + 1
        child.color = self.color
        return child

    def __str__(self) -> str:
        return (
            f"Bullet{{ID:{self.id}, Chain:{self.chain_id}, Pos:({self.x},{self.y}), "
            f"Life:{self.lifetime}/{self.max_lifetime}, "
            f"Alive:{str(self.alive).lower()}, Gen:{self.generation}}}"
        )


def new_chain_bullet(x: int, y: int, rule_set: Optional[Any]) -> Bullet:
    """Create a bullet that starts a new chain."""
    return Bullet(x, y, rule_set, chain_id=new_chain_id())