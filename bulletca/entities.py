"""Participants of a mob, and food resources."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .events import Bus, EventProduce, EventResourceDepleted

MAX_SPEED = 2.0
SPACING_PER_MEMBER = 8
PUSH_FACTOR = 0.1
PULL_FACTOR = 0.01
MAX_STRUCTURE_FAILURES = 5
PRODUCED_NAME = "chump"

_resource_ids = itertools.count(1)


class Participant(ABC):
    """Something that belongs to a mob and is updated with its fellows."""

    @abstractmethod
    def update(self, participants: Sequence["Participant"]) -> None:
        """Advance one tick, given every participant of the mob."""


def _clamp(value: float) -> float:
    return min(max(value, -MAX_SPEED), MAX_SPEED)


@dataclass(eq=False)
class Individual(Participant):
    """A single member who keeps a comfortable distance from the others."""

    name: str
    x: float
    y: float

    def update(self, participants: Sequence[Participant]) -> None:
        """Push away from close individuals and pull towards distant ones."""
        radius = len(participants) * SPACING_PER_MEMBER
        vx = vy = 0.0
        for other in participants:
            if not isinstance(other, Individual) or other is self:
                continue
            dx = self.x - other.x
            dy = self.y - other.y
            dist = dx * dx + dy * dy
            if dist == 0:
                continue  # coincident: no direction to move in
            if dist < radius:
                vx += dx / dist * radius * PUSH_FACTOR
                vy += dy / dist * radius * PUSH_FACTOR
            elif dist > radius:
                vx -= dx / dist * radius * PULL_FACTOR
                vy -= dy / dist * radius * PULL_FACTOR
        self.x += _clamp(vx)
        self.y += _clamp(vy)


@dataclass(eq=False)
class Structure(Participant):
    """A village that produces an individual every ``rate`` ticks."""

    name: str
    x: float
    y: float
    rate: int
    bus: Bus
    timer: int = 0
    failures: int = 0

    @property
    def is_dead(self) -> bool:
        """True once production has failed too often."""
        return self.failures > MAX_STRUCTURE_FAILURES

    def update(self, participants: Sequence[Participant]) -> None:
        """Count down and publish a produce event when the timer runs out."""
        if self.is_dead:
            return
        self.timer += 1
        if self.timer > self.rate:
            self.timer = 0
            self.bus.publish(
                EventProduce(self, Individual(PRODUCED_NAME, self.x, self.y))
            )


class Resource:
    """A food source at a fixed position."""

    def __init__(self, x: float, y: float, food: int, bus: Bus) -> None:
        self.id = next(_resource_ids)
        self.x = x
        self.y = y
        self.food = food
        self.bus = bus

    def deplete(self, amount: int) -> None:
        """Take food away; announce depletion when it would go below zero."""
        self.food -= amount
        if self.food < 0:
            self.food = 0
            self.bus.publish(EventResourceDepleted(self.id))

    def __repr__(self) -> str:
        return f"Resource(id={self.id}, x={self.x}, y={self.y}, food={self.food})"