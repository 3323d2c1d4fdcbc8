"""Mobs: groups of individuals and structures that move and merge together."""

from __future__ import annotations

import itertools
import math
from typing import List, Sequence

from .entities import Individual, Participant, Structure
from .events import Bus, EventMerge

MOB_SPEED = 2.0
SNAP_DISTANCE = 1.0
MERGE_MIN_DISTANCE = 4.0
PULL_RANGE = 500.0
MAX_PULL = 3.0
MEMBER_SLACK = 20.0
MEMBER_PULL_SPEED = 1.3

_mob_ids = itertools.count(1)


class Mob:
    """A group of participants that heads for a target and absorbs smaller mobs."""

    def __init__(self, x: float, y: float, bus: Bus) -> None:
        self.id = next(_mob_ids)
        self.x = x
        self.y = y
        self.target_x = x
        self.target_y = y
        self.target_id = 0
        self.participants: List[Participant] = []
        self.bus = bus

    @property
    def label(self) -> str:
        """Short debug text describing the mob."""
        return f"{self.id}: {len(self.participants)} participants"

    def radius(self) -> float:
        """Size of the mob, growing with its number of participants."""
        return len(self.participants) * 2.0

    def individuals(self) -> List[Individual]:
        """The participants that are individuals, in order."""
        return [p for p in self.participants if isinstance(p, Individual)]

    def structures(self) -> List[Structure]:
        """The participants that are structures, in order."""
        return [p for p in self.participants if isinstance(p, Structure)]

    def add_participant(self, participant: Participant) -> None:
        """Append a participant to the mob."""
        self.participants.append(participant)

    def remove_individuals(self, count: int) -> None:
        """Remove up to ``count`` individuals, starting from the most recent."""
        for index in range(len(self.participants) - 1, -1, -1):
            if count <= 0:
                break
            if isinstance(self.participants[index], Individual):
                del self.participants[index]
                count -= 1

    def _follow_target(self, mobs: Sequence["Mob"]) -> None:
        if not self.target_id:
            return
        target = next((mob for mob in mobs if mob.id == self.target_id), None)
        if target is not None:
            self.target_x, self.target_y = target.x, target.y
        else:
            self.target_id = 0
            self.target_x, self.target_y = self.x, self.y

    def update(self, mobs: Sequence["Mob"]) -> None:
        """Advance one tick among ``mobs``: merge, drift, move and gather members."""
        self._follow_target(mobs)

        pull_x = pull_y = 0.0
        mine = len(self.participants)
        for other in mobs:
            if other.id == self.id:
                continue
            theirs = len(other.participants)
            if mine >= theirs:
                dist = math.hypot(self.x - other.x, self.y - other.y)
                if dist < MERGE_MIN_DISTANCE or dist < (self.radius() + other.radius()) / 3:
                    self.bus.publish(EventMerge(other.id, self.id))
                    return
            if mine <= theirs:
                dx = other.x - self.x
                dy = other.y - self.y
                dist = math.hypot(dx, dy)
                size_diff = min(other.radius() * 2 - self.radius(), MAX_PULL)
                if 0 < dist < PULL_RANGE:
                    pull_x += dx / dist * size_diff
                    pull_y += dy / dist * size_diff
        self.x += pull_x
        self.y += pull_y

        if self.x != self.target_x or self.y != self.target_y:
            angle = math.atan2(self.target_y - self.y, self.target_x - self.x)
            self.x += math.cos(angle) * MOB_SPEED
            self.y += math.sin(angle) * MOB_SPEED
            if (
                abs(self.x - self.target_x) < SNAP_DISTANCE
                and abs(self.y - self.target_y) < SNAP_DISTANCE
            ):
                self.x, self.y = self.target_x, self.target_y

        for participant in self.participants:
            participant.update(self.participants)
            if isinstance(participant, Individual):
                dx = self.x - participant.x
                dy = self.y - participant.y
                dist = math.hypot(dx, dy)
                if dist > MEMBER_SLACK:
                    participant.x += dx / dist * MEMBER_PULL_SPEED
                    participant.y += dy / dist * MEMBER_PULL_SPEED

    def __repr__(self) -> str:
        return f"Mob(id={self.id}, x={self.x}, y={self.y}, participants={len(self.participants)})"