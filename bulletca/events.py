"""A small publish/subscribe event bus and the events sent over it."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, ClassVar, DefaultDict, List, Union

if TYPE_CHECKING:
    from .entities import Individual, Structure


@dataclass(eq=False)
class EventProduce:
    """A structure produced a new individual."""

    structure: "Structure"
    individual: "Individual"
    type: ClassVar[str] = "produce"


@dataclass(frozen=True)
class EventMerge:
    """The mob ``from_id`` should merge into the mob ``to_id``."""

    from_id: int
    to_id: int
    type: ClassVar[str] = "merge"


@dataclass(frozen=True)
class EventResourceDepleted:
    """A resource ran out of food."""

    resource_id: int
    type: ClassVar[str] = "deplete"


@dataclass(frozen=True)
class EventResourceSpawn:
    """A new food resource should appear at (x, y)."""

    x: float
    y: float
    food: int
    type: ClassVar[str] = "food-spawn"


Event = Union[EventProduce, EventMerge, EventResourceDepleted, EventResourceSpawn]
Handler = Callable[[Event], None]


class Bus:
    """Queues published events and hands them to subscribers on demand."""

    def __init__(self) -> None:
        self._events: List[Event] = []
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)

    @property
    def pending(self) -> List[Event]:
        """A copy of the events waiting to be processed."""
        return list(self._events)

    def publish(self, event: Event) -> None:
        """Queue an event."""
        self._events.append(event)

    def subscribe(self, event_type: str, handler: Handler) -> None:
        """Call ``handler`` for every processed event of ``event_type``."""
        self._handlers[event_type].append(handler)

    def process_events(self) -> None:
        """Deliver queued events in order, then empty the queue.

        Events published by handlers while processing are discarded along
        with the rest of the queue.
        """
        for event in list(self._events):
            for handler in list(self._handlers.get(event.type, ())):
                handler(event)
        self._events = []