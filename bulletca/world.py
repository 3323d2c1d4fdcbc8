"""The mob sandbox: mobs, villages, food and the director that spawns food."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .entities import Individual, Resource, Structure
from .events import (
    Bus,
    Event,
    EventMerge,
    EventProduce,
    EventResourceDepleted,
    EventResourceSpawn,
)
from .mob import Mob

log = logging.getLogger(__name__)

WINDOW_SIZE = 600
WINDOW_TITLE = "Mobbox"
START_X = 300.0
START_Y = 300.0
DEFAULT_INDIVIDUALS = 2000
VILLAGE_COST = 10
VILLAGE_RATE = 240
MOBILE_VILLAGE_RATE = 480
PRODUCE_RANGE = 200.0
MAX_RESOURCES = 4
SPAWN_AREA = 600
MIN_SPAWN_DELAY = 600
SPAWN_DELAY_SPREAD = 600
MIN_FOOD = 20
FOOD_SPREAD = 100


class Director:
    """Spawns food every so often while there are few resources."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.tick = 0
        self.next_tick = 0

    def update(self, world: "World") -> None:
        """Advance one tick; when due, pick the next delay and maybe spawn food."""
        self.tick += 1
        if self.tick < self.next_tick:
            return
        self.tick = 0
        self.next_tick = self.rng.randrange(SPAWN_DELAY_SPREAD) + MIN_SPAWN_DELAY
        if len(world.resources) < MAX_RESOURCES:
            world.bus.publish(
                EventResourceSpawn(
                    x=float(self.rng.randrange(SPAWN_AREA)),
                    y=float(self.rng.randrange(SPAWN_AREA)),
                    food=self.rng.randrange(FOOD_SPREAD) + MIN_FOOD,
                )
            )


class World:
    """All mobs, structures and resources, wired to one event bus.

    The first mob is the player's; its target can be set directly.
    """

    def __init__(
        self,
        initial_individuals: int = DEFAULT_INDIVIDUALS,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.bus = Bus()
        self.director = Director(rng)
        self.mobs: List[Mob] = []
        self.structures: List[Structure] = []
        self.resources: List[Resource] = []

        player = Mob(START_X, START_Y, self.bus)
        for i in range(initial_individuals):
            player.add_participant(
                Individual("chump", START_X + i % 10 * 20, START_Y + i // 10 * 10)
            )
        self.mobs.append(player)
        self.resources.append(Resource(100, 100, 20, self.bus))

        self.bus.subscribe(EventMerge.type, self._on_merge)
        self.bus.subscribe(EventResourceSpawn.type, self._on_spawn)
        self.bus.subscribe(EventProduce.type, self._on_produce)
        self.bus.subscribe(EventResourceDepleted.type, self._on_depleted)

    # Ticking ------------------------------------------------------------

    def update(self) -> None:
        """Advance the whole world one tick and deliver the events it raised."""
        self.director.update(self)
        for mob in list(self.mobs):
            mob.update(self.mobs)
        for structure in self.structures:
            structure.update(())
        self.bus.process_events()

    def found_village(self, mobile: bool) -> Optional[Structure]:
        """Spend individuals of the player's mob on a village.

        A fixed village is placed in the world; a mobile one joins the mob.
        Returns None when the mob has too few individuals.
        """
        player = self.mobs[0]
        if len(player.individuals()) <= VILLAGE_COST:
            return None
        player.remove_individuals(VILLAGE_COST)
        if mobile:
            village = Structure("mobile-village", player.x, player.y, MOBILE_VILLAGE_RATE, self.bus)
            player.add_participant(village)
        else:
            village = Structure("village", player.x, player.y, VILLAGE_RATE, self.bus)
            self.structures.append(village)
        return village

    # Lookup -------------------------------------------------------------

    def find_mob(self, mob_id: int) -> Optional[Mob]:
        """The mob with this id, or None."""
        return next((mob for mob in self.mobs if mob.id == mob_id), None)

    def remove_mob(self, mob: Mob) -> None:
        """Remove this very mob from the world."""
        for index, existing in enumerate(self.mobs):
            if existing is mob:
                del self.mobs[index]
                return
        log.warning("remove_mob: mob not found")

    def find_resource(self, resource_id: int) -> Optional[Resource]:
        """The resource with this id, or None."""
        return next((res for res in self.resources if res.id == resource_id), None)

    def remove_resource(self, resource: Resource) -> None:
        """Remove this very resource from the world."""
        for index, existing in enumerate(self.resources):
            if existing is resource:
                del self.resources[index]
                return
        log.warning("remove_resource: resource not found")

    def find_resource_within(self, x: float, y: float, distance: float) -> Optional[Resource]:
        """The first resource within ``distance`` (inclusive) of (x, y), or None."""
        limit = distance * distance
        for res in self.resources:
            dx = res.x - x
            dy = res.y - y
            if dx * dx + dy * dy <= limit:
                return res
        return None

    # Event handlers -----------------------------------------------------

    def _on_merge(self, event: Event) -> None:
        assert isinstance(event, EventMerge)
        source = self.find_mob(event.from_id)
        target = self.find_mob(event.to_id)
        if source is None:
            log.info("merge failed: from %s not found", event.from_id)
            return
        if target is None:
            log.info("merge failed: to %s not found", event.to_id)
            return
        if source.id == target.id:
            log.info("merge ignored: same mob")
            return
        target.participants.extend(source.participants)
        log.info(
            "%s now has %d participants after merging with %s",
            target.id,
            len(target.participants),
            source.id,
        )
        self.remove_mob(source)

    def _on_spawn(self, event: Event) -> None:
        assert isinstance(event, EventResourceSpawn)
        res = Resource(event.x, event.y, event.food, self.bus)
        self.resources.append(res)
        log.info("spawned resource %s at %s %s with food %s", res.id, res.x, res.y, res.food)

    def _on_produce(self, event: Event) -> None:
        assert isinstance(event, EventProduce)
        structure = event.structure
        res = self.find_resource_within(structure.x, structure.y, PRODUCE_RANGE)
        if res is None or res.food <= 0:
            log.info("produce failed: no resource near %s %s", structure.x, structure.y)
            structure.failures += 1
            return
        structure.failures = 0
        res.deplete(1)
        mob = Mob(structure.x, structure.y, self.bus)
        mob.add_participant(event.individual)
        self.mobs.append(mob)
        log.info(
            "produced %s at %s %s", event.individual.name, event.individual.x, event.individual.y
        )

    def _on_depleted(self, event: Event) -> None:
        assert isinstance(event, EventResourceDepleted)
        res = self.find_resource(event.resource_id)
        if res is None:
            log.info("depletion failed: resource %s not found", event.resource_id)
            return
        log.info("resource %s depleted at %s %s", res.id, res.x, res.y)
        self.remove_resource(res)