import random

from bulletca.entities import Individual, Resource, Structure
from bulletca.events import (
    EventMerge,
    EventProduce,
    EventResourceDepleted,
    EventResourceSpawn,
)
from bulletca.mob import Mob
from bulletca.world import Director, World


def _world(individuals=20, seed=1):
    return World(initial_individuals=individuals, rng=random.Random(seed))


def test_initial_world_layout():
    world = _world(20)
    assert len(world.mobs) == 1
    player = world.mobs[0]
    assert len(player.individuals()) == 20
    assert (player.x, player.y) == (300, 300)
    assert len(world.resources) == 1
    res = world.resources[0]
    assert (res.x, res.y, res.food) == (100, 100, 20)


def test_found_fixed_village():
    world = _world(20)
    village = world.found_village(False)
    assert village is not None
    assert village.name == "village"
    assert village.rate == 240
    assert world.structures == [village]
    assert len(world.mobs[0].individuals()) == 10


def test_found_mobile_village_joins_mob():
    world = _world(20)
    village = world.found_village(True)
    assert village.name == "mobile-village"
    assert village.rate == 480
    assert world.mobs[0].structures() == [village]
    assert world.structures == []


def test_found_village_needs_more_than_ten():
    world = _world(10)
    assert world.found_village(False) is None
    assert len(world.mobs[0].individuals()) == 10
    assert world.structures == []


def test_find_and_remove_mob():
    world = _world(1)
    extra = Mob(0, 0, world.bus)
    world.mobs.append(extra)
    assert world.find_mob(extra.id) is extra
    world.remove_mob(extra)
    assert world.find_mob(extra.id) is None
    world.remove_mob(extra)
    assert len(world.mobs) == 1


def test_find_and_remove_resource():
    world = _world(1)
    res = world.resources[0]
    assert world.find_resource(res.id) is res
    world.remove_resource(res)
    assert world.find_resource(res.id) is None
    world.remove_resource(res)
    assert world.resources == []


def test_find_resource_within_is_inclusive():
    world = _world(1)
    res = world.resources[0]
    assert world.find_resource_within(100, 150, 50) is res
    assert world.find_resource_within(100, 151, 50) is None


def test_merge_event_combines_and_removes_source():
    world = _world(2)
    player = world.mobs[0]
    other = Mob(0, 0, world.bus)
    other.add_participant(Individual("chump", 0, 0))
    world.mobs.append(other)
    world.bus.publish(EventMerge(other.id, player.id))
    world.bus.process_events()
    assert world.mobs == [player]
    assert len(player.participants) == 3


def test_merge_into_same_mob_is_ignored():
    world = _world(2)
    player = world.mobs[0]
    world.bus.publish(EventMerge(player.id, player.id))
    world.bus.process_events()
    assert world.mobs == [player]
    assert len(player.participants) == 2


def test_spawn_event_adds_resource():
    world = _world(1)
    world.bus.publish(EventResourceSpawn(x=5.0, y=6.0, food=42))
    world.bus.process_events()
    assert len(world.resources) == 2
    assert (world.resources[-1].x, world.resources[-1].y, world.resources[-1].food) == (5.0, 6.0, 42)


def test_produce_near_resource_creates_mob():
    world = _world(1)
    structure = Structure("village", 120, 120, 240, world.bus)
    structure.failures = 3
    baby = Individual("chump", 120, 120)
    world.bus.publish(EventProduce(structure, baby))
    world.bus.process_events()
    assert len(world.mobs) == 2
    assert world.mobs[-1].participants == [baby]
    assert (world.mobs[-1].x, world.mobs[-1].y) == (120, 120)
    assert world.resources[0].food == 19
    assert structure.failures == 0


def test_produce_far_from_resource_fails():
    world = _world(1)
    structure = Structure("village", 550, 550, 240, world.bus)
    world.bus.publish(EventProduce(structure, Individual("chump", 550, 550)))
    world.bus.process_events()
    assert len(world.mobs) == 1
    assert structure.failures == 1
    assert world.resources[0].food == 20


def test_depleted_event_removes_resource():
    world = _world(1)
    res = world.resources[0]
    world.bus.publish(EventResourceDepleted(res.id))
    world.bus.process_events()
    assert world.resources == []


def test_director_spawns_on_first_tick():
    world = _world(1)
    director = Director(random.Random(3))
    director.update(world)
    events = world.bus.pending
    assert len(events) == 1
    event = events[0]
    assert isinstance(event, EventResourceSpawn)
    assert 0 <= event.x < 600 and 0 <= event.y < 600
    assert 20 <= event.food < 120
    assert 600 <= director.next_tick < 1200
    assert director.tick == 0


def test_director_does_not_spawn_with_many_resources():
    world = _world(1)
    world.resources.extend(Resource(0, 0, 5, world.bus) for _ in range(3))
    director = Director(random.Random(3))
    director.update(world)
    assert world.bus.pending == []
    assert director.next_tick >= 600


def test_director_waits_between_spawns():
    world = _world(1)
    director = Director(random.Random(3))
    director.update(world)
    world.bus.process_events()
    director.update(world)
    assert world.bus.pending == []
    assert director.tick == 1


def test_world_update_spawns_food():
    world = _world(3)
    world.update()
    assert len(world.resources) == 2
    assert world.bus.pending == []