import pytest

from bulletca.entities import Individual, Resource, Structure
from bulletca.events import Bus, EventResourceDepleted


@pytest.fixture
def bus():
    return Bus()


def collect(bus, event_type):
    seen = []
    bus.subscribe(event_type, seen.append)
    return seen


def test_close_individuals_push_apart():
    a = Individual("a", 0.0, 0.0)
    b = Individual("b", 1.0, 0.0)
    group = [a, b]
    a.update(group)
    b.update(group)
    assert a.x < 0.0
    assert b.x > 1.0
    assert a.y == 0.0 and b.y == 0.0


def test_distant_individuals_pull_together():
    a = Individual("a", 0.0, 0.0)
    b = Individual("b", 100.0, 0.0)
    group = [a, b]
    a.update(group)
    b.update(group)
    assert 0.0 < a.x < b.x < 100.0


def test_speed_is_clamped(bus):
    a = Individual("a", 0.0, 0.0)
    b = Individual("b", 0.1, 0.0)
    others = [Structure("v", 500.0, 500.0, 10, bus) for _ in range(8)]
    a.update([a, b, *others])
    assert a.x == -2.0
    assert a.y == 0.0


def test_lone_individual_stays_put():
    a = Individual("a", 3.0, 4.0)
    a.update([a])
    assert (a.x, a.y) == (3.0, 4.0)


def test_coincident_individuals_do_not_break():
    a = Individual("a", 2.0, 2.0)
    b = Individual("b", 2.0, 2.0)
    a.update([a, b])
    assert (a.x, a.y) == (2.0, 2.0)


def test_structure_produces_after_rate(bus):
    produced = collect(bus, "produce")
    village = Structure("village", 5.0, 6.0, rate=3, bus=bus)
    for _ in range(3):
        village.update([])
    bus.process_events()
    assert produced == []
    village.update([])
    bus.process_events()
    assert len(produced) == 1
    event = produced[0]
    assert event.structure is village
    assert event.individual.name == "chump"
    assert (event.individual.x, event.individual.y) == (5.0, 6.0)
    assert village.timer == 0


def test_failed_structure_stops_producing(bus):
    produced = collect(bus, "produce")
    village = Structure("village", 0.0, 0.0, rate=1, bus=bus, failures=6)
    for _ in range(10):
        village.update([])
    bus.process_events()
    assert produced == []
    assert village.timer == 0
    assert village.is_dead


def test_resource_depletes_and_announces_below_zero(bus):
    depleted = collect(bus, "deplete")
    resource = Resource(1.0, 2.0, 2, bus)
    resource.deplete(1)
    resource.deplete(1)
    bus.process_events()
    assert resource.food == 0
    assert depleted == []
    resource.deplete(1)
    bus.process_events()
    assert resource.food == 0
    assert depleted == [EventResourceDepleted(resource.id)]


def test_resource_ids_are_unique_and_increasing(bus):
    first = Resource(0.0, 0.0, 10, bus)
    second = Resource(0.0, 0.0, 10, bus)
    assert second.id > first.id