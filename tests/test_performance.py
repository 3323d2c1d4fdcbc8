from bulletca.bullet import Bullet
from bulletca.performance import BulletManager, ObjectPool, SpatialIndex
from bulletca.rules import RuleSet


def test_pool_get_from_empty_makes_bullet():
    pool = ObjectPool(4)
    bullet = pool.get_bullet()
    assert isinstance(bullet, Bullet)
    assert pool.bullets == []


def test_pool_put_resets_and_reuses():
    pool = ObjectPool(4)
    bullet = Bullet(3, 4, RuleSet("r"))
    bullet.lifetime = 7
    bullet.generation = 2
    bullet.color = (1, 2, 3)
    pool.put_bullet(bullet)
    assert (bullet.x, bullet.y) == (0, 0)
    assert bullet.rule_set is None
    assert bullet.alive is False
    assert bullet.lifetime == 0
    assert bullet.generation == 0
    assert bullet.max_lifetime == 100
    assert bullet.color == (255, 255, 255)
    assert pool.get_bullet() is bullet


def test_pool_respects_max_size_and_ignores_none():
    pool = ObjectPool(2)
    pool.put_bullet(None)
    for _ in range(3):
        pool.put_bullet(Bullet())
    assert len(pool.bullets) == pool.max_size


def test_spatial_query_within_radius():
    index = SpatialIndex(100, 100, 10)
    near = Bullet(12, 12)
    far = Bullet(50, 50)
    index.insert(near)
    index.insert(far)
    assert index.query_area(10, 10, 3) == [near]
    assert set(map(id, index.query_area(30, 30, 40))) == {id(near), id(far)}


def test_spatial_excludes_dead_and_outside():
    index = SpatialIndex(20, 20, 10)
    dead = Bullet(5, 5)
    dead.kill()
    outside = Bullet(25, 5)
    index.insert(dead)
    index.insert(outside)
    index.insert(None)
    assert index.query_area(5, 5, 30) == []


def test_spatial_clear():
    index = SpatialIndex(20, 20, 10)
    index.insert(Bullet(1, 1))
    index.clear()
    assert index.query_area(1, 1, 5) == []


def test_create_bullet_clones_rule_set():
    manager = BulletManager(50, 50)
    rs = RuleSet("r")
    rs.default_lifetime = 30
    bullet = manager.create_bullet(4, 5, rs)
    assert bullet.rule_set is not rs
    assert bullet.rule_set.name == rs.name
    assert bullet.max_lifetime == rs.default_lifetime
    assert (bullet.x, bullet.y, bullet.alive) == (4, 5, True)
    assert manager.living_bullets() == [bullet]
    assert manager.bullets_near(4, 5, 0) == [bullet]


def test_create_without_rule_set_uses_default_lifetime():
    manager = BulletManager(50, 50)
    bullet = manager.create_bullet(1, 1, None)
    assert bullet.rule_set is None
    assert bullet.max_lifetime == 100


def test_update_ages_and_recycles_dead():
    manager = BulletManager(50, 50)
    keep = manager.create_bullet(1, 1, None)
    gone = manager.create_bullet(2, 2, None)
    gone.kill()
    manager.update()
    assert manager.living_bullets() == [keep]
    assert keep.lifetime == 1
    assert manager.stats() == (1, 1)
    assert manager.pool.bullets == [gone]


def test_update_removes_bullet_after_fade_out():
    manager = BulletManager(50, 50)
    bullet = manager.create_bullet(1, 1, None)
    bullet.max_lifetime = 0
    while bullet.alive:
        manager.update()
    assert manager.living_bullets() == []
    assert manager.bullets_near(1, 1, 5) == []


def test_remove_bullet():
    manager = BulletManager(50, 50)
    a = manager.create_bullet(1, 1, None)
    b = manager.create_bullet(2, 2, None)
    c = manager.create_bullet(3, 3, None)
    manager.remove_bullet(a)
    live = manager.living_bullets()
    assert len(live) == 2 and a not in live
    assert b in live and c in live
    manager.remove_bullet(Bullet())
    manager.remove_bullet(None)
    assert len(manager.living_bullets()) == 2


def test_living_bullets_is_a_copy():
    manager = BulletManager(50, 50)
    manager.create_bullet(1, 1, None)
    manager.living_bullets().clear()
    assert len(manager.living_bullets()) == 1


def test_clear_returns_all_to_pool():
    manager = BulletManager(50, 50)
    for i in range(3):
        manager.create_bullet(i, i, None)
    manager.clear()
    assert manager.stats() == (0, 3)
    assert manager.bullets_near(1, 1, 10) == []


def test_trim_memory_halves_pool():
    manager = BulletManager(50, 50)
    for _ in range(manager.pool.max_size):
        manager.pool.put_bullet(Bullet())
    manager.trim_memory()
    assert len(manager.pool.bullets) == manager.pool.max_size // 2
    manager.trim_memory()
    assert len(manager.pool.bullets) == manager.pool.max_size // 2