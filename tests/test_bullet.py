from bulletca.bullet import Bullet, new_bullet_id, new_chain_bullet, new_chain_id


class FakeRuleSet:
    def __init__(self, default_lifetime=100):
        self.default_lifetime = default_lifetime
        self.clones = 0

    def clone(self):
        self.clones += 1
        return FakeRuleSet(self.default_lifetime)


def test_default_lifetime_without_rules():
    bullet = Bullet(3, 4)
    assert bullet.max_lifetime == 100
    assert (bullet.x, bullet.y) == (3, 4)
    assert bullet.alive
    assert bullet.color == (255, 255, 255)


def test_rule_set_is_cloned_and_sets_lifetime():
    rules = FakeRuleSet(default_lifetime=30)
    bullet = Bullet(0, 0, rules)
    assert rules.clones == 1
    assert bullet.rule_set is not rules
    assert bullet.max_lifetime == rules.default_lifetime


def test_explicit_lifetime_overrides_rule_set():
    bullet = Bullet(0, 0, FakeRuleSet(30), max_lifetime=7)
    assert bullet.max_lifetime == 7


def test_ids_are_unique_and_increasing():
    a, b = new_bullet_id(), new_bullet_id()
    assert b > a
    c, d = new_chain_id(), new_chain_id()
    assert d > c
    assert Bullet().id != Bullet().id


def test_default_bullets_start_separate_chains():
    first = Bullet()
    second = Bullet()
    assert second.chain_id > first.chain_id


def test_explicit_chain_id_kept():
    assert Bullet(chain_id=42).chain_id == 42


def test_new_chain_bullet():
    first = new_chain_bullet(1, 2, None)
    second = new_chain_bullet(1, 2, None)
    assert first.chain_id != second.chain_id
    assert (first.x, first.y) == (1, 2)


def test_age_lives_through_fade_out_then_dies():
    bullet = Bullet(max_lifetime=20)
    for _ in range(30):
        bullet.age()
    assert bullet.alive
    assert bullet.is_in_fade_out()
    bullet.age()
    assert not bullet.alive
    assert not bullet.is_in_fade_out()
    assert bullet.display_frames == bullet.lifetime


def test_opacity_full_during_lifetime_then_decreasing():
    bullet = Bullet(max_lifetime=40)
    values = []
    for _ in range(60):
        bullet.age()
        values.append(bullet.opacity())
    assert all(v == 1.0 for v in values[:40])
    assert values == sorted(values, reverse=True)
    assert all(0.0 <= v <= 1.0 for v in values)


def test_opacity_halfway_through_fade():
    bullet = Bullet(max_lifetime=40)
    bullet.lifetime = 45
    assert bullet.opacity() == 0.5


def test_opacity_nonpositive_lifetime():
    bullet = Bullet(max_lifetime=0)
    bullet.lifetime = 50
    assert bullet.opacity() == 1.0
    assert bullet.lifetime_progress() == 0.0


def test_lifetime_progress():
    bullet = Bullet(max_lifetime=10)
    bullet.lifetime = 5
    assert bullet.lifetime_progress() == 0.5


def test_kill():
    bullet = Bullet()
    bullet.kill()
    assert not bullet.alive


def test_clone_inherits_chain_and_shares_rules():
    parent = Bullet(5, 6, FakeRuleSet(30))
    parent.color = (1, 2, 3)
    parent.generation = 2
    parent.lifetime = 9
    child = parent.clone()
    assert child.id != parent.id
    assert child.chain_id == parent.chain_id
    assert child.rule_set is parent.rule_set
    assert child.generation == parent.generation + 1
    assert child.color == parent.color
    assert child.max_lifetime == parent.max_lifetime
    assert child.lifetime == 0
    assert child.alive


def test_str_format():
    bullet = Bullet(1, 2, chain_id=7, max_lifetime=10)
    text = str(bullet)
    assert text.startswith(f"Bullet{{ID:{bullet.id}, Chain:7, Pos:(1,2)")
    assert "Life:0/10" in text
    assert "Alive:true" in text
    assert text.endswith("Gen:0}")