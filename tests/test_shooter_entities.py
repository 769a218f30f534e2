import math
import random

import pytest

from voxtoys.shooter_entities import (
    Bullet,
    EnemyBullet,
    ParticlePool,
    Pickup,
    Starfield,
    Weapon,
    aimed_bullet,
    weapon_cooldown,
    weapon_shell_colour,
)
from voxtoys.volume import Volume, dim


@pytest.fixture
def volume():
    return Volume(32, 32, 16)


@pytest.mark.parametrize(
    "weapon, expected",
    [
        (Weapon.SINGLE, 0.12),
        (Weapon.TRIPLE, 0.18),
        (Weapon.LASER, 0.25),
        (Weapon.RAPID, 0.05),
    ],
)
def test_weapon_cooldown(weapon, expected):
    assert weapon_cooldown(weapon) == pytest.approx(expected)


def test_rapid_fires_fastest():
    rapid = weapon_cooldown(Weapon.RAPID)
    for weapon in (Weapon.SINGLE, Weapon.TRIPLE, Weapon.LASER):
        assert rapid < weapon_cooldown(weapon)


@pytest.mark.parametrize(
    "weapon, expected",
    [
        (Weapon.SINGLE, 0xFFFFFF),
        (Weapon.TRIPLE, 0xFF8800),
        (Weapon.LASER, 0xFF55FF),
        (Weapon.RAPID, 0xFFFF00),
    ],
)
def test_weapon_shell_colour(weapon, expected):
    assert weapon_shell_colour(weapon) == expected


def test_unknown_weapon_rejected():
    with pytest.raises(ValueError):
        weapon_cooldown(9)


def test_aimed_bullet_speed_and_direction():
    b = aimed_bullet(10.0, 10.0, 5.0, 10.0, 30.0, 5.0)
    assert isinstance(b, EnemyBullet)
    assert (b.x, b.y, b.z) == (10.0, 10.0, 5.0)
    assert b.vx == pytest.approx(0.0)
    assert b.vy == pytest.approx(55.0)
    assert b.vz == pytest.approx(0.0)
    assert b.life == pytest.approx(3.0)


def test_aimed_bullet_speed_is_constant_for_any_target():
    b = aimed_bullet(1.0, 2.0, 3.0, 7.0, -4.0, 9.0)
    assert math.sqrt(b.vx ** 2 + b.vy ** 2 + b.vz ** 2) == pytest.approx(55.0)


def test_aimed_bullet_same_point_is_none():
    assert aimed_bullet(4.0, 4.0, 4.0, 4.0, 4.0, 4.0) is None


def test_bullet_defaults():
    b = Bullet(1, 2, 3, 0, -140, 0, 0xFFFF55)
    assert b.life == pytest.approx(1.5)
    assert b.piercing is False


def test_pickup_holds_weapon():
    p = Pickup(1, 2, 3, 0, 15, 0, Weapon.LASER)
    assert weapon_shell_colour(p.weapon) == 0xFF55FF


def test_particle_pool_rejects_bad_capacity():
    with pytest.raises(ValueError):
        ParticlePool(random.Random(1), 0)


def test_explosion_spawns_at_point():
    pool = ParticlePool(random.Random(3), 50)
    pool.spawn_explosion(5.0, 6.0, 7.0, 0x00FFFF, 10)
    assert len(pool) == 10
    for p in pool.particles:
        assert (p.x, p.y, p.z) == (5.0, 6.0, 7.0)
        assert p.colour == 0x00FFFF
        assert -40.0 <= p.vx <= 40.0
        assert 0.3 <= p.life <= 1.0


def test_explosion_limited_by_capacity():
    pool = ParticlePool(random.Random(3), 8)
    pool.spawn_explosion(0.0, 0.0, 0.0, 0xFFFFFF, 20)
    assert len(pool) == 8


def test_particles_burn_out():
    pool = ParticlePool(random.Random(5), 30)
    pool.spawn_explosion(1.0, 1.0, 1.0, 0xFFFFFF, 30)
    pool.update(1.0)
    assert len(pool) == 0


def test_particles_move_and_slow():
    pool = ParticlePool(random.Random(7), 4)
    pool.spawn_explosion(0.0, 0.0, 0.0, 0xFFFFFF, 1)
    p = pool.particles[0]
    vx = p.vx
    pool.update(0.1)
    assert p.x == pytest.approx(vx * 0.1)
    assert abs(p.vx) < abs(vx)


def test_particle_draw_full_and_dimmed(volume):
    pool = ParticlePool(random.Random(2), 4)
    pool.spawn_explosion(3.0, 4.0, 5.0, 0xFF8844, 1)
    p = pool.particles[0]
    p.life = 0.5
    pool.draw(volume)
    assert volume.lit() == {(3, 4, 5): 0xFF8844}
    volume.clear()
    p.life = 0.2
    pool.draw(volume)
    assert volume.lit() == {(3, 4, 5): dim(0xFF8844, 1)}


def test_starfield_inside_volume(volume):
    field = Starfield(volume, random.Random(11))
    assert len(field) == 140
    for x, y, z in field.stars:
        assert 0 <= x <= volume.width
        assert 0 <= y <= volume.height
        assert 0 <= z <= volume.depth


def test_starfield_update_wraps_and_stays_inside(volume):
    field = Starfield(volume, random.Random(13))
    for _ in range(50):
        field.update(0.1)
        for _, y, _ in field.stars:
            assert 0 <= y < volume.height
    assert len(field) == 140


def test_starfield_drift_for_unwrapped_star(volume):
    field = Starfield(volume, random.Random(17))
    before = field.stars
    field.update(0.01)
    after = field.stars
    moved = [(b, a) for b, a in zip(before, after) if a[1] > b[1]]
    assert moved
    for b, a in moved:
        assert a[1] - b[1] == pytest.approx(0.12)
        assert (a[0], a[2]) == (b[0], b[2])


def test_starfield_draw_colour(volume):
    field = Starfield(volume, random.Random(19))
    field.draw(volume)
    lit = volume.lit()
    assert 0 < len(lit) <= 140
    assert set(lit.values()) == {0x555555}