import random

import pytest

from voxtoys.tunnel import NEON_PALETTE, Obstacle, Shape, TunnelGame
from voxtoys.volume import Volume, channels


@pytest.fixture
def game():
    return TunnelGame(Volume(128, 128, 64), random.Random(7))


def test_reset_state(game):
    assert game.lives == 3
    assert game.score == 0
    assert game.alive
    assert game.tunnel_speed == 45.0
    assert game.obstacles == []
    assert len(game.stars) == 180


def test_wall_values_are_codes(game):
    for shape in Shape:
        obstacle = Obstacle(shape, rotation=0.3, phase=1.1, seed=12)
        for x in range(0, 128, 7):
            for z in range(0, 64, 5):
                assert game.wall_at(obstacle, x, z) in (0, 1, 2)


def test_ring_gap_and_wall(game):
    obstacle = Obstacle(Shape.RING, rotation=0.0)
    assert game.wall_at(obstacle, 85, 31) == 0
    assert game.wall_at(obstacle, 42, 31) in (1, 2)
    assert game.wall_at(obstacle, 63, 31) == 0


def test_laser_beams(game):
    obstacle = Obstacle(Shape.LASER, phase=0.0)
    assert game.wall_at(obstacle, 63, 10) == 1
    assert game.wall_at(obstacle, 10, 49) == 2
    assert game.wall_at(obstacle, 10, 10) == 0


def test_iris_centre_and_corner_open(game):
    for phase in (0.0, 1.5, 3.0, 4.5):
        obstacle = Obstacle(Shape.IRIS, phase=phase)
        assert game.wall_at(obstacle, 63, 31) == 0
        assert game.wall_at(obstacle, 0, 0) == 0


def test_plus_corridor_open(game):
    obstacle = Obstacle(Shape.PLUS, rotation=0.8)
    assert game.wall_at(obstacle, 63, 31) == 0


def test_slats_ignore_x(game):
    obstacle = Obstacle(Shape.SLATS, seed=3, phase=0.7)
    for z in range(64):
        assert game.wall_at(obstacle, 0, z) == game.wall_at(obstacle, 100, z)


def test_spawn_fills_capacity(game):
    spawned = [game.spawn_obstacle() for _ in range(10)]
    assert all(o is not None for o in spawned)
    assert game.spawn_obstacle() is None
    assert len(game.obstacles) == 10
    for o in spawned:
        assert o.primary != o.accent
        assert o.primary in NEON_PALETTE and o.accent in NEON_PALETTE
        assert o.y == 0.0


def test_passing_obstacle_scores(game):
    obstacle = game.spawn_obstacle()
    obstacle.y = game.ship_y + 1.0
    game.step(0.01)
    assert obstacle.scored
    assert game.score == 1
    assert game.lives == 3


def test_collision_costs_life(game):
    obstacle = game.spawn_obstacle()
    obstacle.shape = Shape.RING
    obstacle.rotation = 0.0
    obstacle.rot_speed = 0.0
    obstacle.y = game.ship_y - 0.5
    game.invuln = 0.0
    game.ship_x = 41.5
    game.ship_z = 31.5
    game.step(0.01)
    assert game.lives == 2
    assert obstacle.scored
    assert game.invuln == 2.0
    assert len(game.particles) == 45


def test_game_over_then_reset(game):
    game.lives = 1
    obstacle = game.spawn_obstacle()
    obstacle.shape = Shape.RING
    obstacle.rotation = 0.0
    obstacle.rot_speed = 0.0
    obstacle.y = game.ship_y - 0.5
    game.invuln = 0.0
    game.ship_x = 41.5
    game.ship_z = 31.5
    game.step(0.01)
    assert not game.alive
    assert game.lives == 0
    for _ in range(60):
        game.step(0.1)
        if game.alive:
            break
    assert game.alive
    assert game.lives == 3
    assert game.score == 0


def test_restart_key(game):
    game.score = 9
    game.lives = 1
    game.press("r")
    assert game.score == 0
    assert game.lives == 3


def test_boost_scales_distance():
    plain = TunnelGame(Volume(128, 128, 64), random.Random(1))
    boosted = TunnelGame(Volume(128, 128, 64), random.Random(1))
    boosted.press(" ")
    plain.step(0.05)
    boosted.step(0.05)
    assert boosted.boosting
    assert not plain.boosting
    assert boosted.distance == pytest.approx(plain.distance * 1.8)


def test_speed_ramp_caps(game):
    game.score = 500
    game.step(0.01)
    assert game.tunnel_speed == 110.0
    assert game.spawn_interval == 0.55


def test_move_right_and_clamp(game):
    start = game.ship_x
    game.press("d")
    game.step(0.05)
    assert game.ship_x > start
    for _ in range(200):
        game.press("a")
        game.step(0.1)
    assert game.ship_x >= 4.0
    assert game.ship_x < start


def test_keys_consumed_after_step(game):
    game.press("w")
    game.step(0.05)
    vz = game.ship_vz
    assert vz > 0
    game.step(0.05)
    assert game.ship_vz < vz


def test_draw_ship_and_hud(game):
    game.draw()
    lit = game.volume.lit()
    assert lit[(3, 125, 2)] == 0xFF0055
    assert lit[(4, 125, 3)] == 0xFF0055
    sx, sz = int(game.ship_x), int(game.ship_z)
    assert lit[(sx, int(game.ship_y) - 3, sz)] == 0x00FFFF


def test_draw_without_lives_has_no_hud(game):
    sx, sz = int(game.ship_x), int(game.ship_z)
    nose = (sx, int(game.ship_y) - 3, sz)
    game.draw()
    with_hud = set(game.volume.lit().items())
    game.volume.clear()
    game.lives = 0
    game.alive = False
    game.draw()
    without_hud = set(game.volume.lit().items())
    missing = with_hud - without_hud
    assert ((3, 125, 2), 0xFF0055) in missing
    assert ((4, 125, 3), 0xFF0055) in missing
    assert (nose, 0x00FFFF) in missing


def test_obstacle_drawn_dimmed(game):
    obstacle = game.spawn_obstacle()
    obstacle.shape = Shape.LASER
    obstacle.phase = 0.0
    obstacle.y = 10.0
    game.draw()
    lit = game.volume.lit()
    colour = lit[(63, 10, 10)]
    assert colour == lit[(63, 11, 10)]
    assert all(c <= p for c, p in zip(channels(colour), channels(obstacle.primary)))
    assert colour != 0