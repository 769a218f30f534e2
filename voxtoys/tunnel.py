"""A neon tunnel runner: dodge rotating obstacles rushing toward the ship."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from voxtoys.volume import Volume, channels, fade

MIN_DT = 0.001
MAX_DT = 0.1
MAX_OBSTACLES = 10
MAX_PARTICLES = 384
NUM_STARS = 180
START_LIVES = 3
INVULN_TIME = 2.0
GAMEOVER_DELAY = 5.0
BOOST_FACTOR = 1.8
BASE_SPEED = 45.0
MAX_SPEED = 110.0
BASE_INTERVAL = 1.6
MIN_INTERVAL = 0.55

NEON_PALETTE = (
    0x00FFFF,  # cyan
    0xFF00FF,  # magenta
    0xFF0088,  # hot pink
    0x8800FF,  # electric purple
    0x00FF88,  # acid green
    0xFFFF00,  # neon yellow
    0x00AAFF,  # ice blue
    0xFF5500,  # neon orange
)


class Shape(IntEnum):
    """The obstacle designs; each leaves a different opening to fly through."""

    RING = 0
    DUAL_RING = 1
    PLUS = 2
    DIAMOND = 3
    SLATS = 4
    IRIS = 5
    LASER = 6


@dataclass
class Obstacle:
    """A wall moving down the tunnel along Y."""

    shape: Shape
    y: float = 0.0
    rotation: float = 0.0
    rot_speed: float = 0.0
    phase: float = 0.0
    phase_speed: float = 0.0
    primary: int = 0x00FFFF
    accent: int = 0xFF00FF
    seed: int = 0
    scored: bool = False


@dataclass
class _Star:
    x: float
    y: float
    z: float
    speed_mul: float


@dataclass
class _Particle:
    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    life: float
    colour: int


def _wrap_angle(diff: float) -> float:
    while diff > math.pi:
        diff -= 2 * math.pi
    while diff < -math.pi:
        diff += 2 * math.pi
    return diff


class TunnelGame:
    """Game state, rules and rendering for the tunnel runner."""

    def __init__(self, volume: Volume, rng: Optional[random.Random] = None) -> None:
        self.volume = volume
        self.rng = rng if rng is not None else random.Random()
        self.boosting = False
        self.reset()

    # -- geometry -------------------------------------------------------

    @property
    def ship_y(self) -> float:
        """Fixed depth of the ship along the tunnel axis."""
        return float(self.volume.height - 8)

    @property
    def obstacles(self) -> List[Obstacle]:
        """All obstacles currently in the tunnel."""
        return [o for o in self._obstacles if o is not None]

    @property
    def particles(self) -> List[_Particle]:
        """All live wreck sparks."""
        return [p for p in self._particles if p is not None]

    @property
    def stars(self) -> List[_Star]:
        """The background warp stars."""
        return list(self._stars)

    # -- state ----------------------------------------------------------

    def _clear_keys(self) -> None:
        self._keys = {"w": False, "a": False, "s": False, "d": False, " ": False}

    def reset(self) -> None:
        """Start a fresh game."""
        vol = self.volume
        cx, _, cz = vol.centre
        self.ship_x = cx
        self.ship_z = cz
        self.ship_vx = 0.0
        self.ship_vz = 0.0
        self.invuln = INVULN_TIME
        self.alive = True
        self.lives = START_LIVES

        self._obstacles: List[Optional[Obstacle]] = [None] * MAX_OBSTACLES
        self.tunnel_speed = BASE_SPEED
        self.spawn_timer = 0.5
        self.spawn_interval = BASE_INTERVAL
        self.score = 0
        self.distance = 0.0

        self._particles: List[Optional[_Particle]] = [None] * MAX_PARTICLES
        rng = self.rng
        self._stars = [
            _Star(
                rng.uniform(0, vol.width),
                rng.uniform(0, vol.height),
                rng.uniform(0, vol.depth),
                rng.uniform(0.5, 1.3),
            )
            for _ in range(NUM_STARS)
        ]
        self._clear_keys()
        self.rail_scroll = 0.0
        self.gameover_timer = 0.0

    def press(self, key: str) -> None:
        """Register a key press for the next step; 'r' restarts the game."""
        if key in self._keys:
            self._keys[key] = True
        elif key in ("r", "R"):
            self.reset()
            print("restart! score: 0")

    # -- obstacle shapes ----------------------------------------------------

    def wall_at(self, obstacle: Obstacle, x: int, z: int) -> int:
        """0 for open space, 1 for the primary wall, 2 for the accent wall."""
        handler = {
            Shape.RING: self._ring,
            Shape.DUAL_RING: self._dual_ring,
            Shape.PLUS: self._plus,
            Shape.DIAMOND: self._diamond,
            Shape.SLATS: self._slats,
            Shape.IRIS: self._iris,
            Shape.LASER: self._laser,
        }.get(obstacle.shape)
        return handler(obstacle, x, z) if handler else 0

    def _offset(self, x: int, z: int):
        cx, _, cz = self.volume.centre
        return x - cx, z - cz

    def _ring(self, o: Obstacle, x: int, z: int) -> int:
        dx, dz = self._offset(x, z)
        r2 = dx * dx + dz * dz
        r_in, r_out = 20.0, 24.0
        if r2 < r_in * r_in or r2 > r_out * r_out:
            return 0
        angle = math.atan2(dz, dx)
        if abs(_wrap_angle(angle - o.rotation)) < 0.7:
            return 0
        sector = int((angle + math.pi) * 3.0)
        return 1 if sector & 1 else 2

    def _dual_ring(self, o: Obstacle, x: int, z: int) -> int:
        dx, dz = self._offset(x, z)
        r = math.hypot(dx, dz)
        angle = math.atan2(dz, dx)
        if 20.5 < r < 23.5:
            if abs(_wrap_angle(angle - o.rotation)) < 0.9:
                return 0
            return 1
        if 9.5 < r < 12.5:
            if abs(_wrap_angle(angle + o.rotation * 1.5)) < 1.0:
                return 0
            return 2
        return 0

    def _rotated(self, o: Obstacle, x: int, z: int):
        dx, dz = self._offset(x, z)
        cs, sn = math.cos(-o.rotation), math.sin(-o.rotation)
        return dx * cs - dz * sn, dx * sn + dz * cs

    def _plus(self, o: Obstacle, x: int, z: int) -> int:
        rx, rz = self._rotated(o, x, z)
        outer, corridor = 24.0, 6.0
        if abs(rx) > outer or abs(rz) > outer:
            return 0
        if abs(rx) < corridor or abs(rz) < corridor:
            return 0
        return 1 if (rx > 0) != (rz > 0) else 2

    def _diamond(self, o: Obstacle, x: int, z: int) -> int:
        rx, rz = self._rotated(o, x, z)
        big, t = 22.0, 1.6
        on_frame = (abs(abs(rx) - big) < t and abs(rz) <= big + t) or (
            abs(abs(rz) - big) < t and abs(rx) <= big + t
        )
        if not on_frame:
            return 0
        if rx > big - t and abs(rz) < big * 0.35:
            return 0
        if abs(rx) > big - 3.0 and abs(rz) > big - 3.0:
            return 2
        return 1

    def _slats(self, o: Obstacle, x: int, z: int) -> int:
        n = 5
        spacing = (self.volume.depth - 8.0) / n
        missing = (o.seed % n + int(o.phase * 2.0)) % n
        for k in range(n):
            bz = 4.0 + spacing * (k + 0.5)
            if abs(z - bz) < 1.8:
                if k == missing:
                    return 0
                return 1 if k & 1 else 2
        return 0

    def _iris(self, o: Obstacle, x: int, z: int) -> int:
        dx, dz = self._offset(x, z)
        r = math.hypot(dx, dz)
        iris_r = 5.0 + (0.5 + 0.5 * math.sin(o.phase)) * 14.0
        if r < iris_r or r > 26.0:
            return 0
        band = int((r - iris_r) * 0.5)
        return 1 if band & 1 else 2

    def _laser(self, o: Obstacle, x: int, z: int) -> int:
        cx, _, cz = self.volume.centre
        lx = cx + math.sin(o.phase) * 30.0
        lz = cz + math.cos(o.phase * 0.7) * 18.0
        if abs(x - lx) < 1.5:
            return 1
        if abs(z - lz) < 1.5:
            return 2
        return 0

    # -- simulation -----------------------------------------------------

    def spawn_obstacle(self) -> Optional[Obstacle]:
        """Place a random obstacle at the far end; None when the tunnel is full."""
        slot = next((i for i, o in enumerate(self._obstacles) if o is None), None)
        if slot is None:
            return None
        rng = self.rng
        shape = rng.choice(list(Shape))
        rotation = rng.uniform(0, 2 * math.pi)
        rot_speed = rng.uniform(-1.2, 1.2)
        phase = rng.uniform(0, 2 * math.pi)
        phase_speed = rng.uniform(1.2, 2.8)
        seed = rng.randrange(2**31)
        primary = rng.choice(NEON_PALETTE)
        accent = rng.choice(NEON_PALETTE)
        while accent == primary:
            accent = rng.choice(NEON_PALETTE)
        obstacle = Obstacle(
            shape, 0.0, rotation, rot_speed, phase, phase_speed, primary, accent, seed
        )
        self._obstacles[slot] = obstacle
        return obstacle

    def _spawn_explosion(self, x: float, y: float, z: float, colour: int, count: int) -> None:
        rng = self.rng
        for _ in range(count):
            slot = next((i for i, p in enumerate(self._particles) if p is None), None)
            if slot is None:
                continue
            self._particles[slot] = _Particle(
                x, y, z,
                rng.uniform(-50, 50),
                rng.uniform(-50, 50),
                rng.uniform(-50, 50),
                rng.uniform(0.3, 1.0),
                colour,
            )

    def _update_ship(self, dt: float) -> None:
        if not self.alive:
            return
        if self.invuln > 0:
            self.invuln -= dt
        keys = self._keys
        ax = (1.0 if keys["d"] else 0.0) - (1.0 if keys["a"] else 0.0)
        az = (1.0 if keys["w"] else 0.0) - (1.0 if keys["s"] else 0.0)
        accel, damp, max_v = 320.0, 0.85, 65.0
        self.ship_vx = (self.ship_vx + ax * accel * dt) * damp
        self.ship_vz = (self.ship_vz + az * accel * dt) * damp
        v2 = self.ship_vx * self.ship_vx + self.ship_vz * self.ship_vz
        if v2 > max_v * max_v:
            s = max_v / math.sqrt(v2)
            self.ship_vx *= s
            self.ship_vz *= s
        self.ship_x += self.ship_vx * dt
        self.ship_z += self.ship_vz * dt
        vol = self.volume
        self.ship_x = min(max(self.ship_x, 4.0), vol.width - 5.0)
        self.ship_z = min(max(self.ship_z, 3.0), vol.depth - 4.0)

    def _update_obstacles(self, dt: float) -> None:
        self.tunnel_speed = min(BASE_SPEED + self.score * 0.6, MAX_SPEED)
        self.spawn_interval = max(BASE_INTERVAL - self.score * 0.012, MIN_INTERVAL)

        self.spawn_timer -= dt
        if self.spawn_timer <= 0:
            self.spawn_obstacle()
            self.spawn_timer = self.spawn_interval

        self.distance += self.tunnel_speed * dt
        ship_y = self.ship_y

        for i, o in enumerate(self._obstacles):
            if o is None:
                continue
            o.y += self.tunnel_speed * dt
            o.rotation += o.rot_speed * dt
            o.phase += o.phase_speed * dt

            if o.y > self.volume.height + 3:
                self._obstacles[i] = None
                continue

            if (
                not o.scored
                and self.alive
                and self.invuln <= 0
                and abs(o.y - ship_y) < 1.6
                and self.wall_at(o, int(self.ship_x), int(self.ship_z)) != 0
            ):
                self._spawn_explosion(self.ship_x, ship_y, self.ship_z, o.primary, 30)
                self._spawn_explosion(self.ship_x, ship_y, self.ship_z, 0xFFFFFF, 15)
                o.scored = True
                self.lives -= 1
                if self.lives <= 0:
                    self.alive = False
                    print(f"wreck! score: {self.score}  distance: {self.distance:.0f}")
                else:
                    self.invuln = INVULN_TIME
                    self.ship_vx = self.ship_vz = 0.0

            if not o.scored and o.y > ship_y + 1.2:
                o.scored = True
                self.score += 1

    def _update_particles(self, dt: float) -> None:
        drift = self.tunnel_speed * 0.3
        for i, p in enumerate(self._particles):
            if p is None:
                continue
            p.x += p.vx * dt
            p.y += (p.vy + drift) * dt
            p.z += p.vz * dt
            p.vx *= 0.96
            p.vy *= 0.96
            p.vz *= 0.96
            p.life -= dt
            if p.life <= 0:
                self._particles[i] = None

    def _update_stars(self, dt: float) -> None:
        vol = self.volume
        for star in self._stars:
            star.y += self.tunnel_speed * dt * star.speed_mul * 0.6
            if star.y >= vol.height:
                star.y = 0.0
                star.x = self.rng.uniform(0, vol.width)
                star.z = self.rng.uniform(0, vol.depth)

    def step(self, dt: float) -> None:
        """Advance one frame of ``dt`` seconds, consuming the pressed keys."""
        dt = min(max(dt, MIN_DT), MAX_DT)
        self.boosting = self.alive and self._keys[" "]
        dt_game = dt * BOOST_FACTOR if self.boosting else dt

        self._update_ship(dt)
        self._update_obstacles(dt_game)
        self._update_particles(dt)
        self._update_stars(dt_game)
        self.rail_scroll += self.tunnel_speed * dt_game * 0.5

        self._clear_keys()
        if not self.alive:
            self.gameover_timer += dt
            if self.gameover_timer > GAMEOVER_DELAY:
                self.reset()

    # -- rendering ------------------------------------------------------

    def _draw_stars(self) -> None:
        vol = self.volume
        for star in self._stars:
            sx, sy, sz = int(star.x), int(star.y), int(star.z)
            vol.set(sx, sy, sz, 0x5577AA if star.speed_mul > 1.0 else 0x333355)
            if self.boosting:
                vol.set(sx, sy - 1, sz, 0xFF55FF)
                vol.set(sx, sy - 2, sz, 0x880088)

    def _draw_rails(self) -> None:
        vol = self.volume
        spacing = 10
        offset = int(self.rail_scroll) % spacing
        for k in range(vol.height // spacing + 2):
            y = k * spacing - offset
            if not 0 <= y < vol.height:
                continue
            colour = fade(0x00AAFF, 0.2 + y / vol.height * 0.8)
            for x in (2, vol.width - 3):
                for z in (2, vol.depth - 3):
                    vol.set(x, y, z, colour)

    def _draw_obstacles(self) -> None:
        vol = self.volume
        ship_y = self.ship_y
        for o in self.obstacles:
            y = int(o.y)
            if not 0 <= y < vol.height:
                continue
            d = max(ship_y - o.y, 0.0)
            brightness = max(1.0 - (d / ship_y) * 0.75, 0.25)
            primary = fade(o.primary, brightness)
            accent = fade(o.accent, brightness)
            for z in range(vol.depth):
                for x in range(vol.width):
                    wall = self.wall_at(o, x, z)
                    if wall == 0:
                        continue
                    colour = primary if wall == 1 else accent
                    vol.set(x, y, z, colour)
                    vol.set(x, y + 1, z, colour)

    def _draw_ship(self) -> None:
        if not self.alive:
            return
        if self.invuln > 0 and int(self.invuln * 10) & 1:
            return
        vol = self.volume
        sx, sy, sz = int(self.ship_x), int(self.ship_y), int(self.ship_z)
        body, edge, canopy = 0x00FF88, 0x00FFFF, 0xAAFFFF
        glow = 0xFF00FF if self.boosting else 0xFFAA00
        voxels = [
            (0, -3, 0, edge),
            (0, -2, 0, body), (-1, -2, 0, body), (1, -2, 0, body),
            (-2, -1, 0, edge), (-1, -1, 0, body), (0, -1, 0, body),
            (1, -1, 0, body), (2, -1, 0, edge),
            (-3, 0, 0, edge), (-2, 0, 0, body), (-1, 0, 0, body), (0, 0, 0, body),
            (1, 0, 0, body), (2, 0, 0, body), (3, 0, 0, edge),
            (0, -1, 1, canopy), (0, 0, 1, canopy),
            (-2, 0, -1, edge), (2, 0, -1, edge),
            (-1, 1, 0, glow), (0, 1, 0, glow), (1, 1, 0, glow),
        ]
        if self.boosting:
            voxels += [
                (0, 2, 0, 0xFFFFFF), (-1, 2, 0, 0xFF55FF),
                (1, 2, 0, 0xFF55FF), (0, 3, 0, 0xFF0088),
            ]
        elif self.rng.randrange(4) == 0:
            voxels.append((0, 2, 0, 0xFF5500))
        for dx, dy, dz, colour in voxels:
            vol.set(sx + dx, sy + dy, sz + dz, colour)

    def _draw_particles(self) -> None:
        for p in self.particles:
            colour = fade(p.colour, p.life / 0.3) if p.life < 0.3 else p.colour
            self.volume.set(int(p.x), int(p.y), int(p.z), colour)

    def _draw_hud(self) -> None:
        vol = self.volume
        y = vol.height - 3
        for i in range(min(self.lives, 5)):
            for x in (3 + i * 3, 4 + i * 3):
                for z in (2, 3):
                    vol.set(x, y, z, 0xFF0055)
        if self.boosting:
            for i in range(10):
                vol.set(vol.width - 4 - i, y, vol.depth - 3, 0x00FF88)

    def draw(self) -> None:
        """Render the frame into the volume, replacing its contents."""
        self.volume.clear()
        self._draw_stars()
        self._draw_rails()
        self._draw_obstacles()
        self._draw_ship()
        self._draw_particles()
        self._draw_hud()


__all__ = ["Shape", "Obstacle", "TunnelGame", "NEON_PALETTE", "channels"]