"""Weapons, projectiles, pickups, explosion sparks and the starfield of the shooter."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from voxtoys.volume import Volume, dim

BULLET_SPEED = 140.0
BULLET_LIFE = 1.5
ENEMY_BULLET_SPEED = 55.0
ENEMY_BULLET_LIFE = 3.0
PARTICLE_CAPACITY = 768
PARTICLE_DRAG = 0.96
NUM_STARS = 140
STAR_SPEED = 12.0
STAR_COLOUR = 0x555555


class Weapon(IntEnum):
    """The ship's guns; every weapon but SINGLE comes from a timed pickup."""

    SINGLE = 0
    TRIPLE = 1
    LASER = 2
    RAPID = 3


_COOLDOWNS = {
    Weapon.SINGLE: 0.12,
    Weapon.TRIPLE: 0.18,
    Weapon.LASER: 0.25,
    Weapon.RAPID: 0.05,
}

_SHELL_COLOURS = {
    Weapon.TRIPLE: 0xFF8800,
    Weapon.LASER: 0xFF55FF,
    Weapon.RAPID: 0xFFFF00,
}


def weapon_cooldown(weapon: Weapon) -> float:
    """Seconds that must pass between two shots of ``weapon``."""
    return _COOLDOWNS[Weapon(weapon)]


def weapon_shell_colour(weapon: Weapon) -> int:
    """Colour used for a pickup shell and the HUD bar of ``weapon``."""
    return _SHELL_COLOURS.get(Weapon(weapon), 0xFFFFFF)


@dataclass
class Bullet:
    """A shot fired by the player."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    colour: int
    piercing: bool = False
    life: float = BULLET_LIFE


@dataclass
class EnemyBullet:
    """A shot fired by an enemy toward the ship."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    life: float = ENEMY_BULLET_LIFE


@dataclass
class Pickup:
    """A floating sphere that grants a weapon when the ship touches it."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    weapon: Weapon
    bob_phase: float = 0.0


def aimed_bullet(
    x: float, y: float, z: float, tx: float, ty: float, tz: float
) -> Optional[EnemyBullet]:
    """An enemy bullet from (x, y, z) heading at the target; None if they coincide."""
    dx, dy, dz = tx - x, ty - y, tz - z
    length = math.sqrt(dx * dx + dy * dy + dz * dz)
    if length < 0.001:
        return None
    s = ENEMY_BULLET_SPEED / length
    return EnemyBullet(x, y, z, dx * s, dy * s, dz * s)


@dataclass
class Particle:
    """One spark of an explosion."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    life: float
    colour: int


class ParticlePool:
    """A fixed number of spark slots; explosions fill free slots in order."""

    def __init__(
        self, rng: Optional[random.Random] = None, capacity: int = PARTICLE_CAPACITY
    ) -> None:
        if capacity <= 0:
            raise ValueError("particle capacity must be positive")
        self.rng = rng if rng is not None else random.Random()
        self.capacity = capacity
        self._slots: List[Optional[Particle]] = [None] * capacity

    def __len__(self) -> int:
        return sum(1 for p in self._slots if p is not None)

    @property
    def particles(self) -> List[Particle]:
        """All live sparks."""
        return [p for p in self._slots if p is not None]

    def clear(self) -> None:
        """Remove every spark."""
        self._slots = [None] * self.capacity

    def spawn_explosion(self, x: float, y: float, z: float, colour: int, count: int) -> None:
        """Burst up to ``count`` sparks outward from a point."""
        rng = self.rng
        for _ in range(count):
            slot = next((i for i, p in enumerate(self._slots) if p is None), None)
            if slot is None:
                return
            self._slots[slot] = Particle(
                x, y, z,
                rng.uniform(-40.0, 40.0),
                rng.uniform(-40.0, 40.0),
                rng.uniform(-40.0, 40.0),
                rng.uniform(0.3, 1.0),
                colour,
            )

    def update(self, dt: float) -> None:
        """Move and slow every spark, removing those that burn out."""
        for i, p in enumerate(self._slots):
            if p is None:
                continue
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.z += p.vz * dt
            p.vx *= PARTICLE_DRAG
            p.vy *= PARTICLE_DRAG
            p.vz *= PARTICLE_DRAG
            p.life -= dt
            if p.life <= 0:
                self._slots[i] = None

    def draw(self, volume: Volume) -> None:
        """Draw every spark, at half brightness once it is nearly spent."""
        for p in self.particles:
            colour = dim(p.colour, 1) if p.life < 0.3 else p.colour
            volume.set(int(p.x), int(p.y), int(p.z), colour)


@dataclass
class _Star:
    x: float
    y: float
    z: float


class Starfield:
    """Background stars drifting toward the player and wrapping around."""

    def __init__(self, volume: Volume, rng: Optional[random.Random] = None) -> None:
        self.volume = volume
        self.rng = rng if rng is not None else random.Random()
        self._stars = [
            _Star(
                self.rng.uniform(0, volume.width),
                self.rng.uniform(0, volume.height),
                self.rng.uniform(0, volume.depth),
            )
            for _ in range(NUM_STARS)
        ]

    def __len__(self) -> int:
        return len(self._stars)

    @property
    def stars(self) -> List[Tuple[float, float, float]]:
        """Star positions as (x, y, z)."""
        return [(s.x, s.y, s.z) for s in self._stars]

    def update(self, dt: float) -> None:
        """Drift stars along +Y; one leaving the far side reappears at a new spot."""
        vol = self.volume
        for star in self._stars:
            star.y += STAR_SPEED * dt
            if star.y >= vol.height:
                star.y -= vol.height
                star.x = self.rng.uniform(0, vol.width)
                star.z = self.rng.uniform(0, vol.depth)

    def draw(self, volume: Volume) -> None:
        """Draw every star inside the volume as a grey voxel."""
        for star in self._stars:
            volume.set(int(star.x), int(star.y), int(star.z), STAR_COLOUR)