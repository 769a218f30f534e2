"""An animated solar system with orbiting planets, a moon, rings and a comet."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from voxtoys.volume import Volume, dim, rgb

TAU = math.tau

MIN_DT = 0.001
MAX_DT = 0.1
MIN_TIME_SCALE = 0.05
MAX_TIME_SCALE = 8.0
TAIL_CAPACITY = 200

EARTH_INDEX = 2
SATURN_INDEX = 5

# Orbital periods in seconds: compressed so outer planets stay watchable.
PERIODS = (6.0, 9.0, 13.0, 18.0, 30.0, 42.0, 60.0, 80.0)


@dataclass
class Planet:
    """One planet: orbit geometry, angular speed and display colours."""

    name: str
    orbit_r: float
    incl: float
    radius: int
    colour: int
    orbit_colour: int
    omega: float = 0.0
    phase: float = 0.0


def _default_planets() -> List[Planet]:
    planets = [
        Planet("Mercury", 9, 0.12, 1, 0xAAAAAA, 0x080808),
        Planet("Venus", 14, 0.05, 2, 0xEECC88, 0x0C0A06),
        Planet("Earth", 20, 0.00, 2, 0x2266FF, 0x040814),
        Planet("Mars", 27, 0.03, 2, 0xCC4422, 0x120604),
        Planet("Jupiter", 36, 0.02, 5, 0xDD9966, 0x0C0806),
        Planet("Saturn", 46, 0.04, 4, 0xEEDD99, 0x0C0B07),
        Planet("Uranus", 54, 0.01, 3, 0x99EEEE, 0x061010),
        Planet("Neptune", 60, 0.03, 3, 0x3366CC, 0x040812),
    ]
    for i, (planet, period) in enumerate(zip(planets, PERIODS)):
        planet.omega = TAU / period
        planet.phase = i * 0.7
    return planets


def draw_planet(volume: Volume, x: float, y: float, z: float, radius: int, shell: int) -> None:
    """Draw a filled sphere with a bright shell and a dimmer interior."""
    cx, cy, cz = int(x + 0.5), int(y + 0.5), int(z + 0.5)
    if radius < 1:
        volume.set(cx, cy, cz, shell)
        return
    fill = dim(shell, 2)
    r2 = radius * radius
    ri2 = (radius - 1) * (radius - 1)
    span = range(-radius, radius + 1)
    for dx in span:
        for dy in span:
            for dz in span:
                d2 = dx * dx + dy * dy + dz * dz
                if d2 > r2:
                    continue
                volume.set(cx + dx, cy + dy, cz + dz, shell if d2 > ri2 else fill)


def draw_orbit_ring(volume: Volume, radius: float, incl: float, colour: int) -> None:
    """Draw a dotted ring around the volume centre marking an orbit."""
    ccx, ccy, ccz = volume.centre
    steps = max(int(radius * 4.0), 32)
    for i in range(0, steps, 2):
        a = i / steps * TAU
        x = ccx + math.cos(a) * radius
        y = ccy + math.sin(a) * radius * math.cos(incl)
        z = ccz + math.sin(a) * radius * math.sin(incl)
        volume.add(int(x), int(y), int(z), colour)


def draw_saturn_ring(
    volume: Volume,
    x: float,
    y: float,
    z: float,
    r_in: float,
    r_out: float,
    tilt: float,
    inner: int,
    outer: int,
) -> None:
    """Draw four banded circles forming a ring tilted about the X axis."""
    steps = 96
    bands = 4
    cos_t, sin_t = math.cos(tilt), math.sin(tilt)
    for band in range(bands):
        r = r_in + (r_out - r_in) * band / (bands - 1)
        colour = outer if band & 1 else inner
        for i in range(steps):
            a = i / steps * TAU
            lx = math.cos(a) * r
            ly = math.sin(a) * r
            volume.set(int(x + lx), int(y + ly * cos_t), int(z + ly * sin_t), colour)


@dataclass
class _TailPoint:
    x: float
    y: float
    z: float
    life: float = 1.0


class CometTail:
    """A fixed-size ring of fading trail points left behind by the comet."""

    def __init__(self) -> None:
        self._slots: List[Optional[_TailPoint]] = [None] * TAIL_CAPACITY
        self._head = 0

    def __len__(self) -> int:
        return sum(1 for point in self._slots if point is not None)

    @property
    def points(self) -> List[Tuple[float, float, float, float]]:
        """Active points as (x, y, z, life)."""
        return [(p.x, p.y, p.z, p.life) for p in self._slots if p is not None]

    def emit(self, x: float, y: float, z: float) -> None:
        """Add a fresh point, overwriting the oldest slot."""
        self._slots[self._head] = _TailPoint(x, y, z)
        self._head = (self._head + 1) % TAIL_CAPACITY

    def update(self, dt: float) -> None:
        """Age every point, dropping those that have faded out."""
        for i, point in enumerate(self._slots):
            if point is None:
                continue
            point.life -= dt * 0.7
            if point.life <= 0:
                self._slots[i] = None

    def draw(self, volume: Volume) -> None:
        """Draw points, blue-white when fresh, darkening as they age."""
        for point in self._slots:
            if point is None:
                continue
            k = point.life
            colour = rgb(int(180 * k), int(220 * k), int(255 * k))
            volume.set(int(point.x), int(point.y), int(point.z), colour)


class SolarSystem:
    """Simulation state and rendering for the solar-system display."""

    def __init__(self, volume: Volume) -> None:
        self.volume = volume
        self.planets = _default_planets()
        self.comet = CometTail()
        self.sim_time = 0.0
        self.time_scale = 1.0

    def handle_key(self, key: str) -> None:
        """'[' slows the simulation down, ']' speeds it up."""
        if key == "[":
            self.time_scale = max(self.time_scale * 0.7, MIN_TIME_SCALE)
        elif key == "]":
            self.time_scale = min(self.time_scale * 1.4, MAX_TIME_SCALE)

    def step(self, dt: float) -> None:
        """Advance by ``dt`` seconds of wall time and extend the comet tail."""
        dt = min(max(dt, MIN_DT), MAX_DT)
        self.sim_time += dt * self.time_scale
        self.comet.update(dt)
        self.comet.emit(*self.comet_position())

    def planet_position(self, index: int) -> Tuple[float, float, float]:
        """Current centre of the planet at ``index``."""
        planet = self.planets[index]
        ccx, ccy, ccz = self.volume.centre
        a = planet.phase + planet.omega * self.sim_time
        return (
            ccx + math.cos(a) * planet.orbit_r,
            ccy + math.sin(a) * planet.orbit_r * math.cos(planet.incl),
            ccz + math.sin(a) * planet.orbit_r * math.sin(planet.incl),
        )

    def comet_position(self) -> Tuple[float, float, float]:
        """Current position of the comet head on its elliptical orbit."""
        ccx, ccy, ccz = self.volume.centre
        ct = self.sim_time * 0.18
        ecc = 0.7
        semi_major = 55.0
        semi_minor = semi_major * math.sqrt(1.0 - ecc * ecc)
        return (
            ccx + math.cos(ct) * semi_major - ecc * semi_major,
            ccy + math.sin(ct) * semi_minor * math.cos(0.6),
            ccz + math.sin(ct) * semi_minor * math.sin(0.6),
        )

    def _draw_sun(self) -> None:
        volume = self.volume
        ccx, ccy, ccz = volume.centre
        r = 6
        core, fill, inner = 0xFFEE88, 0xFFAA22, 0xFFFFCC
        r2 = r * r
        ri2 = (r - 2) * (r - 2)
        rs2 = (r - 1) * (r - 1)
        icx, icy, icz = int(ccx), int(ccy), int(ccz)
        span = range(-r, r + 1)
        for dx in span:
            for dy in span:
                for dz in span:
                    d2 = dx * dx + dy * dy + dz * dz
                    if d2 > r2:
                        continue
                    if d2 < ri2:
                        colour = inner
                    elif d2 > rs2:
                        colour = fill
                    else:
                        colour = core
                    volume.set(icx + dx, icy + dy, icz + dz, colour)

        pulse = 0.5 + 0.5 * math.sin(self.sim_time * 1.7)
        corona = rgb(int(160 + 80 * pulse), int(100 + 60 * pulse), int(20 + 20 * pulse))
        n_corona = 64
        for i in range(n_corona):
            a = i / n_corona * TAU + self.sim_time * 0.4
            for j in range(6):
                b = j / 6.0 * math.pi - math.pi / 2
                rr = r + 1.5 + math.sin(self.sim_time * 3.0 + i + j) * 0.3
                x = int(ccx + math.cos(a) * math.cos(b) * rr)
                y = int(ccy + math.sin(a) * math.cos(b) * rr)
                z = int(ccz + math.sin(b) * rr)
                volume.add(x, y, z, corona)

    def draw(self) -> None:
        """Render the whole scene into the volume, replacing its contents."""
        volume = self.volume
        volume.clear()

        for planet in self.planets:
            draw_orbit_ring(volume, planet.orbit_r, planet.incl, planet.orbit_colour)

        self._draw_sun()
        self.comet.draw(volume)
        draw_planet(volume, *self.comet_position(), 1, 0xEEFFFF)

        for index, planet in enumerate(self.planets):
            x, y, z = self.planet_position(index)
            draw_planet(volume, x, y, z, planet.radius, planet.colour)
            if index == EARTH_INDEX:
                ma = self.sim_time * 1.6
                mr = 4.5
                draw_planet(
                    volume,
                    x + math.cos(ma) * mr,
                    y + math.sin(ma) * mr * 0.95,
                    z + math.sin(ma) * mr * 0.05,
                    1,
                    0xBBBBBB,
                )
            elif index == SATURN_INDEX:
                draw_saturn_ring(volume, x, y, z, 5.5, 8.5, 0.45, 0xBBAA66, 0x776633)