"""A supernova light show: charging cores, blinding flashes and expanding debris."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from voxtoys.volume import Volume, channels, rgb

MIN_DT = 0.001
MAX_DT = 0.1
MAX_PARTICLES = 1600
MAX_NOVAE = 4
DRAG = 0.985
FLASH_DURATION = 0.18
EXPAND_END = 2.5
FADE_END = 4.5

# Five 16-step temperature gradients, hot at index 0 to cold at 15.
PALETTES: Tuple[Tuple[int, ...], ...] = (
    # classic supernova: white -> yellow -> red -> magenta -> dark
    (
        0xFFFFFF, 0xFFF8CC, 0xFFE077, 0xFFC033,
        0xFF9911, 0xFF6600, 0xFF3300, 0xEE1144,
        0xCC0066, 0x990077, 0x660066, 0x440055,
        0x220044, 0x110022, 0x080011, 0x000000,
    ),
    # hot blue
    (
        0xFFFFFF, 0xCCEEFF, 0x88CCFF, 0x44AAFF,
        0x2288EE, 0x1166CC, 0x0044AA, 0x442299,
        0x661188, 0x881177, 0x660055, 0x440044,
        0x220033, 0x110022, 0x080011, 0x000000,
    ),
    # green nebula
    (
        0xFFFFFF, 0xDDFFEE, 0x99FFCC, 0x55EEAA,
        0x22DD88, 0x11AA66, 0x008855, 0x006666,
        0x005577, 0x004488, 0x003366, 0x002255,
        0x001144, 0x000833, 0x000422, 0x000000,
    ),
    # violet / pink crystal
    (
        0xFFFFFF, 0xFFDDFF, 0xFFAAEE, 0xFF77DD,
        0xEE44CC, 0xCC22BB, 0x9911AA, 0x770099,
        0x550088, 0x440077, 0x330066, 0x220055,
        0x110044, 0x080033, 0x040022, 0x000000,
    ),
    # warm gold
    (
        0xFFFFEE, 0xFFEEAA, 0xFFDD66, 0xFFBB22,
        0xFF9900, 0xEE7700, 0xCC5500, 0xAA3300,
        0x881122, 0x660033, 0x440033, 0x330022,
        0x220011, 0x110008, 0x080004, 0x000000,
    ),
)
PALETTE_LEN = 16


def palette_colour(palette: int, t: float) -> int:
    """Colour from ``palette`` at temperature ``t`` (0 hot, 1 cold), clamped."""
    t = min(max(t, 0.0), 0.999)
    return PALETTES[palette][int(t * PALETTE_LEN)]


def random_unit(rng: random.Random) -> Tuple[float, float, float]:
    """A uniformly distributed random unit vector (Marsaglia's method)."""
    while True:
        u = rng.uniform(-1.0, 1.0)
        v = rng.uniform(-1.0, 1.0)
        s = u * u + v * v
        if s >= 1.0 or s == 0.0:
            continue
        f = 2.0 * math.sqrt(1.0 - s)
        return u * f, v * f, 1.0 - 2.0 * s


class Phase(Enum):
    """Life stages of a supernova."""

    CHARGE = 0
    FLASH = 1
    EXPAND = 2
    FADE = 3
    DONE = 4


class ParticleKind(IntEnum):
    """What a debris particle represents and how it is drawn."""

    DUST = 0
    JET = 1
    EMBER = 2


@dataclass
class Particle:
    """One piece of debris moving outward from a nova."""

    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    age: float
    life: float
    palette: int
    kind: ParticleKind


@dataclass
class Nova:
    """A single supernova event and its timing."""

    cx: float
    cy: float
    cz: float
    scale: float
    duration_charge: float
    palette: int
    jets: int
    duration_flash: float = FLASH_DURATION
    phase: Phase = Phase.CHARGE
    t: float = 0.0

    @property
    def active(self) -> bool:
        return self.phase is not Phase.DONE


class NovaShow:
    """Runs a continuous show of novae and their debris inside a volume."""

    def __init__(self, volume: Volume, rng: Optional[random.Random] = None) -> None:
        self.volume = volume
        self.rng = rng if rng is not None else random.Random()
        self._particles: List[Optional[Particle]] = [None] * MAX_PARTICLES
        self._hint = 0
        self._novae: List[Optional[Nova]] = [None] * MAX_NOVAE
        self.next_big_in = 1.0
        self.next_small_in = 0.5
        # the first nova starts immediately so there is something to see
        self.start_nova(*volume.centre, 1.0)

    @property
    def particles(self) -> List[Particle]:
        """All live particles."""
        return [p for p in self._particles if p is not None]

    @property
    def novae(self) -> List[Nova]:
        """All novae that have not finished."""
        return [n for n in self._novae if n is not None and n.active]

    def _alloc_particle(self) -> Optional[int]:
        for n in range(MAX_PARTICLES):
            i = (self._hint + n) % MAX_PARTICLES
            if self._particles[i] is None:
                self._hint = (i + 1) % MAX_PARTICLES
                return i
        return None

    def start_nova(self, x: float, y: float, z: float, scale: float) -> Optional[Nova]:
        """Begin a nova at a point; returns None when every slot is busy."""
        slot = next(
            (i for i, n in enumerate(self._novae) if n is None or not n.active), None
        )
        if slot is None:
            return None
        rng = self.rng
        duration_charge = rng.uniform(0.8, 1.6) * (0.5 + 0.5 * scale)
        palette = rng.randrange(len(PALETTES))
        jets = 2 + rng.randrange(4) if scale > 0.7 else 0
        nova = Nova(x, y, z, scale, duration_charge, palette, jets)
        self._novae[slot] = nova
        return nova

    def _spawn_jet(self, nova: Nova, dx: float, dy: float, dz: float) -> None:
        rng = self.rng
        jitter = 0.08
        for _ in range(int(40 * nova.scale)):
            idx = self._alloc_particle()
            if idx is None:
                return
            vx = dx + rng.uniform(-jitter, jitter)
            vy = dy + rng.uniform(-jitter, jitter)
            vz = dz + rng.uniform(-jitter, jitter)
            speed = rng.uniform(40.0, 95.0) * nova.scale
            self._particles[idx] = Particle(
                nova.cx, nova.cy, nova.cz,
                vx * speed, vy * speed, vz * speed,
                0.0, rng.uniform(1.4, 2.4), nova.palette, ParticleKind.JET,
            )

    def _spawn_shockwave(self, nova: Nova) -> None:
        rng = self.rng
        for _ in range(int(700 * nova.scale)):
            idx = self._alloc_particle()
            if idx is None:
                return
            dx, dy, dz = random_unit(rng)
            speed = rng.uniform(15.0, 70.0) * nova.scale
            self._particles[idx] = Particle(
                nova.cx, nova.cy, nova.cz,
                dx * speed, dy * speed, dz * speed,
                0.0, rng.uniform(1.6, 3.4), nova.palette, ParticleKind.DUST,
            )
        for _ in range(nova.jets):
            self._spawn_jet(nova, *random_unit(rng))

    def _spawn_embers(self, nova: Nova) -> None:
        rng = self.rng
        for _ in range(int(120 * nova.scale)):
            idx = self._alloc_particle()
            if idx is None:
                return
            dx, dy, dz = random_unit(rng)
            r = rng.uniform(2.0, 18.0 * nova.scale)
            x, y, z = nova.cx + dx * r, nova.cy + dy * r, nova.cz + dz * r
            vx = dx * rng.uniform(2.0, 10.0)
            vy = dy * rng.uniform(2.0, 10.0)
            vz = dz * rng.uniform(2.0, 10.0)
            age = rng.uniform(0.0, 0.4)
            life = rng.uniform(2.5, 4.5)
            self._particles[idx] = Particle(
                x, y, z, vx, vy, vz, age, life, nova.palette, ParticleKind.EMBER
            )

    def _update_nova(self, nova: Nova, dt: float) -> None:
        nova.t += dt
        if nova.phase is Phase.CHARGE:
            if nova.t >= nova.duration_charge:
                nova.phase = Phase.FLASH
                nova.t = 0.0
                self._spawn_shockwave(nova)
                self._spawn_embers(nova)
        elif nova.phase is Phase.FLASH:
            if nova.t >= nova.duration_flash:
                nova.phase = Phase.EXPAND
                nova.t = 0.0
        elif nova.phase is Phase.EXPAND:
            if nova.t >= EXPAND_END:
                nova.phase = Phase.FADE
        elif nova.phase is Phase.FADE:
            if nova.t >= FADE_END:
                nova.phase = Phase.DONE

    def _update_particles(self, dt: float) -> None:
        vol = self.volume
        for i, p in enumerate(self._particles):
            if p is None:
                continue
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.z += p.vz * dt
            p.vx *= DRAG
            p.vy *= DRAG
            p.vz *= DRAG
            p.age += dt
            if (
                p.age >= p.life
                or not 0 <= p.x < vol.width
                or not 0 <= p.y < vol.height
                or not 0 <= p.z < vol.depth
            ):
                self._particles[i] = None

    def _direct(self, dt: float) -> None:
        rng = self.rng
        vol = self.volume
        self.next_big_in -= dt
        self.next_small_in -= dt
        if self.next_big_in <= 0:
            ccx, ccy, ccz = vol.centre
            rmax = 18.0
            if any(n is None or not n.active for n in self._novae):
                self.start_nova(
                    ccx + rng.uniform(-rmax, rmax),
                    ccy + rng.uniform(-rmax, rmax),
                    ccz + rng.uniform(-6.0, 6.0),
                    rng.uniform(0.85, 1.1),
                )
            self.next_big_in = rng.uniform(7.0, 11.0)
        if self.next_small_in <= 0:
            if any(n is None or not n.active for n in self._novae):
                self.start_nova(
                    rng.uniform(15.0, vol.width - 15.0),
                    rng.uniform(15.0, vol.height - 15.0),
                    rng.uniform(8.0, vol.depth - 8.0),
                    rng.uniform(0.35, 0.6),
                )
            self.next_small_in = rng.uniform(2.0, 4.5)

    def step(self, dt: float) -> None:
        """Advance the show by ``dt`` seconds, clamped to a sane frame time."""
        dt = min(max(dt, MIN_DT), MAX_DT)
        self._direct(dt)
        for nova in self._novae:
            if nova is not None and nova.active:
                self._update_nova(nova, dt)
        self._update_particles(dt)

    def _draw_sphere(self, cx: int, cy: int, cz: int, rad: int, colour: int) -> None:
        r2 = rad * rad
        span = range(-rad, rad + 1)
        add = self.volume.add
        for dx in span:
            for dy in span:
                for dz in span:
                    if dx * dx + dy * dy + dz * dz <= r2:
                        add(cx + dx, cy + dy, cz + dz, colour)

    def _draw_core(self, nova: Nova) -> None:
        cx, cy, cz = int(nova.cx), int(nova.cy), int(nova.cz)
        if nova.phase is Phase.CHARGE:
            k = nova.t / nova.duration_charge
            pulse = 0.5 + 0.5 * math.sin(nova.t * 18.0)
            rad = int(2.0 + 3.0 * k * nova.scale)
            gain = 0.4 + 0.6 * pulse
            colour = rgb(*(int(c * gain) for c in channels(palette_colour(nova.palette, 0.0))))
            self._draw_sphere(cx, cy, cz, rad, colour)
        elif nova.phase is Phase.FLASH:
            k = 1.0 - nova.t / nova.duration_flash
            rad = int(8.0 + 14.0 * nova.scale * k)
            level = min(max(int(255 * k), 0), 255)
            self._draw_sphere(cx, cy, cz, rad, rgb(level, level, level))

    def _draw_particles(self) -> None:
        add = self.volume.add
        for p in self._particles:
            if p is None:
                continue
            t = p.age / p.life
            colour = palette_colour(p.palette, t)
            add(int(p.x), int(p.y), int(p.z), colour)
            if p.kind is ParticleKind.JET:
                speed = math.sqrt(p.vx * p.vx + p.vy * p.vy + p.vz * p.vz)
                if speed > 1.0:
                    tail = palette_colour(p.palette, t + 0.08)
                    add(
                        int(p.x - p.vx / speed),
                        int(p.y - p.vy / speed),
                        int(p.z - p.vz / speed),
                        tail,
                    )

    def draw(self) -> None:
        """Render particles and nova cores, replacing the volume's contents."""
        self.volume.clear()
        self._draw_particles()
        for nova in self._novae:
            if nova is not None and nova.active:
                self._draw_core(nova)