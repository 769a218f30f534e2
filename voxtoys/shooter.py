"""A volumetric space shooter: a formation of invaders, dive-bombers and weapon pickups."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Optional

from voxtoys.shooter_entities import (
    BULLET_SPEED,
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
from voxtoys.volume import Volume

MIN_DT = 0.001
MAX_DT = 0.1
MAX_BULLETS = 96
MAX_ENEMY_BULLETS = 64
MAX_PICKUPS = 8
ROWS_MAX = 4
COLS_MAX = 7
START_LIVES = 3
INVULN_TIME = 2.0
GAMEOVER_DELAY = 5.0
PICKUP_DURATION = 12.0
SHIP_ACCEL = 300.0
SHIP_DAMPING = 0.88
SHIP_MAX_SPEED = 70.0

_KEYS = ("w", "a", "s", "d", "z", "x", " ")

_TIER_COLOURS = {
    0: (0x00AAAA, 0x55EEEE, 0xFF00AA),  # grunt: teal
    1: (0xAA22FF, 0xFF88FF, 0xFFAA00),  # mid: purple
    2: (0xEE2222, 0xFFCC00, 0xFFFFFF),  # elite: red/gold
}
_BOOM_COLOURS = {0: 0x00FFFF, 1: 0xFF88FF, 2: 0xFFAA00}
_DROP_CHANCE = {0: 8, 1: 30, 2: 100}
_BODY_TINT = {Weapon.TRIPLE: 0xFFAA00, Weapon.LASER: 0xFF00FF, Weapon.RAPID: 0xFFFF00}


@dataclass
class Enemy:
    """One invader; formation members store positions relative to the formation."""

    x: float
    y: float
    z: float
    row: int
    col: int
    tier: int
    hp: int
    fire_timer: float
    active: bool = True
    diving: bool = False
    dive_vx: float = 0.0
    dive_vy: float = 0.0
    dive_vz: float = 0.0


class ShooterGame:
    """Game state, rules and rendering for the space shooter."""

    def __init__(self, volume: Volume, rng: Optional[random.Random] = None) -> None:
        self.volume = volume
        self.rng = rng if rng is not None else random.Random()
        self.fire_cooldown = 0.0
        self.dive_timer = 0.0
        self.reset()

    # -- views ----------------------------------------------------------

    @property
    def bullets(self) -> List[Bullet]:
        """Live player bullets."""
        return [b for b in self._bullets if b is not None]

    @property
    def enemy_bullets(self) -> List[EnemyBullet]:
        """Live enemy bullets."""
        return [b for b in self._ebullets if b is not None]

    @property
    def pickups(self) -> List[Pickup]:
        """Pickups currently floating in the volume."""
        return [p for p in self._pickups if p is not None]

    @property
    def enemies(self) -> List[Enemy]:
        """Enemies still in play."""
        return [e for e in self._enemies if e.active]

    # -- state ----------------------------------------------------------

    def _clear_keys(self) -> None:
        self._keys = {key: False for key in _KEYS}

    def _respawn_ship(self) -> None:
        cx, _, cz = self.volume.centre
        self.ship_x = cx
        self.ship_y = self.volume.height * 0.75
        self.ship_z = cz
        self.ship_vx = self.ship_vy = self.ship_vz = 0.0
        self.invuln = INVULN_TIME

    def reset(self) -> None:
        """Start a fresh game from wave 1."""
        self._respawn_ship()
        self.alive = True
        self.weapon = Weapon.SINGLE
        self.weapon_timer = 0.0
        self.lives = START_LIVES
        self._bullets: List[Optional[Bullet]] = [None] * MAX_BULLETS
        self._ebullets: List[Optional[EnemyBullet]] = [None] * MAX_ENEMY_BULLETS
        self._pickups: List[Optional[Pickup]] = [None] * MAX_PICKUPS
        self.particles = ParticlePool(self.rng)
        self.stars = Starfield(self.volume, self.rng)
        self._clear_keys()
        self._thrusting = False
        self.score = 0
        self.start_wave(1)
        self.gameover_timer = 0.0

    def start_wave(self, wave: int) -> None:
        """Lay out a fresh formation for ``wave``; later waves are larger and faster."""
        if wave < 1:
            raise ValueError("wave numbers start at 1")
        self.wave = wave
        self.formation_x = 0.0
        self.formation_y = 0.0
        self.formation_dir = 1
        self.formation_speed = 8.0 + (wave - 1) * 1.5

        rows = min(3 + (1 if wave > 2 else 0), ROWS_MAX)
        cols = min(5 + (2 if wave > 1 else 0), COLS_MAX)
        spacing_x, spacing_y = 10.0, 8.0
        cx, _, cz = self.volume.centre
        base_x = cx - (cols - 1) * spacing_x * 0.5
        base_y = 12.0

        self._enemies: List[Enemy] = []
        for r in range(rows):
            tier = 2 if r == 0 else (1 if r == 1 else 0)
            for c in range(cols):
                self._enemies.append(
                    Enemy(
                        x=base_x + c * spacing_x,
                        y=base_y + r * spacing_y,
                        z=cz + math.sin(c * 0.9) * 4.0,
                        row=r,
                        col=c,
                        tier=tier,
                        hp=1 + tier,
                        fire_timer=self.rng.uniform(2.0, 6.0),
                    )
                )

    def press(self, key: str) -> None:
        """Register a key for the next step; 'r' restarts the game."""
        if key in self._keys:
            self._keys[key] = True
        elif key in ("r", "R"):
            self.reset()
            print("restarted!")

    # -- weapons --------------------------------------------------------

    def _add_bullet(
        self, x: float, y: float, z: float, vx: float, vy: float, vz: float,
        colour: int, piercing: bool = False,
    ) -> None:
        slot = next((i for i, b in enumerate(self._bullets) if b is None), None)
        if slot is not None:
            self._bullets[slot] = Bullet(x, y, z, vx, vy, vz, colour, piercing)

    def fire(self) -> None:
        """Shoot the current weapon from the ship's nose."""
        x, y, z = self.ship_x, self.ship_y, self.ship_z
        speed = BULLET_SPEED
        if self.weapon is Weapon.SINGLE:
            self._add_bullet(x, y - 4, z, 0, -speed, 0, 0xFFFF55)
        elif self.weapon is Weapon.TRIPLE:
            spread = 28.0
            self._add_bullet(x, y - 4, z, 0, -speed, 0, 0xFFAA00)
            self._add_bullet(x - 1, y - 3, z, -spread, -speed * 0.95, 0, 0xFFAA00)
            self._add_bullet(x + 1, y - 3, z, spread, -speed * 0.95, 0, 0xFFAA00)
        elif self.weapon is Weapon.LASER:
            self._add_bullet(x, y - 4, z, 0, -speed * 2.0, 0, 0xFF55FF, True)
            self._add_bullet(x, y - 5, z, 0, -speed * 2.0, 0, 0xFFAAFF, True)
        elif self.weapon is Weapon.RAPID:
            self._add_bullet(x - 2, y - 3, z, 0, -speed, 0, 0xFFFF00)
            self._add_bullet(x + 2, y - 3, z, 0, -speed, 0, 0xFFFF00)

    def _spawn_enemy_bullet(self, x: float, y: float, z: float) -> None:
        bullet = aimed_bullet(x, y, z, self.ship_x, self.ship_y, self.ship_z)
        if bullet is None:
            return
        slot = next((i for i, b in enumerate(self._ebullets) if b is None), None)
        if slot is not None:
            self._ebullets[slot] = bullet

    def _spawn_pickup(self, x: float, y: float, z: float) -> None:
        slot = next((i for i, p in enumerate(self._pickups) if p is None), None)
        if slot is None:
            return
        rng = self.rng
        vx = rng.uniform(-3.0, 3.0)
        vz = rng.uniform(-2.0, 2.0)
        weapon = Weapon(1 + rng.randrange(len(Weapon) - 1))
        bob = rng.uniform(0.0, 6.28)
        self._pickups[slot] = Pickup(x, y, z, vx, 15.0, vz, weapon, bob)

    def _lose_life(self) -> None:
        self.lives -= 1
        if self.lives <= 0:
            self.alive = False
            print(f"game over! score: {self.score}  waves: {self.wave}")
        else:
            self._respawn_ship()

    # -- simulation -----------------------------------------------------

    def _outside(self, x: float, y: float, z: float) -> bool:
        vol = self.volume
        return not (0 <= x < vol.width and 0 <= y < vol.height and 0 <= z < vol.depth)

    def _update_ship(self, dt: float) -> None:
        if not self.alive:
            return
        if self.invuln > 0:
            self.invuln -= dt
        if self.weapon is not Weapon.SINGLE:
            self.weapon_timer -= dt
            if self.weapon_timer <= 0:
                self.weapon = Weapon.SINGLE

        keys = self._keys
        ax = SHIP_ACCEL * (keys["d"] - keys["a"])
        ay = SHIP_ACCEL * (keys["s"] - keys["w"])
        az = SHIP_ACCEL * (keys["x"] - keys["z"])

        self.ship_vx = (self.ship_vx + ax * dt) * SHIP_DAMPING
        self.ship_vy = (self.ship_vy + ay * dt) * SHIP_DAMPING
        self.ship_vz = (self.ship_vz + az * dt) * SHIP_DAMPING
        speed = math.sqrt(self.ship_vx ** 2 + self.ship_vy ** 2 + self.ship_vz ** 2)
        if speed > SHIP_MAX_SPEED:
            s = SHIP_MAX_SPEED / speed
            self.ship_vx *= s
            self.ship_vy *= s
            self.ship_vz *= s

        vol = self.volume
        self.ship_x = min(max(self.ship_x + self.ship_vx * dt, 4.0), vol.width - 5.0)
        self.ship_y = min(max(self.ship_y + self.ship_vy * dt, 4.0), vol.height - 5.0)
        self.ship_z = min(max(self.ship_z + self.ship_vz * dt, 3.0), vol.depth - 4.0)

    def _update_bullets(self, dt: float) -> None:
        if self.fire_cooldown > 0:
            self.fire_cooldown -= dt
        if self._keys[" "] and self.fire_cooldown <= 0 and self.alive:
            self.fire()
            self.fire_cooldown = weapon_cooldown(self.weapon)

        for i, b in enumerate(self._bullets):
            if b is None:
                continue
            b.x += b.vx * dt
            b.y += b.vy * dt
            b.z += b.vz * dt
            b.life -= dt
            if b.life <= 0 or self._outside(b.x, b.y, b.z):
                self._bullets[i] = None

    def _update_enemy_bullets(self, dt: float) -> None:
        for i, b in enumerate(self._ebullets):
            if b is None:
                continue
            b.x += b.vx * dt
            b.y += b.vy * dt
            b.z += b.vz * dt
            b.life -= dt
            if b.life <= 0 or self._outside(b.x, b.y, b.z):
                self._ebullets[i] = None

    def _move_formation(self, dt: float) -> None:
        members = [e for e in self._enemies if e.active and not e.diving]
        self.formation_x += self.formation_dir * self.formation_speed * dt
        if not members:
            return
        lx = min(e.x for e in members)
        rx = max(e.x for e in members)
        bounced = False
        if rx + self.formation_x > self.volume.width - 4:
            self.formation_dir = -1
            bounced = True
        elif lx + self.formation_x < 4:
            self.formation_dir = 1
            bounced = True
        if bounced:
            self.formation_y += 4.0

    def _maybe_dive(self, dt: float) -> None:
        rng = self.rng
        self.dive_timer -= dt
        if self.dive_timer > 0:
            return
        self.dive_timer = max(rng.uniform(2.5, 5.0) - (self.wave - 1) * 0.3, 0.8)
        candidates = [e for e in self._enemies if e.active and not e.diving]
        if not candidates or not self.alive:
            return
        e = candidates[rng.randrange(len(candidates))]
        e.x += self.formation_x
        e.y += self.formation_y
        e.diving = True
        dx, dy, dz = self.ship_x - e.x, self.ship_y - e.y, self.ship_z - e.z
        length = math.sqrt(dx * dx + dy * dy + dz * dz)
        speed = 30.0 + self.wave * 2.0
        if length > 0.001:
            e.dive_vx = dx / length * speed
            e.dive_vy = dy / length * speed
            e.dive_vz = dz / length * speed

    def _hit_by_bullets(self, e: Enemy, ex: float, ey: float) -> None:
        hit_r2 = (2.5 + e.tier * 0.5) ** 2
        for j, b in enumerate(self._bullets):
            if b is None:
                continue
            dx, dy, dz = b.x - ex, b.y - ey, b.z - e.z
            if dx * dx + dy * dy + dz * dz >= hit_r2:
                continue
            if not b.piercing:
                self._bullets[j] = None
            e.hp -= 1
            self.particles.spawn_explosion(b.x, b.y, b.z, 0xFFFFFF, 3)
            if e.hp <= 0:
                self.particles.spawn_explosion(
                    ex, ey, e.z, _BOOM_COLOURS[e.tier], 20 + e.tier * 10
                )
                self.score += (e.tier + 1) * 20
                if self.rng.randrange(100) < _DROP_CHANCE[e.tier]:
                    self._spawn_pickup(ex, ey, e.z)
                e.active = False
                return

    def _update_enemies(self, dt: float) -> None:
        vol = self.volume
        self._move_formation(dt)
        self._maybe_dive(dt)

        for e in self._enemies:
            if not e.active:
                continue

            if e.diving:
                e.x += e.dive_vx * dt
                e.y += e.dive_vy * dt
                e.z += e.dive_vz * dt
                if (
                    e.y >= vol.height - 1
                    or e.x < 1 or e.x >= vol.width - 1
                    or e.z < 1 or e.z >= vol.depth - 1
                ):
                    e.active = False
                    continue

            ex = e.x if e.diving else e.x + self.formation_x
            ey = e.y if e.diving else e.y + self.formation_y

            e.fire_timer -= dt
            if e.fire_timer <= 0 and self.alive:
                e.fire_timer = max(
                    self.rng.uniform(3.0, 7.0) - (self.wave - 1) * 0.2, 0.5
                )
                self._spawn_enemy_bullet(ex, ey + 2, e.z)

            self._hit_by_bullets(e, ex, ey)
            if not e.active:
                continue

            if self.alive and self.invuln <= 0:
                dx, dy, dz = self.ship_x - ex, self.ship_y - ey, self.ship_z - e.z
                if dx * dx + dy * dy + dz * dz < 9.0:
                    self.particles.spawn_explosion(
                        self.ship_x, self.ship_y, self.ship_z, 0x00FF55, 25
                    )
                    self.particles.spawn_explosion(ex, ey, e.z, 0xFFAA00, 15)
                    e.active = False
                    self._lose_life()

            if not e.diving and e.y + self.formation_y >= vol.height - 6 and self.alive:
                self.lives = 0
                self.alive = False
                print(f"the swarm reached you! score: {self.score}")

        if not self.enemies:
            print(f"wave {self.wave + 1}!")
            self.start_wave(self.wave + 1)

    def _update_pickups(self, dt: float) -> None:
        vol = self.volume
        for i, p in enumerate(self._pickups):
            if p is None:
                continue
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.z += p.vz * dt + math.sin(p.bob_phase) * 0.3
            p.bob_phase += dt * 3.0

            if (
                p.y > vol.height + 3
                or p.x < 0 or p.x >= vol.width
                or p.z < 0 or p.z >= vol.depth
            ):
                self._pickups[i] = None
                continue

            if self.alive:
                dx, dy, dz = p.x - self.ship_x, p.y - self.ship_y, p.z - self.ship_z
                if dx * dx + dy * dy + dz * dz < 16.0:
                    self.weapon = p.weapon
                    self.weapon_timer = PICKUP_DURATION
                    self.particles.spawn_explosion(p.x, p.y, p.z, 0xFFFFFF, 12)
                    self._pickups[i] = None
                    print(f"pickup! weapon={int(p.weapon)}")

    def _check_enemy_bullet_hit(self) -> None:
        if not self.alive or self.invuln > 0:
            return
        for i, b in enumerate(self._ebullets):
            if b is None:
                continue
            dx, dy, dz = b.x - self.ship_x, b.y - self.ship_y, b.z - self.ship_z
            if dx * dx + dy * dy + dz * dz < 4.0:
                self._ebullets[i] = None
                self.particles.spawn_explosion(
                    self.ship_x, self.ship_y, self.ship_z, 0xFF3333, 15
                )
                self._lose_life()
                return

    def step(self, dt: float) -> None:
        """Advance one frame of ``dt`` seconds, consuming the pressed keys."""
        dt = min(max(dt, MIN_DT), MAX_DT)
        self._thrusting = self._keys["w"]

        self._update_ship(dt)
        self._update_bullets(dt)
        self._update_enemy_bullets(dt)
        self._update_enemies(dt)
        self._update_pickups(dt)
        self.particles.update(dt)
        self.stars.update(dt)
        self._check_enemy_bullet_hit()

        self._clear_keys()
        if not self.alive:
            self.gameover_timer += dt
            if self.gameover_timer > GAMEOVER_DELAY:
                self.reset()

    # -- rendering ------------------------------------------------------

    def _draw_enemy(self, e: Enemy, ex: int, ey: int, ez: int) -> None:
        body, accent, glow = _TIER_COLOURS.get(e.tier, _TIER_COLOURS[2])
        if e.tier == 0:
            voxels = [
                (-1, 0, 0, body), (0, 0, 0, body), (1, 0, 0, body),
                (0, 1, 0, accent), (0, 0, 1, glow),
            ]
        elif e.tier == 1:
            voxels = [
                (0, -1, 0, body), (0, 0, 0, body), (0, 1, 0, accent),
                (-1, 0, 0, body), (1, 0, 0, body),
                (-2, 0, 0, accent), (2, 0, 0, accent), (0, 0, 1, glow),
            ]
        else:
            voxels = [
                (0, -1, 0, body), (0, 0, 0, body), (0, 1, 0, body), (0, 2, 0, accent),
                (-1, 0, 0, body), (1, 0, 0, body), (-2, 0, 0, accent), (2, 0, 0, accent),
                (0, 0, -1, body), (0, 0, 1, body), (0, 0, 2, glow), (0, 0, -2, glow),
            ]
        for dx, dy, dz, colour in voxels:
            self.volume.set(ex + dx, ey + dy, ez + dz, colour)

    def _draw_enemies(self) -> None:
        for e in self.enemies:
            x = e.x if e.diving else e.x + self.formation_x
            y = e.y if e.diving else e.y + self.formation_y
            self._draw_enemy(e, int(x), int(y), int(e.z))

    def _draw_pickups(self) -> None:
        vol = self.volume
        icon = 0xFFFFFF
        for p in self.pickups:
            px, py, pz = int(p.x), int(p.y), int(p.z)
            shell = weapon_shell_colour(p.weapon)
            blink = int(p.bob_phase * 1.5) & 1
            for dx in range(-2, 3):
                for dy in range(-2, 3):
                    for dz in range(-2, 3):
                        d2 = dx * dx + dy * dy + dz * dz
                        if 2 <= d2 <= 4 and (blink or d2 == 4):
                            vol.set(px + dx, py + dy, pz + dz, shell)
            iy = py + 2
            if p.weapon is Weapon.TRIPLE:
                marks = [(-1, 0), (0, 0), (1, 0)]
            elif p.weapon is Weapon.LASER:
                marks = [(0, -1), (0, 0), (0, 1)]
            elif p.weapon is Weapon.RAPID:
                marks = [(-1, 1), (1, 1), (-1, -1), (1, -1), (0, 0)]
            else:
                marks = [(0, 0)]
            for dx, dz in marks:
                vol.set(px + dx, iy, pz + dz, icon)

    def _draw_bullets(self) -> None:
        vol = self.volume
        for b in self.bullets:
            bx, by, bz = int(b.x), int(b.y), int(b.z)
            vol.set(bx, by, bz, b.colour)
            if b.piercing:
                vol.set(bx, by + 1, bz, b.colour)
                vol.set(bx, by + 2, bz, 0xFFAAFF)
            else:
                vol.set(bx, by + 1, bz, 0xFF8800)

    def _draw_enemy_bullets(self) -> None:
        vol = self.volume
        for b in self.enemy_bullets:
            bx, by, bz = int(b.x), int(b.y), int(b.z)
            vol.set(bx, by, bz, 0xFF3333)
            vol.set(bx, by - 1, bz, 0xAA0000)

    def _draw_ship(self) -> None:
        if not self.alive:
            return
        if self.invuln > 0 and int(self.invuln * 10) & 1:
            return
        vol = self.volume
        sx, sy, sz = int(self.ship_x), int(self.ship_y), int(self.ship_z)
        body = _BODY_TINT.get(self.weapon, 0x00FF55)
        nose, wing, cockpit, fin, engine = 0xFFFFAA, 0x0077FF, 0xAAEEFF, 0xFF5500, 0x00CC33
        voxels = [
            (0, -3, 0, nose), (0, -2, 0, body), (0, -1, 0, body),
            (0, 0, 0, body), (0, 1, 0, body), (0, 2, 0, engine),
            (0, -1, 1, cockpit), (0, 0, 1, cockpit),
            (-1, 0, 0, wing), (-2, 0, 0, wing), (-3, 1, 0, wing),
            (1, 0, 0, wing), (2, 0, 0, wing), (3, 1, 0, wing),
            (-3, 1, -1, wing), (3, 1, -1, wing),
            (0, 1, 1, fin), (0, 2, 1, fin), (0, 2, 2, fin),
        ]
        if self._thrusting:
            voxels += [(0, 3, 0, 0xFFAA00), (-1, 3, 0, 0xFFAA00), (1, 3, 0, 0xFFAA00)]
            if self.rng.getrandbits(1):
                voxels.append((0, 4, 0, 0xFF3300))
        for dx, dy, dz, colour in voxels:
            vol.set(sx + dx, sy + dy, sz + dz, colour)

    def _draw_hud(self) -> None:
        vol = self.volume
        y = vol.height - 3
        for i in range(min(self.lives, 5)):
            for x in (2 + i * 3, 3 + i * 3):
                for z in (vol.depth - 2, vol.depth - 3):
                    vol.set(x, y, z, 0xFF0000)
        if self.weapon is not Weapon.SINGLE and self.weapon_timer > 0:
            colour = weapon_shell_colour(self.weapon)
            for i in range(min(int(self.weapon_timer * 0.8), 10)):
                vol.set(vol.width - 3 - i, y, vol.depth - 2, colour)

    def draw(self) -> None:
        """Render the frame into the volume, replacing its contents."""
        self.volume.clear()
        self.stars.draw(self.volume)
        self._draw_enemies()
        self._draw_pickups()
        self._draw_bullets()
        self._draw_enemy_bullets()
        self._draw_ship()
        self.particles.draw(self.volume)
        self._draw_hud()