import math
import random

import pytest

from voxtoys.nova import (
    MAX_NOVAE,
    MAX_PARTICLES,
    NovaShow,
    ParticleKind,
    Phase,
    palette_colour,
    random_unit,
)
from voxtoys.volume import Volume, channels


@pytest.fixture
def show():
    return NovaShow(Volume(), random.Random(1234))


def test_palette_hot_end_is_white():
    assert palette_colour(0, 0.0) == 0xFFFFFF


def test_palette_cold_end_is_black_for_every_palette():
    for p in range(5):
        assert palette_colour(p, 1.0) == 0


def test_palette_clamps_below_zero():
    for p in range(5):
        assert palette_colour(p, -3.0) == palette_colour(p, 0.0)


def test_palette_clamps_above_one():
    assert palette_colour(2, 7.0) == palette_colour(2, 0.9999)


def test_random_unit_has_unit_length():
    rng = random.Random(7)
    for _ in range(200):
        x, y, z = random_unit(rng)
        assert math.sqrt(x * x + y * y + z * z) == pytest.approx(1.0, abs=1e-9)


def test_initial_nova_charges_at_centre(show):
    novae = show.novae
    assert len(novae) == 1
    nova = novae[0]
    assert nova.phase is Phase.CHARGE
    assert (nova.cx, nova.cy, nova.cz) == show.volume.centre
    assert nova.scale == 1.0
    assert 2 <= nova.jets <= 5
    assert show.particles == []


def test_small_nova_has_no_jets(show):
    nova = show.start_nova(40.0, 40.0, 30.0, 0.5)
    assert nova.jets == 0
    assert 0.8 * 0.75 <= nova.duration_charge <= 1.6 * 0.75


def test_start_nova_returns_none_when_slots_full(show):
    for _ in range(MAX_NOVAE - 1):
        assert show.start_nova(50.0, 50.0, 30.0, 0.5) is not None
    assert show.start_nova(50.0, 50.0, 30.0, 0.5) is None
    assert len(show.novae) == MAX_NOVAE


def test_step_clamps_large_dt(show):
    nova = show.novae[0]
    show.step(10.0)
    assert nova.t == pytest.approx(0.1)


def test_nova_goes_through_phases_in_order(show):
    nova = show.novae[0]
    seen = [nova.phase]
    for _ in range(200):
        show.step(0.05)
        if nova.phase is not seen[-1]:
            seen.append(nova.phase)
        if nova.phase is Phase.DONE:
            break
    assert seen == [Phase.CHARGE, Phase.FLASH, Phase.EXPAND, Phase.FADE, Phase.DONE]
    assert not nova.active


def test_detonation_spawns_all_particle_kinds(show):
    nova = show.novae[0]
    while nova.phase is Phase.CHARGE:
        show.step(0.02)
    kinds = {p.kind for p in show.particles}
    assert kinds == {ParticleKind.DUST, ParticleKind.JET, ParticleKind.EMBER}


def test_particles_stay_in_bounds_and_under_capacity(show):
    vol = show.volume
    for _ in range(300):
        show.step(0.05)
        parts = show.particles
        assert len(parts) <= MAX_PARTICLES
        for p in parts:
            assert 0 <= p.x < vol.width
            assert 0 <= p.y < vol.height
            assert 0 <= p.z < vol.depth
            assert p.age < p.life


def test_director_keeps_show_busy(show):
    for _ in range(400):
        show.step(0.05)
    assert 1 <= len(show.novae) <= MAX_NOVAE


def test_charging_core_lights_centre(show):
    show.draw()
    cx, cy, cz = (int(c) for c in show.volume.centre)
    r, g, b = channels(show.volume.get(cx, cy, cz))
    hot_r = channels(palette_colour(show.novae[0].palette, 0.0))[0]
    assert int(hot_r * 0.4) <= r <= hot_r
    assert (r, g, b) != (0, 0, 0)


def test_draw_replaces_previous_contents(show):
    show.volume.set(0, 0, 0, 0x123456)
    show.draw()
    assert show.volume.get(0, 0, 0) == 0
    assert len(show.volume.lit()) > 0


def test_flash_is_grey(show):
    nova = show.novae[0]
    while nova.phase is Phase.CHARGE:
        show.step(0.02)
    assert nova.phase is Phase.FLASH
    show.draw()
    # sample a voxel inside the flash radius but away from debris at the centre
    cx, cy, cz = (int(c) for c in (nova.cx, nova.cy, nova.cz))
    r, g, b = channels(show.volume.get(cx + 6, cy, cz))
    assert r > 0 and g > 0 and b > 0