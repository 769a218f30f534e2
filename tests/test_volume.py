import pytest

from voxtoys.volume import Volume, channels, dim, fade, rgb


def test_rgb_channels_round_trip():
    colour = rgb(18, 52, 86)
    assert channels(colour) == (18, 52, 86)


def test_rgb_packs_hex_layout():
    assert rgb(0xFF, 0xEE, 0x88) == 0xFFEE88


def test_rgb_rejects_out_of_range():
    with pytest.raises(ValueError):
        rgb(256, 0, 0)
    with pytest.raises(ValueError):
        rgb(0, -1, 0)


def test_channels_rejects_out_of_range():
    with pytest.raises(ValueError):
        channels(0x1000000)


def test_dim_zero_shift_is_identity():
    assert dim(0x3366CC, 0) == 0x3366CC


def test_dim_never_brightens():
    original = channels(0xEEDD99)
    dimmed = channels(dim(0xEEDD99, 2))
    assert all(d <= o for d, o in zip(dimmed, original))


def test_fade_clamps_factor():
    assert fade(0x00AAFF, 2.0) == 0x00AAFF
    assert fade(0x00AAFF, -1.0) == 0


def test_set_and_get_round_trip():
    vol = Volume(4, 5, 6)
    vol.set(1, 2, 3, 0xABCDEF)
    assert vol.get(1, 2, 3) == 0xABCDEF
    assert vol.get(0, 0, 0) == 0


def test_set_outside_is_ignored():
    vol = Volume(4, 4, 4)
    vol.set(-1, 0, 0, 0xFFFFFF)
    vol.set(4, 0, 0, 0xFFFFFF)
    assert vol.lit() == {}


def test_get_outside_raises():
    vol = Volume(4, 4, 4)
    with pytest.raises(IndexError):
        vol.get(0, 4, 0)


def test_contains():
    vol = Volume(2, 3, 4)
    assert vol.contains(1, 2, 3)
    assert not vol.contains(2, 0, 0)
    assert not vol.contains(0, 0, -1)


def test_add_saturates_channels():
    vol = Volume(2, 2, 2)
    vol.set(0, 0, 0, rgb(200, 10, 0))
    vol.add(0, 0, 0, rgb(100, 20, 0))
    assert channels(vol.get(0, 0, 0)) == (255, 30, 0)


def test_add_outside_is_ignored():
    vol = Volume(2, 2, 2)
    vol.add(5, 5, 5, 0xFFFFFF)
    assert vol.lit() == {}


def test_clear_and_lit():
    vol = Volume(3, 3, 3)
    vol.set(2, 1, 0, 0x010203)
    vol.set(0, 2, 2, 0x040506)
    assert vol.lit() == {(2, 1, 0): 0x010203, (0, 2, 2): 0x040506}
    vol.clear()
    assert vol.lit() == {}


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Volume(0, 4, 4)


def test_centre():
    vol = Volume(5, 7, 9)
    assert vol.centre == (2.0, 3.0, 4.0)