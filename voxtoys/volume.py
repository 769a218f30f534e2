"""A bounded voxel volume holding packed 24-bit RGB colours."""

from __future__ import annotations

from typing import Dict, Tuple

Colour = int
Coord = Tuple[int, int, int]


def rgb(r: int, g: int, b: int) -> Colour:
    """Pack three 0..255 channel values into one colour."""
    for value in (r, g, b):
        if not 0 <= value <= 255:
            raise ValueError(f"channel value {value} outside 0..255")
    return (r << 16) | (g << 8) | b


def channels(colour: Colour) -> Tuple[int, int, int]:
    """Split a colour into its red, green and blue channels."""
    if not 0 <= colour <= 0xFFFFFF:
        raise ValueError(f"colour {colour:#x} outside 24-bit range")
    return (colour >> 16) & 0xFF, (colour >> 8) & 0xFF, colour & 0xFF


def dim(colour: Colour, shift: int) -> Colour:
    """Darken a colour by shifting every channel right by ``shift`` bits."""
    return rgb(*(c >> shift for c in channels(colour)))


def fade(colour: Colour, factor: float) -> Colour:
    """Scale a colour's brightness by ``factor``, clamped to 0..1."""
    factor = min(max(factor, 0.0), 1.0)
    return rgb(*(int(c * factor) for c in channels(colour)))


class Volume:
    """A width x height x depth grid of colours; 0 means unlit."""

    def __init__(self, width: int = 128, height: int = 128, depth: int = 64) -> None:
        if width <= 0 or height <= 0 or depth <= 0:
            raise ValueError("volume dimensions must be positive")
        self.width = width
        self.height = height
        self.depth = depth
        self._voxels = [0] * (width * height * depth)

    @property
    def centre(self) -> Tuple[float, float, float]:
        """Centre point of the volume in voxel coordinates."""
        return (
            (self.width - 1) * 0.5,
            (self.height - 1) * 0.5,
            (self.depth - 1) * 0.5,
        )

    def _index(self, x: int, y: int, z: int) -> int:
        return (z * self.height + y) * self.width + x

    def contains(self, x: int, y: int, z: int) -> bool:
        """True if the coordinate lies inside the volume."""
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def get(self, x: int, y: int, z: int) -> Colour:
        """Colour at a coordinate; raises IndexError outside the volume."""
        if not self.contains(x, y, z):
            raise IndexError(f"voxel ({x}, {y}, {z}) outside volume")
        return self._voxels[self._index(x, y, z)]

    def set(self, x: int, y: int, z: int, colour: Colour) -> None:
        """Overwrite a voxel; coordinates outside the volume are ignored."""
        if self.contains(x, y, z):
            self._voxels[self._index(x, y, z)] = colour

    def add(self, x: int, y: int, z: int, colour: Colour) -> None:
        """Blend additively into a voxel, saturating each channel at 255."""
        if not self.contains(x, y, z):
            return
        i = self._index(x, y, z)
        current = channels(self._voxels[i])
        extra = channels(colour)
        self._voxels[i] = rgb(*(min(a + b, 255) for a, b in zip(current, extra)))

    def clear(self) -> None:
        """Turn every voxel off."""
        self._voxels[:] = [0] * len(self._voxels)

    def lit(self) -> Dict[Coord, Colour]:
        """Map of every non-zero voxel to its colour."""
        result: Dict[Coord, Colour] = {}
        plane = self.width * self.height
        for i, colour in enumerate(self._voxels):
            if colour:
                z, rest = divmod(i, plane)
                y, x = divmod(rest, self.width)
                result[(x, y, z)] = colour
        return result