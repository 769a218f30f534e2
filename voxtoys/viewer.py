"""Scene helpers for the model viewer: file classification, scene lists,
in-place voxel rotation and temperature monitoring."""

from __future__ import annotations

import glob
import math
import os
import re
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from voxtoys.volume import Volume

MODEL_EXTENSIONS = (".obj",)
IMAGE_EXTENSIONS = (".png", ".tga", ".jpg", ".jpeg")

DEFAULT_SENSOR_PATH = "/sys/bus/w1/devices/28-000000000000/w1_slave"
DEFAULT_THERMAL_PATH = "/sys/class/thermal/thermal_zone0/temp"
POLL_INTERVAL = 10.0

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

PathLike = Union[str, "os.PathLike[str]"]


def _extension(filename: str) -> str:
    """Everything from the last '.' of the name, lower-cased, or ''."""
    dot = filename.rfind(".")
    return filename[dot:].lower() if dot >= 0 else ""


def is_model(filename: str) -> bool:
    """True when the file name looks like a mesh the viewer can load."""
    return _extension(filename) in MODEL_EXTENSIONS


def is_image(filename: str) -> bool:
    """True when the file name looks like a picture the viewer can load."""
    return _extension(filename) in IMAGE_EXTENSIONS


def expand_scenes(patterns: Iterable[str]) -> List[str]:
    """Expand shell-style patterns (with ~) into a flat, per-pattern sorted list.

    A pattern that matches nothing is reported and skipped.
    """
    scenes: List[str] = []
    for pattern in patterns:
        matches = sorted(glob.glob(os.path.expanduser(pattern)))
        if not matches:
            print(f"no files match {pattern}")
            continue
        scenes.extend(matches)
    return scenes


def _lround(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def rotate_z(source: Volume, angle: float) -> Volume:
    """A copy of ``source`` turned about the vertical axis by ``angle`` radians.

    Uses three shears so every destination column takes exactly one source
    column; columns that fall outside the source are left empty.
    """
    width, height, depth = source.width, source.height, source.depth
    result = Volume(width, height, depth)

    two_pi = 2.0 * math.pi
    half_pi = 0.5 * math.pi
    angle = math.fmod(math.fmod(angle, two_pi) + half_pi * 5, two_pi) - half_pi
    flip = angle > half_pi
    if flip:
        angle -= math.pi

    shear_x = -math.tan(angle * 0.5)
    shear_y = math.sin(angle)
    mid_x = (width - 1) * 0.5
    mid_y = (height - 1) * 0.5

    for y in range(height):
        for x in range(width):
            xs1 = x + _lround((y - mid_y) * shear_x)
            ys = y + _lround((xs1 - mid_x) * shear_y)
            xs = xs1 + _lround((ys - mid_y) * shear_x)
            if not (0 <= xs < width and 0 <= ys < height):
                continue
            if flip:
                xs = width - 1 - xs
                ys = height - 1 - ys
            for z in range(depth):
                colour = source.get(xs, ys, z)
                if colour:
                    result.set(x, y, z, colour)
    return result


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_w1_temperature(text: str) -> int:
    """Millidegrees from a one-wire sensor reading (the 't=' field), or 0."""
    for line in text.splitlines():
        pos = line.find("t=")
        if pos >= 0:
            return _leading_int(line[pos + 2:])
    return 0


def parse_thermal_temperature(text: str) -> int:
    """Millidegrees from a thermal-zone reading, or 0 if it holds no number."""
    return _leading_int(text)


def _read(path: PathLike) -> Optional[str]:
    try:
        return Path(path).read_text(errors="replace")
    except OSError:
        return None


class TemperatureMonitor:
    """Reads a base sensor and the CPU temperature, optionally in the background."""

    def __init__(
        self,
        sensor_path: PathLike = DEFAULT_SENSOR_PATH,
        thermal_path: PathLike = DEFAULT_THERMAL_PATH,
    ) -> None:
        self.sensor_path = sensor_path
        self.thermal_path = thermal_path
        self.base = 0
        self.cpu = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll(self) -> Tuple[int, int]:
        """Read both sensors now; a missing sensor reads as 0."""
        text = _read(self.sensor_path)
        self.base = parse_w1_temperature(text) if text is not None else 0
        text = _read(self.thermal_path)
        self.cpu = parse_thermal_temperature(text) if text is not None else 0
        return self.base, self.cpu

    def _run(self) -> None:
        while True:
            self.poll()
            if self._stop.wait(POLL_INTERVAL):
                break

    def start(self) -> None:
        """Poll in a background thread until :meth:`stop` is called."""
        if self._thread is not None:
            raise RuntimeError("temperature monitor already running")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop background polling and wait for the thread to finish."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None

    def __enter__(self) -> "TemperatureMonitor":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()