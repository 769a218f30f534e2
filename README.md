# voxtoys

Animated toys and small games that draw into a three-dimensional grid of
coloured voxels. Every toy renders into a `Volume`, a plain in-memory voxel
buffer, so the same code can feed a display of your own, a simulator or a
test.

## What is inside

| Module | What it does |
| --- | --- |
| `voxtoys.volume` | The `Volume` buffer and colour helpers (`rgb`, `channels`, `dim`, `fade`). |
| `voxtoys.solar` | An orrery: a sun with a flickering corona, eight planets with dotted orbit rings, the Moon, Saturn's ring and a comet with a fading tail. |
| `voxtoys.nova` | A supernova show: charging cores, white flashes, shockwave shells, jets and embers. |
| `voxtoys.tunnel` | A neon tunnel runner: dodge rotating rings, crosses, frames, slats, irises and lasers. |
| `voxtoys.shooter` | A formation-and-dive-bomber space shooter with weapon pickups. |
| `voxtoys.shooter_entities` | Weapons, bullets, pickups, the explosion `ParticlePool` and the `Starfield` used by the shooter. |
| `voxtoys.viewer` | Scene helpers: file-type checks, glob expansion, rotation of a volume about its vertical axis and temperature monitoring. |

## Volumes and colours

Colours are packed 24-bit RGB integers. `rgb(r, g, b)` packs channels (each
0..255, otherwise `ValueError`) and `channels(colour)` unpacks them again.
`dim(colour, shift)` shifts every channel right; `fade(colour, factor)` scales
brightness by a factor clamped to 0..1.

`Volume(width=128, height=128, depth=64)` holds the voxels. `Volume.set`
writes a voxel, `Volume.add` blends additively with each channel saturating
at 255, and writes outside the volume are ignored. `Volume.get` raises
`IndexError` outside the volume.

```python
from voxtoys.volume import Volume, rgb, channels

volume = Volume(128, 128, 64)
volume.set(10, 20, 30, rgb(255, 128, 0))
volume.add(10, 20, 30, rgb(10, 200, 0))
print(channels(volume.get(10, 20, 30)))   # (255, 255, 0)
volume.clear()
```

`Volume.lit()` returns a dict mapping every non-black voxel `(x, y, z)` to its
colour, which is handy for checking what a toy has drawn. `Volume.centre`
gives the centre point in voxel coordinates.

## Running a toy

Every toy follows the same frame loop: advance the simulation by a time step
in seconds (clamped to 0.001..0.1), then draw into its volume. `draw()`
clears the volume first.

```python
import random

from voxtoys.volume import Volume
from voxtoys.solar import SolarSystem
from voxtoys.nova import NovaShow

volume = Volume(128, 128, 64)

solar = SolarSystem(volume)
solar.handle_key("]")        # speed up; "[" slows down
for _ in range(30):
    solar.step(1 / 30)
    solar.draw()

show = NovaShow(volume, random.Random(1))
for _ in range(30):
    show.step(1 / 30)
    show.draw()
```

The games take keyboard input through `press`; pressed keys apply to the next
`step` and are then released.

```python
import random

from voxtoys.volume import Volume
from voxtoys.tunnel import TunnelGame
from voxtoys.shooter import ShooterGame

volume = Volume(128, 128, 64)

tunnel = TunnelGame(volume, random.Random(7))
tunnel.press("a")            # w/a/s/d to dodge, space to boost, r to restart
tunnel.step(1 / 30)
tunnel.draw()

shooter = ShooterGame(volume, random.Random(7))
shooter.press(" ")           # w/a/s/d and z/x to move, space to fire, r to restart
shooter.step(1 / 30)
shooter.draw()
```

Both games start with three lives and restart on their own five seconds after
the game is over. Passing a seeded `random.Random` makes a run repeatable.

## Viewer helpers

```python
from voxtoys.viewer import expand_scenes, is_image, is_model

scenes = expand_scenes(["~/models/*.obj", "~/images/*.png"])
models = [name for name in scenes if is_model(name)]
images = [name for name in scenes if is_image(name)]
```

`expand_scenes` expands `~` and shell-style patterns, sorts the matches of
each pattern, and prints and skips any pattern that matches nothing.
`is_model` accepts `.obj`; `is_image` accepts `.png`, `.tga`, `.jpg` and
`.jpeg`, in any letter case.

`rotate_z(source, angle)` returns a new volume rotated about its vertical
axis by three shears; columns that fall outside the source stay empty.

`TemperatureMonitor(sensor_path, thermal_path)` reads a one-wire sensor file
(the `t=` field) and a thermal-zone file, both in millidegrees; `poll()` reads
them once and returns `(base, cpu)`, with a missing file reading as 0.
`start()` polls every ten seconds in a background thread until `stop()`, and
the monitor also works as a context manager.

## What the package does not do

- It has no command-line program and no main loop: you drive `step` and
  `draw` yourself and decide how often to call them.
- It does not talk to any display hardware or shared display buffer; the
  `Volume` is only an in-memory grid for you to pass on.
- It does not read a keyboard or gamepad; input reaches the games only
  through `press` and the solar system through `handle_key`.
- The viewer helpers do not load or render `.obj` models or images; they
  only classify file names and build scene lists.

## Tests

The test suite uses pytest and is installed with the `test` extra.