[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "voxtoys"
version = "0.1.0"
description = "Animated toys and small games that render into an in-memory voxel volume: a solar system, supernovae, a neon tunnel runner, a space shooter and scene-viewer helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "volumetric", "display", "game", "animation", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["voxtoys*"]

[tool.pytest.ini_options]
addopts = "-ra"
