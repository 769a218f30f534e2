"""Animated toys and small games that render into an in-memory voxel volume."""

__version__ = "0.1.0"