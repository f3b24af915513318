"""Perlin-noise terrain map generator with biomes and an interactive pygame editor."""

__version__ = "1.6.0"