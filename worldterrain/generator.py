"""Island terrain generation: warped Perlin heights, edge falloff and biomes."""

from __future__ import annotations

import struct
from enum import IntEnum

from PIL import Image

from worldterrain.perlin import PerlinNoise
from worldterrain.util import random_int


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


class TerrainColor(IntEnum):
    """RGB colours of each terrain kind."""

    WATER_DEEP = 0x3370CC
    WATER_MID = 0x4084E2
    WATER_SHALLOW = 0x55AEF0

    SAND = 0xF7E898
    DIRT_LOW = 0xD58E12
    DIRT_HIGH = 0xB66F3A

    MOUNTAIN_LOW = 0x5B5E5C
    MOUNTAIN_MID = 0x414545
    MOUNTAIN_HIGH = 0xE2EDEC

    GRASS_LOW = 0x7EAF46
    GRASS_HIGH = 0x54722D

    SNOW_LOW = 0xBAD5D3
    SNOW_HIGH = 0xD3E4E3

    SAVANNA_LOW = 0xF0B121
    SAVANNA_HIGH = 0xCF931B

    JUNGLE_LOW = 0x46A052
    JUNGLE_HIGH = 0x1F7020


_BIOME_SIZE = _f32(0.00075)

_TUNDRA_TEMP = _f32(0.460 + _BIOME_SIZE)
_TUNDRA_PREC_LOW = _f32(0.340 - _BIOME_SIZE)
_TUNDRA_PREC_HIGH = _f32(0.660 + _BIOME_SIZE)

_JUNGLE_TEMP = _f32(0.540 - _BIOME_SIZE)
_JUNGLE_PREC = _f32(0.460 + _BIOME_SIZE)

_SAVANNA_TEMP = _f32(0.540 - _BIOME_SIZE)
_SAVANNA_PREC_LOW = _f32(0.315 - _BIOME_SIZE)
_SAVANNA_PREC_HIGH = _f32(0.660 + _BIOME_SIZE)

_BIOME_OFFSET = 20000.0
_BIOME_OCTAVES = 2
_BIOME_SAMPLE_RATE = _f32(0.001)
_TEMPERATURE_Z = 10.0
_PRECIPITATION_Z = 40.0
_MIXING_DIVISOR = 100000.0

# (low, high) variants of each biome that replaces dirt.
_BIOME_VARIANTS = {
    "tundra": (TerrainColor.SNOW_LOW, TerrainColor.SNOW_HIGH),
    "jungle": (TerrainColor.JUNGLE_LOW, TerrainColor.JUNGLE_HIGH),
    "savanna": (TerrainColor.SAVANNA_LOW, TerrainColor.SAVANNA_HIGH),
    "grass": (TerrainColor.GRASS_LOW, TerrainColor.GRASS_HIGH),
}


class Generator:
    """Generates square terrain maps; every tuning value is a public attribute."""

    def __init__(self, seed: float) -> None:
        self.seed = float(seed)

        self.warp_size = 4.0
        self.warp_strength = 0.8

        self.octaves = 4.0
        self.size = 1700.0
        self.sample_rate = 0.005

        self.sea_level = 0.55

        self.ocean_mid_range = 0.045
        self.ocean_shallow_range = 0.01
        self.sand_range = 0.02
        self.dirt_high_range = 0.05
        self.mountain_low_range = 0.1
        self.mountain_mid_range = 0.1
        self.mountain_high_range = 0.2

        self.water_edge_strength = 6.0

        self.biome_edge_mixing = 250.0

        self._progress = 0.0
        self._generating = False

    def progress(self) -> float:
        """Fraction of height samples computed by the running or last generation."""
        return self._progress

    def is_generating(self) -> bool:
        return self._generating

    def edge_gradient(self) -> list[list[float]]:
        """Rows of falloff values: 1 at the map border, 0 in the open interior."""
        size = int(self.size)
        if size < 1:
            return []
        mid = size / 2
        half = size // 2
        strength = self.water_edge_strength

        def weight(i: int) -> float:
            distance = size - i if i > half else i
            scaled = int(distance * strength)
            return int(min(mid, float(scaled))) / mid

        weights = [weight(i) for i in range(size)]
        return [[1.0 - wx * wy for wx in weights] for wy in weights]

    def height_color(self, value: float) -> int:
        """Colour of a height before biomes are applied; 0 (black) if no band matches."""
        sea = self.sea_level
        if value >= sea + self.mountain_mid_range + self.mountain_high_range:
            return TerrainColor.MOUNTAIN_HIGH
        if value >= sea + self.mountain_low_range + self.mountain_mid_range:
            return TerrainColor.MOUNTAIN_MID
        if value >= sea + self.dirt_high_range + self.mountain_low_range:
            return TerrainColor.MOUNTAIN_LOW
        if value >= sea + self.sand_range + self.dirt_high_range:
            return TerrainColor.DIRT_HIGH
        if value >= sea + self.sand_range:
            return TerrainColor.DIRT_LOW
        if sea < value < sea + self.sand_range:
            return TerrainColor.SAND
        if value > sea - self.ocean_shallow_range:
            return TerrainColor.WATER_SHALLOW
        if value > sea - self.ocean_mid_range:
            return TerrainColor.WATER_MID
        if value < sea:
            return TerrainColor.WATER_DEEP
        return 0

    def biome_color(self, color: int, temperature: float, precipitation: float) -> int:
        """Replace dirt with the biome chosen by temperature and precipitation."""
        if color not in (TerrainColor.DIRT_LOW, TerrainColor.DIRT_HIGH):
            return color
        high = color == TerrainColor.DIRT_HIGH

        if (
            temperature < _TUNDRA_TEMP
            and _TUNDRA_PREC_LOW <= precipitation < _TUNDRA_PREC_HIGH
        ):
            biome = "tundra"
        elif temperature > _JUNGLE_TEMP and precipitation < _JUNGLE_PREC:
            biome = "jungle"
        elif (
            temperature > _SAVANNA_TEMP
            and _SAVANNA_PREC_LOW <= precipitation < _SAVANNA_PREC_HIGH
        ):
            biome = "savanna"
        else:
            biome = "grass"
        low_color, high_color = _BIOME_VARIANTS[biome]
        return high_color if high else low_color

    def generate(self) -> Image.Image:
        """Build an RGBA image of ``int(size)`` by ``int(size)`` pixels."""
        size = int(self.size)
        if size < 1:
            raise ValueError(f"size must be at least 1, got {self.size}")
        octaves = int(self.octaves)

        self._generating = True
        try:
            perlin = PerlinNoise(int(self.seed) & 0xFFFFFFFF)
            gradient = self.edge_gradient()
            rate = self.sample_rate
            warp_size = self.warp_size
            warp_strength = self.warp_strength
            total = size * size

            heights: list[list[float]] = []
            for y, gradient_row in enumerate(gradient):
                row = []
                for x, falloff in enumerate(gradient_row):
                    sx = x * rate
                    sy = y * rate
                    warp = perlin.octave2d_01(warp_size * sx, warp_size * sy, octaves)
                    noise = perlin.octave3d_01(sx, sy, warp_strength * warp, octaves)
                    row.append(noise - falloff)
                    self._progress = (x + y * size) / total
                heights.append(row)

            return self._render(heights, perlin, size)
        finally:
            self._generating = False

    def _render(self, heights: list[list[float]], perlin: PerlinNoise, size: int) -> Image.Image:
        mixing = int(self.biome_edge_mixing)
        pixels = bytearray()
        for y, row in enumerate(heights):
            by = (y + _BIOME_OFFSET) * _BIOME_SAMPLE_RATE
            for x, value in enumerate(row):
                color = self.height_color(value)

                bx = (x + _BIOME_OFFSET) * _BIOME_SAMPLE_RATE
                temperature = perlin.normalized_octave3d_01(
                    bx, by, _TEMPERATURE_Z, _BIOME_OCTAVES
                )
                precipitation = perlin.normalized_octave3d_01(
                    bx, by, _PRECIPITATION_Z, _BIOME_OCTAVES
                )
                temperature += random_int(-mixing, mixing) / _MIXING_DIVISOR
                precipitation += random_int(-mixing, mixing) / _MIXING_DIVISOR

                color = self.biome_color(color, temperature, precipitation)
                pixels.extend(((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF, 0xFF))
        return Image.frombytes("RGBA", (size, size), bytes(pixels))