# worldterrain

A procedural terrain map generator for WorldBox-style island maps. It
builds square height maps from domain-warped Perlin noise, pulls the map
border down into the sea, colours each pixel by elevation (deep, mid and
shallow water, sand, dirt, three mountain bands) and then replaces dirt
with a biome (grassland, tundra, jungle or savanna) chosen from two more
noise fields for temperature and precipitation.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the editor

```
worldterrain
```

This opens a pygame window two thirds the size of the desktop. The map
panel is on the left, buttons and fields are at the top and on the right:

- **Generate** builds a new map from the current settings. While it runs,
  a progress bar replaces the map.
- **Save** builds a map again and writes it as `preview.png` into a new
  `saveN` folder (one past the highest existing number) in the saves
  directory, then prints the folder it used.
- **New Seed** picks a random seed between 10000 and 99999, shows it in
  the seed field and generates a new map.

Click a field to select it, type digits, `.` or `-` (at most 13
characters; Backspace erases), and click anywhere else to apply the
value to the generator. A field left empty gets back its last value.

The labels use `font.ttf` from the current directory if it is there;
otherwise the editor prints `Failed to load font!` and uses pygame's
default font.

## Using the library

```python
from worldterrain.generator import Generator

gen = Generator(12345)
gen.size = 256
image = gen.generate()          # a Pillow RGBA image, size x size
image.save("map.png")
```

`Generator` keeps its tuning values as plain attributes: `seed`, `size`,
`octaves`, `sample_rate`, `warp_size`, `warp_strength`, `sea_level`,
`ocean_mid_range`, `ocean_shallow_range`, `sand_range`,
`dirt_high_range`, `mountain_low_range`, `mountain_mid_range`,
`mountain_high_range`, `water_edge_strength` and `biome_edge_mixing`.
The default `size` is 1700, which takes a long time in pure Python; set a
smaller size for quick previews. `generate()` raises `ValueError` when
`size` is below 1.

While a map is being built, `gen.is_generating()` is true and
`gen.progress()` reports the fraction of heights computed. The steps are
also available on their own:

- `edge_gradient()` returns the border falloff as rows of floats;
- `height_color(value)` maps a height to a `TerrainColor` (or 0);
- `biome_color(color, temperature, precipitation)` swaps dirt colours for
  the matching biome.

Biome borders are mixed with a little randomness from
`worldterrain.util.random_int`, so two maps from the same seed have the
same land shape but may differ in a few pixels along biome edges. Call
`worldterrain.util.seed_random(n)` first to make them identical.

### Noise

```python
from worldterrain.perlin import PerlinNoise

noise = PerlinNoise(42)
value = noise.octave2d_01(0.5, 1.25, 4, 0.5)   # in [0, 1]
```

`PerlinNoise` offers `noise1d/2d/3d` (range [-1, 1]), their `_01`
variants, `octave*` sums (unbounded), `octave*_11` (clamped),
`octave*_01` (clamped and remapped) and `normalized_octave*` with their
`_01` variants. An integer seed shuffles the permutation table with the
included `MT19937` engine, so the same seed always gives the same table;
`serialize()` and `deserialize()` save and restore it as 256 bytes.

### Other modules

- `worldterrain.util`: `random_int`, `seed_random`,
  `current_time_millis` and `trim_string`.
- `worldterrain.ui`: the `UIButton` and `UITextField` widgets and the
  `ButtonListener` interface used by the editor.
- `worldterrain.program`: the `Program` class behind the editor,
  `saves_directory` and `next_save_directory`, and `main`.

## What it does not do

- Saving only works where the `APPDATA` environment variable is set. The
  saves directory is found by replacing `Roaming` in that path with
  `LocalLow/mkarpenko/WorldBox/saves`; without `APPDATA` the editor prints
  `Path retrieval failed` and writes nothing.
- A save holds only the `preview.png` image. The package does not write
  any other game save data.
- There is no command-line mode for generating maps without the window;
  use the `Generator` class for that.