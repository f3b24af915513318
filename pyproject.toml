[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "worldterrain"
version = "1.6.0"
description = "Perlin-noise terrain map generator with biomes and an interactive pygame editor"
requires-python = ">=3.10"
keywords = ["terrain", "perlin", "noise", "procedural", "map", "generator", "pygame", "worldbox"]
classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Intended Audience :: End Users/Desktop",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "pygame",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
worldterrain = "worldterrain.program:main"

[tool.hatch.build.targets.wheel]
packages = ["worldterrain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
