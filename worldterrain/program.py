"""The terrain generator application: layout, widgets, saving and the window loop."""

from __future__ import annotations

import os
import re
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence, Union

import pygame
from PIL import Image

from worldterrain.generator import Generator
from worldterrain.ui import BACKSPACE, ButtonListener, UIButton, UIElement, UITextField
from worldterrain.util import current_time_millis, random_int, seed_random

VERSION = "1.6"
WINDOW_TITLE = f"Terrain Generator for World Box (v. {VERSION})"
FONT_FILE = "font.ttf"
FRAME_RATE = 60

PANEL_COLOR = (30, 30, 30)
PROGRESS_COLOR = (200, 200, 220)
CLEAR_COLOR = (45, 45, 48)

_SAVES_SUBPATH = ("LocalLow", "mkarpenko", "WorldBox", "saves")
_LEADING_INT = re.compile(r"\s*[+-]?\d+")

# Layout, in percent of the window.
_TERRAIN_X = 1.0
_TERRAIN_Y = 10.0
_TERRAIN_SIZE = 43.0
_BAR_X = 1.25
_BAR_Y = 93.0
_BAR_WIDTH = 42.25
_BAR_HEIGHT = 1.0
_FIELD_X = 58

_FIELDS = (
    (_FIELD_X, 10, "seed: ", "seed"),
    (_FIELD_X, 15, "size: ", "size"),
    (_FIELD_X, 20, "octaves: ", "octaves"),
    (_FIELD_X, 25, "sample rate: ", "sample_rate"),
    (_FIELD_X, 30, "warp size: ", "warp_size"),
    (_FIELD_X, 35, "warp strength: ", "warp_strength"),
    (_FIELD_X, 45, "sea level: ", "sea_level"),
    (_FIELD_X, 50, "ocean mid: ", "ocean_mid_range"),
    (_FIELD_X, 55, "shallows: ", "ocean_shallow_range"),
    (_FIELD_X, 60, "sand: ", "sand_range"),
    (_FIELD_X, 65, "dirt: ", "dirt_high_range"),
    (_FIELD_X, 70, "mountains low: ", "mountain_low_range"),
    (_FIELD_X, 75, "mountains high: ", "mountain_mid_range"),
    (_FIELD_X, 80, "snow caps: ", "mountain_high_range"),
    (_FIELD_X + 27, 10, "edge strength: ", "water_edge_strength"),
    (_FIELD_X + 27, 15, "biome edge mixing: ", "biome_edge_mixing"),
)


def saves_directory(appdata: str) -> Path:
    """Map the roaming application-data folder onto the game's save folder."""
    return Path(appdata.replace("Roaming", os.path.join(*_SAVES_SUBPATH)))


def next_save_directory(saves_root: Union[str, Path]) -> Path:
    """Path of the next free ``save<N>`` folder: one past the highest existing number.

    Raises FileNotFoundError if ``saves_root`` does not exist and ValueError if
    an entry named like a save holds no number.
    """
    root = Path(saves_root)
    highest = 0
    for entry in root.iterdir():
        name = entry.name
        if "save" not in name:
            continue
        remainder = name.replace("save", "")
        match = _LEADING_INT.match(remainder)
        if match is None:
            raise ValueError(f"save folder {name!r} has no number")
        highest = max(highest, int(match.group()))
    return root / f"save{highest + 1}"


def _image_to_surface(image: Image.Image) -> pygame.Surface:
    rgba = image.convert("RGBA")
    return pygame.image.frombuffer(rgba.tobytes(), rgba.size, "RGBA").copy()


class Program(ButtonListener):
    """Holds the generator, the widgets and the last generated map."""

    def __init__(self, window_width: int, window_height: int) -> None:
        self.window_size = (int(window_width), int(window_height))
        width, height = self.window_size
        self.generator = Generator(random_int(10000, 99999))

        self.terrain_position = (
            int(width * (_TERRAIN_X / 100)),
            int(height * (_TERRAIN_Y / 100)),
        )
        self._terrain_extent = max(1, int(width * (_TERRAIN_SIZE / 100)))
        self.terrain = pygame.Surface((self._terrain_extent, self._terrain_extent))

        self.background = pygame.Rect(
            int(width * ((_TERRAIN_X - 0.75) / 100)),
            int(height * ((_TERRAIN_Y - 1.2) / 100)),
            int(width * ((_TERRAIN_SIZE + 1.5) / 100)),
            int(width * ((_TERRAIN_SIZE + 1.5) / 100)),
        )
        self.progress_bar_background = pygame.Rect(
            int(width * ((_BAR_X - 0.75) / 100)),
            int(height * ((_BAR_Y - 1.4) / 100)),
            int(width * ((_BAR_WIDTH + 1.5) / 100)),
            int(width * ((_BAR_HEIGHT + 1.5) / 100)),
        )
        self.progress_bar_max_width = width * (_BAR_WIDTH / 100)
        self.progress_bar = pygame.Rect(
            int(width * (_BAR_X / 100)),
            int(height * (_BAR_Y / 100)),
            int(self.progress_bar_max_width),
            int(width * (_BAR_HEIGHT / 100)),
        )

        if Path(FONT_FILE).is_file():
            self.font: Optional[str] = FONT_FILE
        else:
            print("Failed to load font!")
            self.font = None

        self.elements: list[UIElement] = []
        self.text_fields: list[UITextField] = []
        self.held_keys: set[int] = set()
        self._lock = threading.Lock()
        self.ui_setup()

    def ui_setup(self) -> None:
        """Create the buttons and one text field per generator setting."""
        buttons = (
            (2, 2, 20, 10, 10, 4.3, "Generate", "gen"),
            (15, 2, 8, 10, 5, 4.3, "Save", "save"),
            (58, 2, 15, 10, 10.5, 4.3, "New Seed", "seed"),
        )
        for x, y, w, h, sw, sh, label, code in buttons:
            self.elements.append(
                UIButton(self.window_size, x, y, w, h, sw, sh, label, self.font, self, code)
            )
        for x, y, title, attribute in _FIELDS:
            self._add_text_field(x, y, title, attribute)

    def _add_text_field(self, x: int, y: int, title: str, attribute: str) -> None:
        value = getattr(self.generator, attribute)
        field = UITextField(
            self.window_size, x, y, 20, 10, 12, 4.3,
            f"{value:.6f}", title, self.font, self.generator, attribute,
        )
        field.set_empty_value(value)
        self.text_fields.append(field)
        self.elements.append(field)

    def update(self) -> None:
        for element in self.elements:
            element.update()

    def draw(self, surface: pygame.Surface) -> None:
        """Draw widgets, the map panel and either the map or the progress bar."""
        for element in self.elements:
            element.render(surface)

        surface.fill(PANEL_COLOR, self.background)

        if self.generator.is_generating():
            bar = self.progress_bar.copy()
            bar.width = int(self.progress_bar_max_width * self.generator.progress())
            surface.fill(PANEL_COLOR, self.progress_bar_background)
            surface.fill(PROGRESS_COLOR, bar)
        else:
            surface.blit(self.terrain, self.terrain_position)

    def key_pressed(self, key: int) -> None:
        """Record the key as held; backspace erases in the selected field."""
        self.held_keys.add(key)
        if key == pygame.K_BACKSPACE:
            self.text_entered(BACKSPACE)

    def key_released(self, key: int) -> None:
        """Forget the key as held."""
        self.held_keys.discard(key)

    def mouse_button_pressed(self, mx: int, my: int) -> None:
        for element in self.elements:
            element.mouse_button_pressed(mx, my)

    def mouse_button_released(self, mx: int, my: int) -> None:
        for element in self.elements:
            element.mouse_button_released(mx, my)

    def mouse_moved(self, mx: int, my: int) -> None:
        for element in self.elements:
            element.mouse_moved(mx, my)

    def text_entered(self, character: Union[int, str]) -> None:
        """Forward a typed character to every selected field."""
        for field in self.text_fields:
            if field.is_selected():
                field.text_entered(character)

    def button_pressed(self, button_code: str) -> None:
        if button_code == "gen":
            self.generate()
        elif button_code == "save":
            self.save()
        elif button_code == "seed":
            seed_random(current_time_millis())
            new_seed = random_int(10000, 99999)
            self.generator.seed = float(new_seed)
            self.text_fields[0].set_value(new_seed)
            self.generate()

    def generate(self) -> None:
        """Generate a new map and scale it into the map panel."""
        with self._lock:
            image = self.generator.generate()
            surface = _image_to_surface(image)
            extent = self._terrain_extent
            self.terrain = pygame.transform.scale(surface, (extent, extent))

    def save(self) -> Optional[Path]:
        """Write a freshly generated map into the next save folder; return that folder."""
        appdata = os.environ.get("APPDATA")
        if not appdata:
            print("Path retrieval failed")
            return None

        target = next_save_directory(saves_directory(appdata))
        try:
            target.mkdir()
        except FileExistsError:
            print("Failed to create a directory", file=sys.stderr)
        except OSError as error:
            print(error, file=sys.stderr)

        try:
            self.generator.generate().save(target / "preview.png")
        except OSError:
            print("Failed to save")
            return None
        print(f"Saved to {target}")
        return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the window and run the event loop until it is closed."""
    pygame.init()
    desktop_width, desktop_height = pygame.display.get_desktop_sizes()[0]
    width = int(desktop_width / 1.5)
    height = int(desktop_height / 1.5)

    window = pygame.display.set_mode((width, height))
    pygame.display.set_caption(WINDOW_TITLE)
    clock = pygame.time.Clock()

    seed_random(current_time_millis())
    program = Program(width, height)
    main_surface = pygame.Surface((width, height))

    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    program.key_pressed(event.key)
                elif event.type == pygame.KEYUP:
                    program.key_released(event.key)
                elif event.type == pygame.TEXTINPUT:
                    for character in event.text:
                        program.text_entered(character)
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    program.mouse_button_pressed(*event.pos)
                elif event.type == pygame.MOUSEBUTTONUP:
                    program.mouse_button_released(*event.pos)
                elif event.type == pygame.MOUSEMOTION:
                    program.mouse_moved(*event.pos)

            program.update()

            main_surface.fill(CLEAR_COLOR)
            program.draw(main_surface)

            window.fill((0, 0, 0))
            window.blit(main_surface, (0, 0))
            pygame.display.flip()
            clock.tick(FRAME_RATE)
    finally:
        pygame.quit()
    return 0