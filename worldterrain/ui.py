"""Window widgets: buttons and numeric text fields laid out in window percentages."""

from __future__ import annotations

import functools
import re
import struct
import threading
from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional, Union

import pygame

from worldterrain.util import trim_string

Color = tuple[int, int, int]

BUTTON_COLOR: Color = (0xC7, 0x77, 0x1A)
BUTTON_COLOR_BORDER: Color = (0xA3, 0x62, 0x15)
BUTTON_COLOR_BORDER_HOVER: Color = BUTTON_COLOR
BUTTON_COLOR_CLICK: Color = BUTTON_COLOR_BORDER

TF_COLOR: Color = (0xC7, 0x77, 0x1A)
TF_BORDER_COLOR: Color = (0xA3, 0x62, 0x15)

TEXT_COLOR: Color = (255, 255, 255)
FONT_SIZE_PERCENT = 1.5
MAX_INPUT_LENGTH = 13
BACKSPACE = 8

_PADDING = 1
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", float(value)))[0]


def _float_text(value: float) -> str:
    """Format a single-precision value with six decimals, then trim zeros."""
    return trim_string(f"{_to_f32(value):.6f}")


@functools.lru_cache(maxsize=None)
def _load_font(path: Optional[str], size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.Font(path, size)


def _frame(width: int, height: int, inner: Color, border: Color, left_inset: int) -> pygame.Surface:
    """A texture filled with ``border`` and an ``inner`` block inside the padding."""
    surface = pygame.Surface((max(width, 0), max(height, 0)))
    surface.fill(border)
    inner_width = width - 1 - (left_inset + 1)
    inner_height = height - 1 - (_PADDING + 1)
    if inner_width > 0 and inner_height > 0:
        surface.fill(inner, pygame.Rect(left_inset + 1, _PADDING + 1, inner_width, inner_height))
    return surface


def _solid(width: int, height: int, color: Color) -> pygame.Surface:
    surface = pygame.Surface((max(width, 0), max(height, 0)))
    surface.fill(color)
    return surface


class _Bounds(NamedTuple):
    left: float
    top: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return (
            self.left <= x < self.left + self.width
            and self.top <= y < self.top + self.height
        )


class ButtonListener(ABC):
    """Receives the code of a button once it is clicked."""

    @abstractmethod
    def button_pressed(self, button_code: str) -> None:
        """Handle a click on the button that carries ``button_code``."""


class UIElement(ABC):
    """A textured sprite with an optional label, placed in window percentages."""

    def __init__(
        self,
        window_size: tuple[int, int],
        x: float,
        y: float,
        width: float,
        height: float,
        scale_width: float,
        scale_height: float,
        draw_sprite: bool,
        draw_text: bool,
        font: Optional[str],
    ) -> None:
        window_width, window_height = (int(v) for v in window_size)
        self.window_size = (window_width, window_height)
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.scale_width = scale_width
        self.scale_height = scale_height
        self.font = font
        self.font_size = max(1, int(window_width * (FONT_SIZE_PERCENT / 100)))

        self.position = (int(window_width * (x / 100)), int(window_height * (y / 100)))
        self.display_size = (
            window_width * (scale_width / 100),
            window_height * (scale_height / 100),
        )

        self.texture = pygame.Surface((max(int(width), 0), max(int(height), 0)))
        self.text = ""
        self.text_position = (0.0, 0.0)

        self._draw_sprite = draw_sprite
        self._draw_text = draw_text
        self._auto_align_text = True

    def bounds(self) -> _Bounds:
        """On-screen rectangle of the sprite: left, top, width, height."""
        left, top = self.position
        width, height = self.display_size
        return _Bounds(float(left), float(top), width, height)

    def render(self, surface: pygame.Surface) -> None:
        """Draw sprite, label and any element-specific extras onto ``surface``."""
        if self._auto_align_text:
            box = self.bounds()
            self.text_position = (box.left + box.width / 6, box.top + box.height / 6)
        if self._draw_sprite:
            self._blit_texture(surface)
        if self._draw_text:
            self._blit_text(surface, self.text, self.text_position)
        self.draw(surface)

    def _blit_texture(self, surface: pygame.Surface) -> None:
        size = (int(self.display_size[0]), int(self.display_size[1]))
        if size[0] > 0 and size[1] > 0:
            surface.blit(pygame.transform.scale(self.texture, size), self.position)

    def _blit_text(self, surface: pygame.Surface, text: str, position: tuple[float, float]) -> None:
        if not text:
            return
        rendered = _load_font(self.font, self.font_size).render(text, True, TEXT_COLOR)
        surface.blit(rendered, (int(position[0]), int(position[1])))

    def _text_width(self, text: str) -> int:
        if not text:
            return 0
        return _load_font(self.font, self.font_size).size(text)[0]

    @abstractmethod
    def update(self) -> None:
        """Refresh state once per frame."""

    @abstractmethod
    def draw(self, surface: pygame.Surface) -> None:
        """Draw what the element adds on top of sprite and label."""

    @abstractmethod
    def mouse_button_pressed(self, mx: int, my: int) -> None:
        """React to a mouse button going down."""

    @abstractmethod
    def mouse_button_released(self, mx: int, my: int) -> None:
        """React to a mouse button coming up."""

    @abstractmethod
    def mouse_moved(self, mx: int, my: int) -> None:
        """React to the pointer moving."""


class UIButton(UIElement):
    """A clickable button that reports its code to a listener on release."""

    def __init__(
        self,
        window_size: tuple[int, int],
        x: float,
        y: float,
        width: float,
        height: float,
        scale_width: float,
        scale_height: float,
        label: str,
        font: Optional[str],
        listener: ButtonListener,
        code: str,
    ) -> None:
        super().__init__(
            window_size, x, y, width, height, scale_width, scale_height, True, True, font
        )
        w, h = int(width), int(height)
        self.main_texture = _frame(w, h, BUTTON_COLOR, BUTTON_COLOR_BORDER, _PADDING // 2)
        self.hover_texture = _frame(w, h, BUTTON_COLOR, BUTTON_COLOR_BORDER_HOVER, _PADDING)
        self.click_texture = _solid(w, h, BUTTON_COLOR_CLICK)
        self.texture = self.main_texture

        self.text = label
        self.listener = listener
        self.code = code

        self._mouse_down = False
        self._mx = 0
        self._my = 0

    def update(self) -> None:
        inside = self.bounds().contains(self._mx, self._my)
        if not self._mouse_down and inside:
            self.texture = self.hover_texture
        elif inside:
            self.texture = self.click_texture
        else:
            self.texture = self.main_texture

    def draw(self, surface: pygame.Surface) -> None:
        """Buttons draw nothing beyond their sprite and label."""

    def mouse_button_pressed(self, mx: int, my: int) -> None:
        self._mouse_down = True

    def mouse_button_released(self, mx: int, my: int) -> None:
        """Notify the listener on a background thread if the pointer is on the button."""
        self._mouse_down = False
        if self.bounds().contains(self._mx, self._my):
            threading.Thread(
                target=self.listener.button_pressed, args=(self.code,), daemon=True
            ).start()

    def mouse_moved(self, mx: int, my: int) -> None:
        self._mx = mx
        self._my = my


class UITextField(UIElement):
    """A numeric input field bound to one attribute of a target object."""

    def __init__(
        self,
        window_size: tuple[int, int],
        x: float,
        y: float,
        width: float,
        height: float,
        scale_width: float,
        scale_height: float,
        label: str,
        title: str,
        font: Optional[str],
        target: Any,
        attribute: str,
    ) -> None:
        super().__init__(
            window_size, x, y, width, height, scale_width, scale_height, True, True, font
        )
        self.target = target
        self.attribute = attribute

        self._input = trim_string(label)
        self.text = self._input
        self.title = title
        self.title_position = (0.0, 0.0)

        w, h = int(width), int(height)
        self.main_texture = _solid(w, h, TF_COLOR)
        self.selected_texture = _frame(w, h, TF_COLOR, TF_BORDER_COLOR, _PADDING // 2)
        self.texture = self.main_texture

        self._selected = False
        self._empty_value = 0.0
        self._auto_align_text = False

    def update(self) -> None:
        box = self.bounds()
        self.text_position = (box.left, box.top + box.height / 6)
        self.title_position = (
            self.text_position[0] - self._text_width(self.title),
            self.text_position[1],
        )

    def draw(self, surface: pygame.Surface) -> None:
        self._blit_text(surface, self.title, self.title_position)

    def text_entered(self, character: Union[int, str]) -> None:
        """Apply one typed character: backspace, or one of ``-./0123456789``."""
        code = ord(character) if isinstance(character, str) else int(character)
        if code == BACKSPACE:
            self._input = self._input[:-1]
        elif len(self._input) < MAX_INPUT_LENGTH and 44 < code < 58:
            self._input += chr(code)
        self.text = self._input

    def mouse_button_pressed(self, mx: int, my: int) -> None:
        """Fields act on release only."""

    def mouse_button_released(self, mx: int, my: int) -> None:
        if self.bounds().contains(mx, my):
            self.select()
        else:
            self.deselect()

    def mouse_moved(self, mx: int, my: int) -> None:
        """Fields ignore pointer motion."""

    def select(self) -> None:
        self._selected = True
        self.texture = self.selected_texture

    def deselect(self) -> None:
        """Commit the input to the target, or restore the last value if it is empty.

        Raises ValueError when the input does not start with a number.
        """
        self._selected = False
        self.texture = self.main_texture
        if not self._input:
            self._input = _float_text(self._empty_value)
            self.text = self._input
        else:
            value = self.value()
            setattr(self.target, self.attribute, value)
            self._empty_value = value

    def is_selected(self) -> bool:
        return self._selected

    def set_value(self, value: float) -> None:
        self._input = _float_text(value)
        self.text = self._input

    def set_empty_value(self, value: float) -> None:
        self._empty_value = _to_f32(value)

    def value(self) -> float:
        """The number at the start of the input, in single precision."""
        match = _FLOAT_PREFIX.match(self._input)
        if match is None:
            raise ValueError(f"no number in field input {self._input!r}")
        return _to_f32(float(match.group().strip()))

    def input_text(self) -> str:
        return self._input