import threading
from types import SimpleNamespace

import pygame
import pytest

from worldterrain.ui import (
    BUTTON_COLOR,
    BUTTON_COLOR_BORDER,
    MAX_INPUT_LENGTH,
    TF_BORDER_COLOR,
    TF_COLOR,
    ButtonListener,
    UIButton,
    UITextField,
)


class RecordingListener(ButtonListener):
    def __init__(self):
        self.codes = []
        self.called = threading.Event()

    def button_pressed(self, button_code):
        self.codes.append(button_code)
        self.called.set()


def make_button(listener=None, label="", window=(100, 100)):
    return UIButton(window, 10, 20, 20, 10, 30, 40, label, None, listener or RecordingListener(), "gen")


def make_field(target=None, label="4.000000", window=(100, 100)):
    target = target if target is not None else SimpleNamespace(octaves=4.0)
    return UITextField(window, 10, 20, 20, 10, 30, 40, label, "octaves: ", None, target, "octaves")


def test_bounds_follow_window_percentages():
    button = make_button()
    box = button.bounds()
    assert (box.left, box.top, box.width, box.height) == (10.0, 20.0, 30.0, 40.0)
    assert box.contains(10, 20)
    assert not box.contains(40, 20)
    assert not box.contains(9, 30)


def test_button_textures_use_source_colors():
    button = make_button()
    rgb = lambda surface, point: tuple(surface.get_at(point))[:3]
    assert rgb(button.main_texture, (0, 0)) == BUTTON_COLOR_BORDER
    assert rgb(button.main_texture, (1, 2)) == BUTTON_COLOR
    assert rgb(button.hover_texture, (0, 0)) == BUTTON_COLOR
    assert rgb(button.hover_texture, (1, 2)) == BUTTON_COLOR
    assert rgb(button.click_texture, (10, 5)) == BUTTON_COLOR_BORDER


def test_button_texture_tracks_mouse_state():
    button = make_button()
    button.mouse_moved(15, 25)
    button.update()
    assert button.texture is button.hover_texture
    button.mouse_button_pressed(15, 25)
    button.update()
    assert button.texture is button.click_texture
    button.mouse_moved(90, 90)
    button.update()
    assert button.texture is button.main_texture


def test_release_inside_notifies_listener():
    listener = RecordingListener()
    button = make_button(listener)
    button.mouse_moved(15, 25)
    button.mouse_button_pressed(15, 25)
    button.mouse_button_released(15, 25)
    assert listener.called.wait(2.0)
    assert listener.codes == ["gen"]


def test_release_outside_does_not_notify():
    listener = RecordingListener()
    button = make_button(listener)
    button.mouse_moved(95, 95)
    button.mouse_button_released(15, 25)
    assert not listener.called.wait(0.2)
    assert listener.codes == []


def test_button_render_draws_scaled_sprite():
    surface = pygame.Surface((100, 100))
    button = make_button()
    button.render(surface)
    assert tuple(surface.get_at((10, 20)))[:3] == BUTTON_COLOR_BORDER
    assert tuple(surface.get_at((25, 40)))[:3] == BUTTON_COLOR


def test_field_label_is_trimmed():
    field = make_field(label="4.000000")
    assert field.input_text() == "4.0"
    assert field.text == "4.0"


def test_text_entered_filters_characters():
    field = make_field(label="")
    for character in "1a.5 x-":
        field.text_entered(character)
    assert field.input_text() == "1.5-"
    field.text_entered(8)
    assert field.input_text() == "1.5"


def test_backspace_on_empty_input_keeps_it_empty():
    field = make_field(label="")
    field.text_entered("\b")
    assert field.input_text() == ""


def test_input_length_is_limited():
    field = make_field(label="")
    for _ in range(MAX_INPUT_LENGTH + 5):
        field.text_entered("7")
    assert field.input_text() == "7" * MAX_INPUT_LENGTH


def test_deselect_commits_value_to_target():
    target = SimpleNamespace(octaves=4.0)
    field = make_field(target, label="")
    for character in "42":
        field.text_entered(character)
    field.deselect()
    assert target.octaves == 42.0
    assert not field.is_selected()
    for _ in range(2):
        field.text_entered(8)
    field.deselect()
    assert field.input_text() == "42.0"


def test_deselect_empty_restores_empty_value():
    target = SimpleNamespace(octaves=4.0)
    field = make_field(target, label="")
    field.set_empty_value(2.5)
    field.deselect()
    assert field.input_text() == "2.5"
    assert target.octaves == 4.0


def test_value_reads_leading_number():
    field = make_field(label="")
    for character in "1.5-2":
        field.text_entered(character)
    assert field.value() == 1.5


def test_value_without_number_raises():
    field = make_field(label="")
    field.text_entered("-")
    with pytest.raises(ValueError):
        field.value()
    with pytest.raises(ValueError):
        field.deselect()


def test_set_value_formats_and_trims():
    field = make_field()
    field.set_value(12345)
    assert field.input_text() == "12345.0"
    field.set_value(0.005)
    assert field.input_text() == "0.005"
    assert field.value() == pytest.approx(0.005)


def test_click_selects_and_outside_click_deselects():
    field = make_field()
    field.mouse_button_released(15, 25)
    assert field.is_selected()
    assert field.texture is field.selected_texture
    field.mouse_button_released(95, 95)
    assert not field.is_selected()
    assert field.texture is field.main_texture


def test_selected_texture_has_border():
    field = make_field()
    assert tuple(field.selected_texture.get_at((0, 0)))[:3] == TF_BORDER_COLOR
    assert tuple(field.selected_texture.get_at((1, 2)))[:3] == TF_COLOR
    assert tuple(field.main_texture.get_at((0, 0)))[:3] == TF_COLOR


def test_field_update_places_title_left_of_text():
    field = make_field(window=(800, 600))
    field.update()
    box = field.bounds()
    assert field.text_position == (box.left, box.top + box.height / 6)
    assert field.title_position[1] == field.text_position[1]
    assert field.title_position[0] < field.text_position[0]
    surface = pygame.Surface((800, 600))
    field.render(surface)
    assert field.text_position == (box.left, box.top + box.height / 6)