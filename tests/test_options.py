import pytest

from kaboul.options import (
    BUTTON_POSITIONS,
    MAX_VOLUME,
    OptionButton,
    OptionsState,
    button_at,
)


@pytest.mark.parametrize("button", list(OptionButton))
def test_button_at_finds_each_button_at_its_corner(button):
    assert button_at(BUTTON_POSITIONS[button]) is button


def test_button_at_includes_far_edges():
    assert button_at((1160, 280)) is OptionButton.VOLUME_UP


def test_button_at_outside_is_none():
    assert button_at((1161, 200)) is None
    assert button_at((0, 0)) is None


def test_default_volume_is_two():
    assert OptionsState().current_volume == 2


def test_volume_up_stops_at_maximum():
    state = OptionsState()
    changes = [state.volume_up() for _ in range(10)]
    assert state.current_volume == MAX_VOLUME
    assert changes.count(True) == MAX_VOLUME - 2
    assert state.volume_up() is False


def test_volume_down_stops_at_zero():
    state = OptionsState()
    while state.volume_down():
        pass
    assert state.current_volume == 0
    assert state.volume_down() is False


def test_music_volume_bounds_and_order():
    state = OptionsState(current_volume=0)
    levels = [state.music_volume()]
    while state.volume_up():
        levels.append(state.music_volume())
    assert levels[0] == 0
    assert levels[-1] == 1.0
    assert levels == sorted(levels)
    assert len(set(levels)) == MAX_VOLUME + 1


def test_click_volume_buttons_change_volume():
    state = OptionsState()
    assert state.click(BUTTON_POSITIONS[OptionButton.VOLUME_UP]) is OptionButton.VOLUME_UP
    assert state.current_volume == 3
    state.click(BUTTON_POSITIONS[OptionButton.VOLUME_DOWN])
    state.click(BUTTON_POSITIONS[OptionButton.VOLUME_DOWN])
    assert state.current_volume == 1


def test_click_display_mode_buttons():
    state = OptionsState()
    state.click(BUTTON_POSITIONS[OptionButton.FULLSCREEN])
    assert state.fullscreen is True
    state.click(BUTTON_POSITIONS[OptionButton.WINDOWED])
    assert state.fullscreen is False


def test_click_return_leaves_menu():
    state = OptionsState()
    assert state.click(BUTTON_POSITIONS[OptionButton.RETURN]) is OptionButton.RETURN
    assert state.in_options_menu is False


def test_click_label_button_changes_nothing():
    state = OptionsState()
    assert state.click(BUTTON_POSITIONS[OptionButton.DISPLAY]) is OptionButton.DISPLAY
    assert state == OptionsState()


def test_click_outside_returns_none():
    state = OptionsState()
    assert state.click((5, 5)) is None
    assert state == OptionsState()


def test_hover_sound_plays_once_per_new_button():
    state = OptionsState()
    up = BUTTON_POSITIONS[OptionButton.VOLUME_UP]
    assert state.hover(up) is True
    assert state.hovered is OptionButton.VOLUME_UP
    assert state.hover(up) is False
    assert state.hover((5, 5)) is False
    assert state.hovered is None
    assert state.hover(up) is False
    assert state.hover(BUTTON_POSITIONS[OptionButton.RETURN]) is True
    assert state.hovered is OptionButton.RETURN


def test_hover_ignores_label_buttons():
    state = OptionsState()
    assert state.hover(BUTTON_POSITIONS[OptionButton.VOLUME]) is False
    assert state.hovered is None