"""Options screen: music volume and display mode."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

import pygame

from kaboul.graphics import AssetError, load_image, point_in_rect

MAX_VOLUME = 5
DEFAULT_VOLUME = 2
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
BUTTON_WIDTH = 160
BUTTON_HEIGHT = 80
VOLUME_BAR_POS = (700, 200)
CLICK_CHANNEL = 1


class OptionButton(IntEnum):
    """Buttons of the options screen, in drawing order."""

    VOLUME_UP = 0
    VOLUME_DOWN = 1
    FULLSCREEN = 2
    WINDOWED = 3
    RETURN = 4
    DISPLAY = 5
    VOLUME = 6


BUTTON_POSITIONS = {
    OptionButton.VOLUME_UP: (1000, 200),
    OptionButton.VOLUME_DOWN: (540, 200),
    OptionButton.FULLSCREEN: (540, 400),
    OptionButton.WINDOWED: (980, 400),
    OptionButton.RETURN: (950, 600),
    OptionButton.DISPLAY: (90, 400),
    OptionButton.VOLUME: (90, 200),
}

# Only these buttons have a highlighted image.
HOVERABLE = (
    OptionButton.VOLUME_UP,
    OptionButton.VOLUME_DOWN,
    OptionButton.FULLSCREEN,
    OptionButton.WINDOWED,
    OptionButton.RETURN,
)

_BUTTON_FILES = {
    OptionButton.VOLUME_UP: "right.png",
    OptionButton.VOLUME_DOWN: "left.png",
    OptionButton.FULLSCREEN: "fullscreen.png",
    OptionButton.WINDOWED: "normal.png",
    OptionButton.RETURN: "return.png",
    OptionButton.DISPLAY: "display mode.png",
    OptionButton.VOLUME: "volume.png",
}

_HOVER_FILES = {
    OptionButton.VOLUME_UP: "rightH.png",
    OptionButton.VOLUME_DOWN: "leftH.png",
    OptionButton.FULLSCREEN: "fullscreenH.png",
    OptionButton.WINDOWED: "normalH.png",
    OptionButton.RETURN: "returnH.png",
}


def _button_rect(button: OptionButton) -> tuple[int, int, int, int]:
    x, y = BUTTON_POSITIONS[button]
    return (x, y, BUTTON_WIDTH, BUTTON_HEIGHT)


def button_at(pos: Sequence[int]) -> OptionButton | None:
    """Return the button under a point, edges included, or None."""
    for button in OptionButton:
        if point_in_rect(pos, _button_rect(button)):
            return button
    return None


@dataclass
class OptionsState:
    """Volume level, display mode and hover state of the options screen."""

    current_volume: int = DEFAULT_VOLUME
    fullscreen: bool = False
    in_options_menu: bool = True
    hovered: OptionButton | None = None
    last_hovered: OptionButton | None = None

    def volume_up(self) -> bool:
        """Raise the volume by one step; tell whether it changed."""
        if self.current_volume >= MAX_VOLUME:
            return False
        self.current_volume += 1
        return True

    def volume_down(self) -> bool:
        """Lower the volume by one step; tell whether it changed."""
        if self.current_volume <= 0:
            return False
        self.current_volume -= 1
        return True

    def music_volume(self) -> float:
        """Music volume as a fraction between 0 and 1."""
        return self.current_volume / MAX_VOLUME

    def click(self, pos: Sequence[int]) -> OptionButton | None:
        """Handle a mouse press; return the button hit, if any."""
        button = button_at(pos)
        if button is OptionButton.VOLUME_UP:
            self.volume_up()
        elif button is OptionButton.VOLUME_DOWN:
            self.volume_down()
        elif button is OptionButton.FULLSCREEN:
            self.fullscreen = True
        elif button is OptionButton.WINDOWED:
            self.fullscreen = False
        elif button is OptionButton.RETURN:
            self.in_options_menu = False
        return button

    def hover(self, pos: Sequence[int]) -> bool:
        """Track the highlighted button; True when a hover sound should play."""
        self.hovered = None
        play = False
        for button in HOVERABLE:
            if point_in_rect(pos, _button_rect(button)):
                self.hovered = button
                if self.last_hovered is not button:
                    self.last_hovered = button
                    play = True
        return play


def _set_mode(size: Sequence[int], fullscreen: bool) -> pygame.Surface:
    flags = pygame.FULLSCREEN if fullscreen else 0
    return pygame.display.set_mode(tuple(size), flags)


def _render(screen, state: OptionsState, background, normal, lit, bars) -> None:
    screen.fill((0, 0, 0))
    screen.blit(background, (0, 0))
    for button in OptionButton:
        image = lit[button] if button is state.hovered and button in lit else normal[button]
        screen.blit(image, BUTTON_POSITIONS[button])
    screen.blit(bars[state.current_volume], VOLUME_BAR_POS)
    pygame.display.flip()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the options screen until the window is closed."""
    parser = argparse.ArgumentParser(prog="kaboul-options", description="Options screen.")
    parser.add_argument("--root", type=Path, default=Path("."), help="asset directory")
    args = parser.parse_args(argv)
    root: Path = args.root
    images = root / "images"

    pygame.init()
    if not pygame.display.get_init():
        print(f"Erreur SDL_Init: {pygame.get_error()}")
        return 1
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    except pygame.error as exc:
        print(f"Erreur SDL_SetVideoMode: {exc}")
        pygame.quit()
        return 1
    try:
        pygame.mixer.init(44100, -16, 2, 2048)
    except pygame.error as exc:
        print(f"Erreur Mix_OpenAudio: {exc}")
        pygame.quit()
        return 1

    try:
        background = load_image(images / "haah.png")
    except AssetError as exc:
        print(f"Erreur chargement background: {exc}")
        pygame.quit()
        return 1
    try:
        normal = {b: load_image(images / name) for b, name in _BUTTON_FILES.items()}
        lit = {b: load_image(images / name) for b, name in _HOVER_FILES.items()}
    except AssetError as exc:
        print(f"Erreur chargement boutons: {exc}")
        pygame.quit()
        return 1
    try:
        bars = [load_image(images / f"barre{level}.png") for level in range(MAX_VOLUME + 1)]
    except AssetError as exc:
        print(f"Erreur chargement barre de volume: {exc}")
        pygame.quit()
        return 1

    try:
        pygame.mixer.music.load(str(root / "background.mp3"))
    except pygame.error as exc:
        print(f"Erreur chargement musique: {exc}")
        pygame.quit()
        return 1
    try:
        click_sound = pygame.mixer.Sound(str(root / "clic.wav"))
    except (pygame.error, FileNotFoundError) as exc:
        print(f"Erreur chargement son de clic: {exc}")
        pygame.quit()
        return 1
    try:
        hover_sound = pygame.mixer.Sound(str(root / "hover.wav"))
    except (pygame.error, FileNotFoundError) as exc:
        print(f"Erreur chargement son de survol: {exc}")
        pygame.quit()
        return 1

    state = OptionsState()
    pygame.mixer.music.play(-1)
    pygame.mixer.music.set_volume(state.music_volume())
    click_channel = pygame.mixer.Channel(CLICK_CHANNEL)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            if event.type == pygame.MOUSEBUTTONDOWN:
                was_fullscreen = state.fullscreen
                button = state.click(pygame.mouse.get_pos())
                if button is None:
                    continue
                pygame.mixer.music.set_volume(state.music_volume())
                if button in (OptionButton.FULLSCREEN, OptionButton.WINDOWED):
                    try:
                        screen = _set_mode(screen.get_size(), state.fullscreen)
                    except pygame.error as exc:
                        print(f"Erreur SDL_SetVideoMode: {exc}")
                        state.fullscreen = was_fullscreen
                click_channel.play(click_sound)
            elif event.type == pygame.MOUSEMOTION:
                if state.hover(pygame.mouse.get_pos()):
                    hover_sound.play()
            elif event.type == pygame.KEYDOWN:
                raise_keys = (pygame.K_PLUS, pygame.K_KP_PLUS)
                shifted_equals = event.key == pygame.K_EQUALS and event.mod == pygame.KMOD_LSHIFT
                if event.key in raise_keys or shifted_equals:
                    if state.volume_up():
                        pygame.mixer.music.set_volume(state.music_volume())
                        click_channel.play(click_sound)
                if event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    if state.volume_down():
                        pygame.mixer.music.set_volume(state.music_volume())
                        click_channel.play(click_sound)
                if event.key == pygame.K_ESCAPE:
                    state.in_options_menu = False
                    click_channel.play(click_sound)
            elif event.type == pygame.VIDEORESIZE:
                try:
                    screen = _set_mode(event.size, state.fullscreen)
                except pygame.error as exc:
                    print(f"Erreur SDL_SetVideoMode: {exc}")
        if running:
            _render(screen, state, background, normal, lit, bars)

    pygame.mixer.quit()
    pygame.quit()
    return 0