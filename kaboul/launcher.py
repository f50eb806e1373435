"""Title menu that starts the options screen and the game."""

from __future__ import annotations

import argparse
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from os import PathLike
from pathlib import Path

import pygame

from kaboul.graphics import (
    AssetError,
    fade_transition,
    load_image,
    point_in_rect,
    scale_surface,
)

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
BUTTON_GAP = 30
PAGE_GAP = 40
PAGE_MARGIN = 50
BUTTON_SCALE = 1.2
LOADING_FRAMES = 12
LOADING_FRAME_MS = 100
LOADING_MS = 5000
FADE_MS = 500
FRAME_DELAY_MS = 16


class MenuAction(Enum):
    """What a click, key press or tick asks the menu loop to do."""

    NONE = auto()
    OPEN_MODES = auto()
    OPTIONS = auto()
    HISTORY = auto()
    QUIT = auto()
    NEW_GAME = auto()
    ENGLISH = auto()
    BACK = auto()
    START_GAME = auto()


class MenuScreen(Enum):
    """The pages of the title menu."""

    MAIN = 1
    MODES = 2
    LOADING = 3
    FINAL = 4


def _half(value: int) -> int:
    return int(value / 2)


def layout_main_buttons(button_size: Sequence[int]) -> list[tuple[int, int]]:
    """Top-left corners of the four main buttons, stacked at the bottom centre."""
    width, height = button_size
    x = _half(SCREEN_WIDTH - width)
    start_y = SCREEN_HEIGHT - (height * 4 + BUTTON_GAP * 3)
    return [(x, start_y + row * (height + BUTTON_GAP)) for row in range(4)]


def layout_page_buttons(
    first_size: Sequence[int], second_size: Sequence[int]
) -> list[tuple[int, int]]:
    """Top-left corners of the two game-mode buttons, side by side at the bottom."""
    first_w, first_h = first_size
    second_w, _ = second_size
    total = first_w + second_w + PAGE_GAP
    start_x = _half(SCREEN_WIDTH - total)
    y = SCREEN_HEIGHT - first_h - PAGE_MARGIN
    return [(start_x, y), (start_x + first_w + PAGE_GAP, y)]


@dataclass
class MainMenu:
    """State of the title menu: current page, button hit boxes and loading animation."""

    main_buttons: dict[MenuAction, tuple[int, int, int, int]]
    page_buttons: dict[MenuAction, tuple[int, int, int, int]]
    screen: MenuScreen = MenuScreen.MAIN
    loading_index: int = 0
    last_frame_time: int = 0
    loading_started: int | None = field(default=None)

    def _hit(self, buttons, pos) -> MenuAction:
        for action, rect in buttons.items():
            if point_in_rect(pos, rect):
                return action
        return MenuAction.NONE

    def click(self, pos: Sequence[int]) -> MenuAction:
        """Handle a mouse press and return the action it triggers."""
        if self.screen is MenuScreen.MAIN:
            action = self._hit(self.main_buttons, pos)
            if action is MenuAction.OPEN_MODES:
                self.screen = MenuScreen.MODES
            return action
        if self.screen is MenuScreen.MODES:
            action = self._hit(self.page_buttons, pos)
            if action is MenuAction.NEW_GAME:
                self.screen = MenuScreen.LOADING
                self.loading_started = None
            return action
        return MenuAction.NONE

    def press_back(self) -> MenuAction:
        """Return to the main page from the mode or loading page."""
        if self.screen in (MenuScreen.MODES, MenuScreen.LOADING):
            self.screen = MenuScreen.MAIN
            return MenuAction.BACK
        return MenuAction.NONE

    def update(self, now: int) -> MenuAction:
        """Advance the loading animation; ask to start the game once loading is over."""
        if self.screen is not MenuScreen.LOADING:
            return MenuAction.NONE
        if self.loading_started is None:
            self.loading_started = now
        if now - self.last_frame_time >= LOADING_FRAME_MS:
            self.loading_index = (self.loading_index + 1) % LOADING_FRAMES
            self.last_frame_time = now
        if now - self.loading_started >= LOADING_MS:
            self.screen = MenuScreen.FINAL
            return MenuAction.START_GAME
        return MenuAction.NONE


def launch_program(
    directory: str | PathLike, command: str | PathLike | Sequence[str] = "./prog"
) -> int:
    """Run a program inside a directory, wait for it and return its exit status."""
    if not Path(directory).is_dir():
        raise FileNotFoundError(f"Failed to change directory: {directory}")
    if isinstance(command, (str, PathLike)):
        args = [str(command)]
    else:
        args = list(command)
    return subprocess.run(args, cwd=directory).returncode


def _mixer_ready() -> bool:
    return pygame.mixer.get_init() is not None


def _play_music(path: Path, what: str) -> bool:
    if not _mixer_ready():
        return False
    try:
        pygame.mixer.music.load(str(path))
    except pygame.error as exc:
        print(f"Failed to load {what} music: {exc}")
        return False
    pygame.mixer.music.play(-1)
    return True


def _run_child(directory: Path, music: Path, label: str) -> None:
    if _mixer_ready():
        pygame.mixer.music.stop()
    playing = _play_music(music, "game")
    try:
        launch_program(directory)
    except OSError as exc:
        print(f"Failed to execute {label}: {exc}")
    finally:
        if playing:
            pygame.mixer.music.stop()


def _load_button(path: Path) -> pygame.Surface:
    return scale_surface(load_image(path), BUTTON_SCALE)


def _build_menu(main_images, page_images) -> MainMenu:
    main_positions = layout_main_buttons(main_images[0][1].get_size())
    page_positions = layout_page_buttons(
        page_images[0][1].get_size(), page_images[1][1].get_size()
    )
    main_buttons = {
        action: (*pos, *image.get_size())
        for (action, image), pos in zip(main_images, main_positions)
    }
    page_buttons = {
        action: (*pos, *image.get_size())
        for (action, image), pos in zip(page_images, page_positions)
    }
    return MainMenu(main_buttons, page_buttons, last_frame_time=pygame.time.get_ticks())


def main(argv: Sequence[str] | None = None) -> int:
    """Show the title menu until the player quits or starts the game."""
    parser = argparse.ArgumentParser(prog="kaboul", description="Title menu of the game.")
    parser.add_argument("--root", type=Path, default=Path("."), help="asset directory")
    args = parser.parse_args(argv)
    root: Path = args.root

    pygame.init()
    if not pygame.display.get_init():
        print(f"SDL_Init error: {pygame.get_error()}")
        return 1
    try:
        pygame.mixer.init(44100, -16, 2, 2048)
    except pygame.error as exc:
        print(f"Audio unavailable: {exc}")

    _play_music(root / "palestine.mp3", "menu")

    try:
        backgrounds = {
            MenuScreen.MAIN: load_image(root / "back.jpeg"),
            MenuScreen.MODES: load_image(root / "menu2.png"),
            MenuScreen.LOADING: load_image(root / "menu3.png"),
            MenuScreen.FINAL: load_image(root / "menu4.png"),
        }
    except AssetError as exc:
        print(f"Error loading backgrounds: {exc}")
        pygame.quit()
        return 1

    try:
        main_images = [
            (MenuAction.OPEN_MODES, _load_button(root / "jouer.png")),
            (MenuAction.OPTIONS, _load_button(root / "option.png")),
            (MenuAction.HISTORY, _load_button(root / "histoire.png")),
            (MenuAction.QUIT, _load_button(root / "quitter.png")),
        ]
        page_images = [
            (MenuAction.NEW_GAME, _load_button(root / "nv.png")),
            (MenuAction.ENGLISH, _load_button(root / "en.png")),
        ]
    except AssetError as exc:
        print(exc)
        pygame.quit()
        return 1

    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))

    try:
        loading_frames = [
            load_image(root / "loading" / f"loading{number}.png")
            for number in range(1, LOADING_FRAMES + 1)
        ]
    except AssetError as exc:
        print(f"Error loading {exc}")
        pygame.quit()
        return 1

    menu = _build_menu(main_images, page_images)
    images = {action: image for action, image in main_images + page_images}

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                action = menu.click(event.pos)
                if action is MenuAction.OPTIONS:
                    _run_child(root / "kh", root / "music2.mp3", "option program")
                elif action is MenuAction.HISTORY:
                    print("History button clicked!")
                elif action is MenuAction.QUIT:
                    running = False
                elif action is MenuAction.NEW_GAME:
                    fade_transition(
                        screen,
                        backgrounds[MenuScreen.MODES],
                        backgrounds[MenuScreen.LOADING],
                        FADE_MS,
                    )
                elif action is MenuAction.ENGLISH:
                    print("English button clicked!")
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_b:
                    left = menu.screen
                    if menu.press_back() is MenuAction.BACK:
                        fade_transition(
                            screen, backgrounds[left], backgrounds[MenuScreen.MAIN], FADE_MS
                        )
        if not running:
            break

        screen.fill((0, 0, 0))
        screen.blit(backgrounds[menu.screen], (0, 0))

        if menu.screen is MenuScreen.MAIN:
            for action, rect in menu.main_buttons.items():
                screen.blit(images[action], rect[:2])
        elif menu.screen is MenuScreen.MODES:
            for action, rect in menu.page_buttons.items():
                screen.blit(images[action], rect[:2])
        elif menu.screen is MenuScreen.LOADING:
            action = menu.update(pygame.time.get_ticks())
            frame = loading_frames[menu.loading_index]
            width, height = frame.get_size()
            screen.blit(
                frame, (_half(SCREEN_WIDTH - width), _half(SCREEN_HEIGHT - height))
            )
            if action is MenuAction.START_GAME:
                fade_transition(
                    screen,
                    backgrounds[MenuScreen.LOADING],
                    backgrounds[MenuScreen.FINAL],
                    FADE_MS,
                )
                _run_child(root / "integration1", root / "music2.mp3", "game")
                running = False

        pygame.display.flip()
        pygame.time.delay(FRAME_DELAY_MS)

    pygame.quit()
    return 0