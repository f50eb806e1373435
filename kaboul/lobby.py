"""Game-mode and avatar selection lobby that starts the battle."""

from __future__ import annotations

import argparse
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

import pygame

from kaboul.graphics import AssetError, fade_transition, load_image, point_in_rect
from kaboul.launcher import launch_program

SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 1024
FADE_MS = 500

BUTTON_POSITIONS = {
    "mono": (100, 300),
    "multi": (600, 300),
    "retour": (650, 850),
    "avatar1": (100, 300),
    "avatar2": (600, 300),
    "valider": (350, 570),
}

_BUTTON_FILES = {
    "mono": ("mono.jpeg", "gromono.jpeg"),
    "multi": ("multi.jpeg", "gromulti.jpeg"),
    "retour": ("retour.jpeg", "groretour.jpeg"),
    "avatar1": ("avatar1.jpeg", "groavatar1.jpeg"),
    "avatar2": ("avatar2.jpeg", "groavatar2.jpeg"),
    "valider": ("valider.jpeg", "grovalider.jpeg"),
}


class LobbyPage(Enum):
    """The two pages of the lobby."""

    INITIAL = auto()
    AVATARS = auto()


PAGE_BUTTONS = {
    LobbyPage.INITIAL: ("mono", "multi", "retour"),
    LobbyPage.AVATARS: ("avatar1", "avatar2", "valider", "retour"),
}


@dataclass
class Lobby:
    """Current page, chosen avatar and hover state of the lobby."""

    sizes: Mapping[str, Sequence[int]]
    page: LobbyPage = LobbyPage.INITIAL
    avatar: int = 0
    hovered: str | None = None
    last_hover: tuple[LobbyPage, str] | None = None

    def __post_init__(self) -> None:
        missing = sorted(set(BUTTON_POSITIONS) - set(self.sizes))
        if missing:
            raise ValueError(f"missing button sizes: {', '.join(missing)}")

    def _hit(self, name: str, pos: Sequence[int]) -> bool:
        x, y = BUTTON_POSITIONS[name]
        width, height = self.sizes[name]
        return point_in_rect(pos, (x, y, width, height))

    def hover(self, pos: Sequence[int]) -> bool:
        """Track the button under the mouse; True when a hover sound should play."""
        self.hovered = None
        for name in PAGE_BUTTONS[self.page]:
            if self._hit(name, pos):
                self.hovered = name
                key = (self.page, name)
                if self.last_hover != key:
                    self.last_hover = key
                    return True
                return False
        return False

    def click(self, pos: Sequence[int]) -> bool:
        """Handle a left-button release; True when a validated avatar starts the game."""
        if self.page is LobbyPage.INITIAL:
            if self._hit("mono", pos):
                self.page = LobbyPage.AVATARS
            if self._hit("multi", pos):
                self.page = LobbyPage.AVATARS

        started = False
        if self.page is LobbyPage.AVATARS:
            if self._hit("avatar1", pos):
                self.avatar = 1
            elif self._hit("avatar2", pos):
                self.avatar = 2
            if self._hit("valider", pos) and self.avatar != 0:
                started = True
            if self._hit("retour", pos):
                self.page = LobbyPage.INITIAL
        return started


def _start_game(screen: pygame.Surface, final: pygame.Surface, root: Path) -> None:
    fade_transition(screen, screen.copy(), final, FADE_MS)
    try:
        launch_program(root / "integration")
    except OSError as exc:
        print(f"Failed to execute game: {exc}")


def main(argv: Sequence[str] | None = None) -> int:
    """Show the lobby until the player quits or validates an avatar."""
    parser = argparse.ArgumentParser(prog="kaboul-lobby", description="Game lobby.")
    parser.add_argument("--root", type=Path, default=Path("."), help="asset directory")
    args = parser.parse_args(argv)
    root: Path = args.root

    pygame.init()
    try:
        pygame.mixer.init(44100, -16, 2, 1024)
    except pygame.error as exc:
        print(f"Audio unavailable: {exc}")
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.DOUBLEBUF)

    try:
        background = load_image(root / "menu2.jpg")
        normal = {name: load_image(root / files[0]) for name, files in _BUTTON_FILES.items()}
        lit = {name: load_image(root / files[1]) for name, files in _BUTTON_FILES.items()}
        final = load_image(root / "menu4.png")
    except AssetError as exc:
        print(exc)
        pygame.quit()
        return 1

    hover_sound = None
    if pygame.mixer.get_init() is not None:
        try:
            pygame.mixer.music.load(str(root / "palestine.mp3"))
            pygame.mixer.music.play(-1)
        except pygame.error as exc:
            print(f"Failed to load music: {exc}")
        try:
            hover_sound = pygame.mixer.Sound(str(root / "button_hover.wav"))
        except (pygame.error, FileNotFoundError) as exc:
            print(f"Failed to load hover sound: {exc}")

    lobby = Lobby({name: image.get_size() for name, image in normal.items()})

    running = True
    while running:
        screen.fill((0, 0, 0))
        screen.blit(background, (0, 0))
        for name in PAGE_BUTTONS[lobby.page]:
            screen.blit(normal[name], BUTTON_POSITIONS[name])

        if lobby.hover(pygame.mouse.get_pos()) and hover_sound is not None:
            hover_sound.play()
        if lobby.hovered is not None:
            screen.blit(lit[lobby.hovered], BUTTON_POSITIONS[lobby.hovered])

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if lobby.click(event.pos):
                    print(f"Avatar {lobby.avatar} sélectionné et validé")
                    _start_game(screen, final, root)
                    running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False

        pygame.display.flip()

    if pygame.mixer.get_init() is not None:
        pygame.mixer.music.stop()
        pygame.mixer.quit()
    pygame.quit()
    return 0