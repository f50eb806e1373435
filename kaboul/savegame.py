"""Saving and restoring a battle to a fixed-size binary file."""

from __future__ import annotations

import argparse
import random
import struct
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

import pygame

from kaboul.battle import (
    CAPTION,
    FRAME_DELAY_MS,
    MAX_OBSTACLES,
    PLAYER_SPEED,
    Battle,
    _draw,
    _load_art,
    make_battle_from_art,
)
from kaboul.graphics import AssetError, load_image

SAVE_FILE = "saved_game.dat"
ENEMY_COUNT = 2

# Rectangles hold signed 16-bit x, y and unsigned 16-bit w, h; the padding
# bytes keep the barrier rectangle and the direction on their natural alignment.
_RECT = "hhHH"
_LAYOUT = struct.Struct(
    "<" + _RECT * (1 + ENEMY_COUNT) + f"{ENEMY_COUNT}i"
    + f"{ENEMY_COUNT}?" + f"{MAX_OBSTACLES}?" + "x" + _RECT + "2x" + "i"
)
RECORD_SIZE = _LAYOUT.size

Rect = tuple[int, int, int, int]


@dataclass(frozen=True)
class GameState:
    """Positions, health and barrier state of a battle at one moment."""

    player: Rect
    enemies: tuple[Rect, ...]
    enemy_health: tuple[int, ...]
    dying: tuple[bool, ...]
    obstacle_active: tuple[bool, ...]
    barrier: Rect
    barrier_direction: int

    def __post_init__(self) -> None:
        for name, values, size in (
            ("enemies", self.enemies, ENEMY_COUNT),
            ("enemy_health", self.enemy_health, ENEMY_COUNT),
            ("dying", self.dying, ENEMY_COUNT),
            ("obstacle_active", self.obstacle_active, MAX_OBSTACLES),
        ):
            if len(values) != size:
                raise ValueError(f"{name} must hold {size} values, got {len(values)}")

    def to_bytes(self) -> bytes:
        """Encode the state as one fixed-size record."""
        fields = [
            *self.player,
            *(value for rect in self.enemies for value in rect),
            *self.enemy_health,
            *self.dying,
            *self.obstacle_active,
            *self.barrier,
            self.barrier_direction,
        ]
        try:
            return _LAYOUT.pack(*fields)
        except struct.error as exc:
            raise ValueError(f"state does not fit the save format: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> GameState:
        """Decode a record written by to_bytes."""
        if len(data) != RECORD_SIZE:
            raise ValueError(f"save record must be {RECORD_SIZE} bytes, got {len(data)}")
        values = list(_LAYOUT.unpack(data))

        def take(count: int) -> tuple:
            chunk = tuple(values[:count])
            del values[:count]
            return chunk

        player = take(4)
        enemies = tuple(take(4) for _ in range(ENEMY_COUNT))
        health = take(ENEMY_COUNT)
        dying = take(ENEMY_COUNT)
        obstacles = take(MAX_OBSTACLES)
        barrier = take(4)
        (direction,) = take(1)
        return cls(player, enemies, health, dying, obstacles, barrier, direction)

    @classmethod
    def capture(cls, battle: Battle) -> GameState:
        """Take a snapshot of the parts of a battle that are saved."""
        return cls(
            player=battle.player_rect,
            enemies=tuple(battle.enemy_rect(enemy) for enemy in battle.enemies),
            enemy_health=tuple(enemy.health for enemy in battle.enemies),
            dying=tuple(enemy.dying for enemy in battle.enemies),
            obstacle_active=tuple(battle.obstacle_active),
            barrier=battle.barrier.rect,
            barrier_direction=battle.barrier.direction,
        )

    def restore(self, battle: Battle) -> None:
        """Put the saved positions, health and barrier back into a battle."""
        if len(battle.enemies) != ENEMY_COUNT:
            raise ValueError(f"battle must have {ENEMY_COUNT} enemies")
        battle.player_x, battle.player_y = self.player[:2]
        for enemy, rect, health, dying in zip(
            battle.enemies, self.enemies, self.enemy_health, self.dying
        ):
            enemy.x, enemy.y = rect[:2]
            enemy.health = health
            enemy.dying = dying
        battle.obstacle_active = list(self.obstacle_active)
        barrier = battle.barrier
        barrier.x, barrier.y, barrier.w, barrier.h = self.barrier
        barrier.direction = self.barrier_direction


def save_game_state(state: GameState, path: str | PathLike = SAVE_FILE) -> None:
    """Write the state to a file, replacing what was there."""
    Path(path).write_bytes(state.to_bytes())


def load_game_state(path: str | PathLike = SAVE_FILE) -> GameState | None:
    """Read a saved state, or return None when there is no save file."""
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        return None
    return GameState.from_bytes(data)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the battle, resuming a saved game and saving on the S key."""
    parser = argparse.ArgumentParser(prog="kaboul-savegame", description="Battle with saving.")
    parser.add_argument("--root", type=Path, default=Path("."), help="asset directory")
    args = parser.parse_args(argv)
    root: Path = args.root
    save_path = root / SAVE_FILE

    pygame.init()
    try:
        background = load_image(root / "background.jpg")
        screen = pygame.display.set_mode(background.get_size())
        pygame.display.set_caption(CAPTION)
        art = _load_art(root)
    except (AssetError, pygame.error) as exc:
        print(f"Failed to load assets: {exc}")
        pygame.quit()
        return 1
    art["background"] = background

    battle = make_battle_from_art(background, art)
    try:
        saved = load_game_state(save_path)
    except (OSError, ValueError) as exc:
        print(f"Could not read saved game: {exc}")
        saved = None
    if saved is not None:
        saved.restore(battle)

    rng = random.Random()
    attack_held = False
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_s:
                try:
                    save_game_state(GameState.capture(battle), save_path)
                except (OSError, ValueError) as exc:
                    print(f"Could not save game: {exc}")

        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            battle.move_player(-PLAYER_SPEED)
        if keys[pygame.K_RIGHT]:
            battle.move_player(PLAYER_SPEED)
        now = pygame.time.get_ticks()
        if keys[pygame.K_e] and not attack_held:
            attack_held = True
            battle.attack(now)
        if not keys[pygame.K_e]:
            attack_held = False

        battle.step(rng, now)
        _draw(screen, battle, art)
        pygame.display.flip()
        pygame.time.delay(FRAME_DELAY_MS)

    pygame.quit()
    return 0