"""Character choice menu and the two-level arena brawler."""

from __future__ import annotations

import argparse
import random
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

import pygame

from kaboul.graphics import (
    AssetError,
    flip_horizontal,
    load_image,
    point_in_rect,
    rects_collide,
)
from kaboul.scores import (
    MAX_SCORES,
    best_scores,
    edit_name,
    format_score_line,
    load_scores,
    save_choices,
    save_score,
)

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
PLAYER_W = 71
PLAYER_H = 79
PLAYER_SPEED = 5
JUMP_VELOCITY = -15
GRAVITY = 1
GROUND_Y = 810
WALK_FRAMES = 9
ATTACK_FRAMES = 6
ATTACK_W = 121
WALK_W = 71
BACK_REACH = 40
ENEMY_W = 60
ENEMY_H = 80
ANIMATION_TICKS = 6
ATTACK_HIT_FRAME = 2
LEVEL1_TIME = 15
LEVEL2_TIME = 30
FADE_STEP = 5
FADE_MAX = 255
FRAME_DELAY_MS = 16
PAUSE_MS = 1000

WHITE = (255, 255, 255)
RED = (255, 0, 0)
BLACK = (0, 0, 0)


class ButtonType(IntEnum):
    """Buttons of the choice menu, in the order their ids are saved."""

    APPEARANCE1 = 0
    APPEARANCE2 = 1
    INPUT1 = 2
    INPUT2 = 3
    CONFIRM = 4


BUTTON_RECTS = {
    ButtonType.APPEARANCE1: (100, 200, 200, 60),
    ButtonType.APPEARANCE2: (100, 300, 200, 60),
    ButtonType.INPUT1: (500, 200, 200, 60),
    ButtonType.INPUT2: (500, 300, 200, 60),
    ButtonType.CONFIRM: (300, 400, 200, 60),
}

_BUTTON_FILES = {
    ButtonType.APPEARANCE1: "appearance1.png",
    ButtonType.APPEARANCE2: "appearance2.png",
    ButtonType.INPUT1: "input1.png",
    ButtonType.INPUT2: "input2.png",
    ButtonType.CONFIRM: "confirm.png",
}

_APPEARANCES = (ButtonType.APPEARANCE1, ButtonType.APPEARANCE2)
_INPUTS = (ButtonType.INPUT1, ButtonType.INPUT2)


@dataclass
class ChoiceMenu:
    """Selection state of the appearance / input menu."""

    hovered: ButtonType | None = None
    appearance: ButtonType | None = None
    input_mode: ButtonType | None = None

    def hover(self, pos: Sequence[int]) -> ButtonType | None:
        """Record which button lies under the mouse."""
        self.hovered = None
        for button, rect in BUTTON_RECTS.items():
            if point_in_rect(pos, rect):
                self.hovered = button
        return self.hovered

    def click(self) -> bool:
        """Handle a left click; True once both choices are made and confirmed."""
        if self.hovered in _APPEARANCES:
            self.appearance = self.hovered
        if self.hovered in _INPUTS:
            self.input_mode = self.hovered
        return (
            self.hovered is ButtonType.CONFIRM
            and self.appearance is not None
            and self.input_mode is not None
        )

    def highlighted(self) -> set[ButtonType]:
        """Buttons drawn with their highlighted image."""
        return {
            button
            for button in (self.hovered, self.appearance, self.input_mode)
            if button is not None
        }

    @property
    def choices(self) -> tuple[int, int]:
        """Saved appearance index and input index, both counted from zero."""
        if self.appearance is None or self.input_mode is None:
            raise ValueError("appearance and input must both be chosen")
        return int(self.appearance), int(self.input_mode) - int(ButtonType.INPUT1)


@dataclass
class Player:
    """Position, motion and animation state of the fighter."""

    x: int = 100
    y: int = GROUND_Y - PLAYER_H
    vx: int = 0
    vy: int = 0
    on_ground: bool = True
    facing_right: bool = True
    attacking: bool = False
    walk_frame: int = 0
    attack_frame: int = 0


@dataclass
class Enemy:
    """A rectangular opponent standing on the ground."""

    x: int
    y: int
    hp: int
    w: int = ENEMY_W
    h: int = ENEMY_H
    alive: bool = True

    @property
    def rect(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)


def spawn_enemy(hp: int, camera_x: int, rng: random.Random | None = None) -> Enemy:
    """Place a fresh enemy somewhere in the visible part of the arena."""
    source = random if rng is None else rng
    x = camera_x + 100 + source.randrange(SCREEN_WIDTH - 200 - ENEMY_W)
    return Enemy(x=x, y=GROUND_Y - ENEMY_H, hp=hp)


@dataclass
class ArenaGame:
    """Rules of the arena: movement, attacks, timers, levels and fades."""

    background_width: int
    rng: random.Random = field(default_factory=random.Random)
    player: Player = field(default_factory=Player)
    enemies: list[Enemy] = field(default_factory=list)
    max_enemies: int = 3
    level: int = 1
    timer: int = LEVEL1_TIME
    score: int = 0
    fade: int = 0
    fade_in: bool = False
    fade_done: bool = False
    overlay: int | None = None
    camera_x: int = 0
    camera_y: int = 0
    frame: int = 0
    attack_counter: int = 0
    over: bool = False

    def __post_init__(self) -> None:
        if not self.enemies:
            self.enemies = [
                spawn_enemy(1, self.camera_x, self.rng) for _ in range(self.max_enemies)
            ]

    def press(self, key: int) -> None:
        """React to a key going down."""
        player = self.player
        if key == pygame.K_LEFT:
            player.vx = -PLAYER_SPEED
            player.facing_right = False
        if key == pygame.K_RIGHT:
            player.vx = PLAYER_SPEED
            player.facing_right = True
        if key == pygame.K_UP and player.on_ground:
            player.vy = JUMP_VELOCITY
            player.on_ground = False
        if key == pygame.K_k and not player.attacking:
            player.attacking = True
            player.attack_frame = 0

    def release(self, key: int) -> None:
        """React to a key coming up."""
        if key in (pygame.K_LEFT, pygame.K_RIGHT):
            self.player.vx = 0

    def tick_second(self) -> bool:
        """Count down one second unless a fade is running; tell whether it counted."""
        if self.fade != 0 or self.over:
            return False
        self.timer -= 1
        return True

    def step(self) -> None:
        """Advance the game by one frame."""
        if self.over:
            return
        self._move()
        self._follow()
        self._animate()
        self._strike()

        if self.level == 1 and self.timer <= 0 and self.fade < FADE_MAX and not self.fade_done:
            self.fade += FADE_STEP
        if self.level == 1 and self.fade >= FADE_MAX and not self.fade_done:
            self.fade_done = True
            self.fade_in = True
            self.timer = LEVEL2_TIME
            self.level = 2
            self.enemies = [spawn_enemy(2, self.camera_x, self.rng)]

        self.overlay = self.fade if (self.fade_in or self.fade > 0) else None
        if self.fade_in:
            if self.fade > 0:
                self.fade -= FADE_STEP
            else:
                self.fade_in = False
                self.fade = 0
                self.fade_done = False

        if self.timer > 0:
            self._respawn(self.level)

        if self.level == 2 and self.timer <= 0 and not self.fade_done:
            if self.fade < FADE_MAX:
                self.fade += FADE_STEP
            else:
                self.fade_done = True
                self.over = True
                return
        self.frame += 1

    def _move(self) -> None:
        player = self.player
        player.x += player.vx
        player.y += player.vy
        if not player.on_ground:
            player.vy += GRAVITY
        if player.y + PLAYER_H >= GROUND_Y:
            player.y = GROUND_Y - PLAYER_H
            player.vy = 0
            player.on_ground = True

    def _follow(self) -> None:
        player = self.player
        half_sprite = ATTACK_W // 2 if player.attacking else WALK_W // 2
        camera_x = max(0, player.x + half_sprite - SCREEN_WIDTH // 2)
        self.camera_x = min(camera_x, self.background_width - SCREEN_WIDTH)
        self.camera_y = max(0, GROUND_Y + PLAYER_H - SCREEN_HEIGHT)

    def _animate(self) -> None:
        player = self.player
        if player.attacking:
            self.attack_counter += 1
            if self.attack_counter >= ANIMATION_TICKS:
                player.attack_frame += 1
                self.attack_counter = 0
            if player.attack_frame >= ATTACK_FRAMES:
                player.attacking = False
        elif player.vx != 0 and player.on_ground:
            if self.frame % ANIMATION_TICKS == 0:
                player.walk_frame = (player.walk_frame + 1) % WALK_FRAMES
        else:
            player.walk_frame = 0

    def _strike(self) -> None:
        player = self.player
        if not (player.attacking and player.attack_frame == ATTACK_HIT_FRAME):
            return
        if player.facing_right:
            box = (player.x + WALK_W, player.y, ATTACK_W, PLAYER_H)
        else:
            box = (player.x - BACK_REACH, player.y, BACK_REACH, PLAYER_H)
        for enemy in self.enemies:
            if enemy.alive and rects_collide(box, enemy.rect):
                enemy.hp -= 1
                if enemy.hp <= 0:
                    enemy.alive = False
                    self.score += 1

    def _respawn(self, hp: int) -> None:
        alive = sum(enemy.alive for enemy in self.enemies)
        for index, enemy in enumerate(self.enemies):
            if alive >= self.max_enemies:
                break
            if not enemy.alive:
                self.enemies[index] = spawn_enemy(hp, self.camera_x, self.rng)
                alive += 1


def _load_font(path: Path, size: int) -> pygame.font.Font:
    try:
        return pygame.font.Font(str(path), size)
    except (pygame.error, OSError) as exc:
        raise AssetError(f"Failed to load font {path}: {exc}") from exc


def _blit_centered_x(screen, font, text, y, color=WHITE) -> None:
    surface = font.render(text, False, color)
    screen.blit(surface, (SCREEN_WIDTH // 2 - surface.get_width() // 2, y))


def _draw_overlay(screen, alpha, text, color, font) -> None:
    shade = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
    shade.fill(BLACK)
    shade.set_alpha(alpha)
    screen.blit(shade, (0, 0))
    label = font.render(text, False, color)
    screen.blit(
        label,
        (
            SCREEN_WIDTH // 2 - label.get_width() // 2,
            SCREEN_HEIGHT // 2 - label.get_height() // 2,
        ),
    )


def _run_choice_menu(screen, root: Path) -> None:
    background = load_image(root / "menu" / "background.png")
    buttons_dir = root / "menu" / "buttons"
    normal = {button: load_image(buttons_dir / name) for button, name in _BUTTON_FILES.items()}
    lit = {button: load_image(buttons_dir / "h" / name) for button, name in _BUTTON_FILES.items()}

    menu = ChoiceMenu()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEMOTION:
                menu.hover(event.pos)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if menu.click():
                    try:
                        save_choices(root / "menu" / "choices.txt", *menu.choices)
                    except OSError as exc:
                        print(f"Could not save choices: {exc}", file=sys.stderr)
                    running = False
        highlighted = menu.highlighted()
        screen.blit(background, (0, 0))
        for button, rect in BUTTON_RECTS.items():
            image = lit[button] if button in highlighted else normal[button]
            screen.blit(image, rect[:2])
        pygame.display.flip()
        pygame.time.delay(FRAME_DELAY_MS)


def _draw_arena(screen, game: ArenaGame, background, walk_sheet, attack_sheet, font) -> None:
    screen.blit(
        background,
        (0, 0),
        pygame.Rect(game.camera_x, game.camera_y, SCREEN_WIDTH, SCREEN_HEIGHT),
    )
    enemy_color = RED if game.level == 1 else BLACK
    for enemy in game.enemies:
        if enemy.alive:
            screen.fill(
                enemy_color,
                pygame.Rect(
                    enemy.x - game.camera_x, enemy.y - game.camera_y, enemy.w, enemy.h
                ),
            )

    player = game.player
    if player.attacking:
        sheet, width, index = attack_sheet, ATTACK_W, player.attack_frame
    else:
        sheet, width, index = walk_sheet, WALK_W, player.walk_frame
    source = pygame.Rect(index * width, 0, width, PLAYER_H).clip(sheet.get_rect())
    sprite = sheet.subsurface(source)
    if not player.facing_right:
        sprite = flip_horizontal(sprite)
    screen.blit(sprite, (player.x - game.camera_x, player.y - game.camera_y))

    screen.blit(font.render(f"{game.timer:02d}", False, WHITE), (20, 20))
    screen.blit(font.render(f"Score: {game.score}", False, WHITE), (20, 80))
    if game.overlay is not None:
        _draw_overlay(screen, game.overlay, "LEVEL 2", RED, font)


def _run_arena(screen, root: Path) -> int | None:
    try:
        background = load_image(root / "jeu" / "background.png")
        load_image(root / "jeu" / "collisionmap.png")
        walk_sheet = load_image(root / "jeu" / "joueur" / "walk.png")
        attack_sheet = load_image(root / "jeu" / "joueur" / "attack.png")
        font = _load_font(root / "font.ttf", 64)
    except AssetError:
        print("Error loading game assets", file=sys.stderr)
        return None

    game = ArenaGame(background.get_width())
    last_time = pygame.time.get_ticks()
    while True:
        now = pygame.time.get_ticks()
        if now - last_time >= 1000 and game.tick_second():
            last_time = now
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return None
            if event.type == pygame.KEYDOWN:
                game.press(event.key)
            elif event.type == pygame.KEYUP:
                game.release(event.key)

        level_before = game.level
        game.step()
        if game.level != level_before:
            pygame.time.delay(PAUSE_MS)
        _draw_arena(screen, game, background, walk_sheet, attack_sheet, font)
        if game.over:
            pygame.time.delay(PAUSE_MS)
            return game.score
        pygame.display.flip()
        pygame.time.delay(FRAME_DELAY_MS)


def _show_score_menu(screen, root: Path, final_score: int) -> bool:
    background = load_image(root / "menu" / "background.png")
    font = _load_font(root / "font.ttf", 48)
    name = ""
    while True:
        screen.blit(background, (0, 0))
        _blit_centered_x(screen, font, "Enter your name:", 200)
        name_box = pygame.Rect(SCREEN_WIDTH // 2 - 200, 300, 400, 60)
        screen.fill(BLACK, name_box)
        screen.blit(font.render(name, False, WHITE), name_box.topleft)
        _blit_centered_x(screen, font, f"Score: {final_score}", 400)
        pygame.display.flip()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                name, submitted = edit_name(name, event.key, event.unicode)
                if submitted:
                    save_score(root / "score.txt", name, final_score)
                    return True


def _show_best_scores(screen, root: Path) -> None:
    board = load_image(root / "menu" / "board.png")
    title = load_image(root / "menu" / "best_score.png")
    font = _load_font(root / "font.ttf", 48)
    entries = best_scores(load_scores(root / "score.txt", MAX_SCORES))

    screen.blit(board, (0, 0))
    screen.blit(title, (SCREEN_WIDTH // 2 - title.get_width() // 2, 40))
    for rank, entry in enumerate(entries, start=1):
        _blit_centered_x(screen, font, format_score_line(rank, entry), 200 + (rank - 1) * 60)
    pygame.display.flip()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (
                event.type == pygame.KEYDOWN and event.key == pygame.K_RETURN
            ):
                return


def main(argv: Sequence[str] | None = None) -> int:
    """Run the choice menu, the arena and the score screens."""
    parser = argparse.ArgumentParser(prog="kaboul-arena", description="Arena brawler.")
    parser.add_argument("--root", type=Path, default=Path("."), help="asset directory")
    args = parser.parse_args(argv)
    root: Path = args.root

    pygame.init()
    if not pygame.display.get_init():
        print(f"SDL init error: {pygame.get_error()}", file=sys.stderr)
        return 1
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        _run_choice_menu(screen, root)
        score = _run_arena(screen, root)
        if score is not None and _show_score_menu(screen, root, score):
            _show_best_scores(screen, root)
    except AssetError as exc:
        print(exc, file=sys.stderr)
        return 1
    finally:
        pygame.quit()
    return 0