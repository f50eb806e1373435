"""Side-view battle: a player, two patrolling enemies, obstacles and a moving barrier."""

from __future__ import annotations

import argparse
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pygame

from kaboul.graphics import (
    AssetError,
    flip_horizontal,
    load_image,
    rects_collide,
    resize_surface,
)

IDLE_FRAMES = 4
MOVE_FRAMES = 4
DEATH_FRAMES = 4
DEATH_TICKS = 6
ENEMY_MAX_HEALTH = 6
MAX_OBSTACLES = 3
PLAYER_BASE_Y = 820
PLAYER_SPEED = 4
ENEMY_STEP = 2
BARRIER_X = 600
BARRIER_SPEED = 3
HURT_MS = 200
ANIMATION_DELAY = 5
TURN_CHANCE = 100
FRAME_DELAY_MS = 16
MINIMAP_POS = (10, 10)
MINIMAP_SIZE = (356, 156)
DOT_SIZE = (7, 12)
OBSTACLE_DOT = 8
BARRIER_DOT_WIDTH = 4
HEALTH_MARGIN = 50
HEALTH_SPACING = 40
CAPTION = "el kaboul ddrmech"

OBSTACLE_RECTS = (
    (200, 780, 50, 30),
    (100, 780, 50, 30),
    (600, 780, 50, 30),
)

Rect = tuple[int, int, int, int]


def _half(value: int) -> int:
    return int(value / 2)


@dataclass
class Barrier:
    """A vertical bar sliding up and down between the top and bottom of the field."""

    x: int
    y: int
    w: int
    h: int
    direction: int = 1
    speed: int = BARRIER_SPEED

    @property
    def rect(self) -> Rect:
        return (self.x, self.y, self.w, self.h)

    def step(self, field_height: int) -> None:
        """Move one frame and turn around at the top or bottom edge."""
        self.y += self.speed * self.direction
        if self.y <= 0:
            self.y = 0
            self.direction = 1
        elif self.y + self.h >= field_height:
            self.y = field_height - self.h
            self.direction = -1


def push_out_of_barrier(player_rect: Sequence[int], barrier_rect: Sequence[int]) -> int:
    """Return the player's x after being pushed to the nearer side of the barrier."""
    px, _, pw, _ = player_rect
    bx, _, bw, _ = barrier_rect
    if not rects_collide(player_rect, barrier_rect):
        return px
    if px + _half(pw) < bx + _half(bw):
        return bx - pw
    return bx + bw


def minimap_point(pos: Sequence[int], scale_x: float, scale_y: float) -> tuple[int, int]:
    """Map a point of the field onto the minimap drawn in the top-left corner."""
    x, y = pos
    return (MINIMAP_POS[0] + int(x * scale_x), MINIMAP_POS[1] + int(y * scale_y))


@dataclass
class Enemy:
    """A patrolling enemy and its animation state."""

    x: int
    y: int
    direction: int
    health: int = ENEMY_MAX_HEALTH
    dying: bool = False
    death_frame: int = 0
    hurt: bool = False
    hurt_until: int = 0
    turning: bool = False
    turn_frame: int = 0
    pose: tuple[str, int] | None = None


@dataclass
class Battle:
    """Rules of the battle field, independent of drawing."""

    field_width: int
    field_height: int
    player_size: tuple[int, int]
    enemy_size: tuple[int, int]
    barrier: Barrier
    player_x: int | None = None
    player_y: int | None = None
    enemies: list[Enemy] = field(default_factory=list)
    obstacle_rects: list[Rect] = field(default_factory=lambda: list(OBSTACLE_RECTS))
    obstacle_active: list[bool] = field(default_factory=lambda: [True] * MAX_OBSTACLES)
    anim_frame: int = 0
    anim_delay: int = 0

    def __post_init__(self) -> None:
        pw, ph = self.player_size
        _, eh = self.enemy_size
        if self.player_x is None:
            self.player_x = _half(self.field_width) - _half(pw)
        if self.player_y is None:
            self.player_y = PLAYER_BASE_Y - ph
        if not self.enemies:
            self.enemies = [
                Enemy(100, PLAYER_BASE_Y - eh, 1),
                Enemy(300, PLAYER_BASE_Y - eh, -1),
            ]

    @property
    def player_rect(self) -> Rect:
        return (self.player_x, self.player_y, *self.player_size)

    def enemy_rect(self, enemy: Enemy) -> Rect:
        return (enemy.x, enemy.y, *self.enemy_size)

    @property
    def scale(self) -> tuple[float, float]:
        """Minimap scale factors along x and y."""
        return (MINIMAP_SIZE[0] / self.field_width, MINIMAP_SIZE[1] / self.field_height)

    def move_player(self, dx: int) -> None:
        """Shift the player horizontally."""
        self.player_x += dx

    def attack(self, now: int) -> list[int]:
        """Strike every enemy touching the player; return the indices hit."""
        hit = []
        for index, enemy in enumerate(self.enemies):
            if (
                rects_collide(self.enemy_rect(enemy), self.player_rect)
                and enemy.health > 0
                and not enemy.dying
            ):
                enemy.health = max(0, enemy.health - 1)
                enemy.hurt = True
                enemy.hurt_until = now + HURT_MS
                hit.append(index)
        return hit

    def step(self, rng: random.Random, now: int) -> None:
        """Advance the barrier, obstacles, animations and enemies by one frame."""
        self.barrier.step(self.field_height)
        self.player_x = push_out_of_barrier(self.player_rect, self.barrier.rect)

        self.anim_delay += 1
        if self.anim_delay >= ANIMATION_DELAY:
            self.anim_frame = (self.anim_frame + 1) % IDLE_FRAMES
            self.anim_delay = 0

        for index, rect in enumerate(self.obstacle_rects):
            if self.obstacle_active[index] and rects_collide(self.player_rect, rect):
                self.obstacle_active[index] = False

        for enemy in self.enemies:
            self._step_enemy(enemy, rng, now)

    def _step_enemy(self, enemy: Enemy, rng: random.Random, now: int) -> None:
        if not enemy.turning and not enemy.dying and rng.randrange(TURN_CHANCE) < 1:
            enemy.turning = True
            enemy.turn_frame = 0
            enemy.direction *= -1

        if not enemy.turning and not enemy.dying:
            enemy.x += enemy.direction * ENEMY_STEP
            if rects_collide(self.enemy_rect(enemy), self.barrier.rect):
                enemy.direction *= -1
                enemy.x += enemy.direction * ENEMY_STEP * 2
            if enemy.x < 0 or enemy.x > self.field_width - self.enemy_size[0]:
                enemy.direction *= -1

        if enemy.dying:
            if enemy.death_frame < DEATH_FRAMES * DEATH_TICKS:
                enemy.pose = ("death", enemy.death_frame // DEATH_TICKS)
                enemy.death_frame += 1
            else:
                enemy.pose = None
        elif enemy.hurt:
            enemy.pose = ("hurt", 0)
            if now > enemy.hurt_until:
                enemy.hurt = False
        elif enemy.turning:
            enemy.pose = ("move", enemy.turn_frame)
            enemy.turn_frame += 1
            if enemy.turn_frame >= MOVE_FRAMES:
                enemy.turning = False
        else:
            enemy.pose = ("idle", self.anim_frame)

        if enemy.health <= 0 and not enemy.dying:
            enemy.dying = True


def _load_scaled(path: Path, divisor: int) -> pygame.Surface:
    image = load_image(path)
    width, height = image.get_size()
    return resize_surface(image, width // divisor, height // divisor)


def _load_sequence(root: Path, folder: str, count: int, divisor: int = 4):
    return [
        _load_scaled(root / folder / f"{folder}{number}.png", divisor)
        for number in range(1, count + 1)
    ]


def _dot(color: tuple[int, int, int]) -> pygame.Surface:
    surface = pygame.Surface(DOT_SIZE)
    surface.fill(color)
    return surface


def _draw(screen, battle: Battle, art: dict) -> None:
    screen.blit(art["background"], (0, 0))
    for index, rect in enumerate(battle.obstacle_rects):
        if battle.obstacle_active[index]:
            screen.blit(art["obstacles"][index], rect[:2])
    screen.blit(art["barrier"], battle.barrier.rect[:2])

    health_bars = art["health"]
    for index, enemy in enumerate(battle.enemies):
        if enemy.pose is not None:
            kind, frame = enemy.pose
            if kind == "death":
                image = art["death"][frame]
            else:
                side = "right" if enemy.direction == 1 else "left"
                image = art[kind][side][frame]
            screen.blit(image, (enemy.x, enemy.y))
        if not enemy.dying and enemy.health > 0:
            bar = health_bars[ENEMY_MAX_HEALTH - enemy.health]
            x = screen.get_width() - health_bars[0].get_width() - HEALTH_MARGIN
            screen.blit(bar, (x, 20 + index * HEALTH_SPACING))

    screen.blit(art["player"], (battle.player_x, battle.player_y))
    screen.blit(art["minimap"], MINIMAP_POS)

    scale_x, scale_y = battle.scale
    pw, ph = battle.player_size
    px, py = minimap_point(
        (battle.player_x + _half(pw), battle.player_y + _half(ph)), scale_x, scale_y
    )
    screen.blit(art["blue"], (px - DOT_SIZE[0] // 2, py - DOT_SIZE[1] // 2))

    ew, eh = battle.enemy_size
    for enemy in battle.enemies:
        if not enemy.dying:
            ex, ey = minimap_point((enemy.x + _half(ew), enemy.y + _half(eh)), scale_x, scale_y)
            screen.blit(art["red"], (ex - DOT_SIZE[0] // 2, ey - DOT_SIZE[1] // 2))

    for index, (x, y, w, h) in enumerate(battle.obstacle_rects):
        if battle.obstacle_active[index]:
            ox, oy = minimap_point((x + _half(w), y + _half(h)), scale_x, scale_y)
            screen.fill((0, 0, 0), pygame.Rect(ox - 2, oy - 2, OBSTACLE_DOT, OBSTACLE_DOT))

    bx, by, bw, bh = battle.barrier.rect
    dx, dy = minimap_point((bx + _half(bw), by + _half(bh)), scale_x, scale_y)
    screen.fill(
        (128, 128, 128),
        pygame.Rect(dx - 2, dy - 2, BARRIER_DOT_WIDTH, int(bh * scale_y)),
    )


def _load_art(root: Path) -> dict:
    art: dict = {}
    art["minimap"] = resize_surface(load_image(root / "mini.jpeg"), *MINIMAP_SIZE)
    art["red"] = _dot((255, 0, 0))
    art["blue"] = _dot((0, 0, 255))
    art["obstacles"] = [load_image(root / f"g{index}.jpeg") for index in range(MAX_OBSTACLES)]
    art["barrier"] = load_image(root / "barre.jpeg")
    for kind, count in (("idle", IDLE_FRAMES), ("move", MOVE_FRAMES), ("attack", MOVE_FRAMES)):
        left = _load_sequence(root, kind, count)
        art[kind] = {"left": left, "right": [flip_horizontal(image) for image in left]}
    art["death"] = _load_sequence(root, "death", DEATH_FRAMES)
    art["health"] = _load_sequence(root, "health", ENEMY_MAX_HEALTH, 5)
    hurt = _load_scaled(root / "hurt" / "hurt1.png", 4)
    art["hurt"] = {"left": [hurt], "right": [flip_horizontal(hurt)]}
    art["player"] = _load_scaled(root / "me" / "me.png", 4)
    return art


def make_battle_from_art(background: pygame.Surface, art: dict) -> Battle:
    """Build a battle sized from the loaded images."""
    barrier_w, barrier_h = art["barrier"].get_size()
    return Battle(
        field_width=background.get_width(),
        field_height=background.get_height(),
        player_size=art["player"].get_size(),
        enemy_size=art["idle"]["right"][0].get_size(),
        barrier=Barrier(BARRIER_X, 0, barrier_h, barrier_w),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the battle until the window is closed or Escape is pressed."""
    parser = argparse.ArgumentParser(prog="kaboul-battle", description="Battle field.")
    parser.add_argument("--root", type=Path, default=Path("."), help="asset directory")
    args = parser.parse_args(argv)
    root: Path = args.root

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
    rng = random.Random()
    attack_held = False
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (
                event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE
            ):
                running = False

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