"""Surface helpers shared by the menus and the games."""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike

import pygame

FADE_STEPS = 30

Point = Sequence[int]
RectLike = Sequence[int]


class AssetError(Exception):
    """An image or other asset could not be loaded."""


def load_image(path: str | PathLike) -> pygame.Surface:
    """Load an image file, raising AssetError when it cannot be read."""
    try:
        return pygame.image.load(str(path))
    except (pygame.error, OSError) as exc:
        raise AssetError(f"Failed to load image {path}: {exc}") from exc


def point_in_rect(point: Point, rect: RectLike) -> bool:
    """Tell whether a point lies inside a rectangle, edges included."""
    px, py = point
    x, y, w, h = rect
    return x <= px <= x + w and y <= py <= y + h


def rects_collide(a: RectLike, b: RectLike) -> bool:
    """Tell whether two rectangles overlap; touching edges do not count."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def scale_surface(surface: pygame.Surface, scale: float) -> pygame.Surface:
    """Return a copy of the surface stretched by a uniform factor."""
    width, height = surface.get_size()
    return pygame.transform.scale(surface, (int(width * scale), int(height * scale)))


def resize_surface(surface: pygame.Surface, width: int, height: int) -> pygame.Surface:
    """Return a copy of the surface stretched to an exact size."""
    return pygame.transform.scale(surface, (width, height))


def flip_horizontal(surface: pygame.Surface) -> pygame.Surface:
    """Return a mirror image of the surface, left to right."""
    return pygame.transform.flip(surface, True, False)


def fade_transition(
    screen: pygame.Surface,
    source: pygame.Surface,
    target: pygame.Surface,
    duration_ms: int,
) -> None:
    """Cross-fade the display surface from one picture to another."""
    delay = duration_ms // FADE_STEPS
    previous_alpha = target.get_alpha()
    try:
        for step in range(FADE_STEPS + 1):
            screen.fill((0, 0, 0))
            screen.blit(source, (0, 0))
            target.set_alpha(int(step / FADE_STEPS * 255))
            screen.blit(target, (0, 0))
            pygame.display.flip()
            pygame.time.delay(delay)
    finally:
        target.set_alpha(previous_alpha)