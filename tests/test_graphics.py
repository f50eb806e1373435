import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from kaboul.graphics import (
    AssetError,
    fade_transition,
    flip_horizontal,
    load_image,
    point_in_rect,
    rects_collide,
    resize_surface,
    scale_surface,
)


@pytest.fixture
def display():
    pygame.display.init()
    screen = pygame.display.set_mode((4, 4))
    yield screen
    pygame.display.quit()


def test_load_image_missing_raises(tmp_path):
    missing = tmp_path / "nothing.png"
    with pytest.raises(AssetError) as info:
        load_image(missing)
    assert "nothing.png" in str(info.value)


def test_load_image_round_trip(tmp_path):
    surface = pygame.Surface((6, 3))
    surface.fill((10, 20, 30))
    path = tmp_path / "pic.png"
    pygame.image.save(surface, str(path))
    loaded = load_image(path)
    assert loaded.get_size() == (6, 3)
    assert tuple(loaded.get_at((2, 1)))[:3] == (10, 20, 30)


def test_point_in_rect_includes_edges():
    rect = (10, 20, 30, 40)
    assert point_in_rect((10, 20), rect)
    assert point_in_rect((40, 60), rect)
    assert point_in_rect((25, 30), rect)


def test_point_in_rect_outside():
    rect = (10, 20, 30, 40)
    assert not point_in_rect((9, 30), rect)
    assert not point_in_rect((41, 30), rect)
    assert not point_in_rect((20, 61), rect)


def test_point_in_rect_accepts_pygame_rect():
    assert point_in_rect((5, 5), pygame.Rect(0, 0, 5, 5))


def test_rects_collide_overlap_and_symmetry():
    a = (0, 0, 10, 10)
    b = (5, 5, 10, 10)
    assert rects_collide(a, b)
    assert rects_collide(b, a)


def test_rects_touching_do_not_collide():
    a = (0, 0, 10, 10)
    assert not rects_collide(a, (10, 0, 5, 5))
    assert not rects_collide(a, (0, 10, 5, 5))


def test_rects_far_apart_do_not_collide():
    assert not rects_collide((0, 0, 10, 10), (100, 100, 10, 10))


def test_scale_surface_factor():
    surface = pygame.Surface((10, 20))
    assert scale_surface(surface, 1.5).get_size() == (15, 30)
    assert scale_surface(surface, 0.5).get_size() == (5, 10)


def test_resize_surface_exact_size():
    surface = pygame.Surface((10, 20))
    assert resize_surface(surface, 7, 3).get_size() == (7, 3)


def test_flip_horizontal_moves_pixel():
    surface = pygame.Surface((5, 2))
    surface.fill((0, 0, 0))
    surface.set_at((0, 1), (255, 0, 0))
    flipped = flip_horizontal(surface)
    assert flipped.get_size() == (5, 2)
    assert tuple(flipped.get_at((4, 1)))[:3] == (255, 0, 0)
    assert tuple(flipped.get_at((0, 1)))[:3] == (0, 0, 0)


def test_flip_twice_is_identity():
    surface = pygame.Surface((3, 3))
    surface.fill((0, 0, 0))
    surface.set_at((0, 0), (1, 2, 3))
    back = flip_horizontal(flip_horizontal(surface))
    assert tuple(back.get_at((0, 0)))[:3] == (1, 2, 3)


def test_fade_transition_ends_on_target(display):
    source = pygame.Surface((4, 4))
    source.fill((255, 0, 0))
    target = pygame.Surface((4, 4))
    target.fill((0, 0, 255))
    fade_transition(display, source, target, 0)
    assert tuple(display.get_at((1, 1)))[:3] == (0, 0, 255)


def test_fade_transition_restores_alpha(display):
    source = pygame.Surface((4, 4))
    target = pygame.Surface((4, 4))
    target.set_alpha(200)
    fade_transition(display, source, target, 0)
    assert target.get_alpha() == 200