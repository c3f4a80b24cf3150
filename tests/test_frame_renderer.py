"""
Rendering surface + frame renderer
"""

from dataclasses import replace
from unittest.mock import MagicMock, call

import pytest

from engine.frame_renderer import FrameRenderer
from engine.surface import PillowSurface
from models.color import Color
from models.errors import SurfaceUnavailableError
from models.scene import Scene

RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)


def channels_close(actual, expected, tol=2):
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))


# === PillowSurface ===

def test_fill_rect_paints_pixels():
    surface = PillowSurface(20, 10)
    surface.fill_rect(0, 0, 10, 10, RED)
    assert surface.get_pixel(9, 5) == (255, 0, 0)
    assert surface.get_pixel(10, 5) == (255, 255, 255)


def test_sharp_circle():
    surface = PillowSurface(40, 40)
    surface.fill_circle(20, 20, 8, BLUE)
    assert surface.get_pixel(20, 20) == (0, 0, 255)
    assert surface.get_pixel(0, 0) == (255, 255, 255)


def test_blurred_circle_keeps_core_and_softens_edge():
    surface = PillowSurface(100, 100)
    surface.set_blur(3)
    surface.fill_circle(50, 50, 20, BLUE)

    assert channels_close(surface.get_pixel(50, 50), (0, 0, 255))
    # Right at the edge the coverage is roughly half
    edge = surface.get_pixel(70, 50)
    assert 40 < edge[0] < 215
    # Far outside the blurred footprint nothing changes
    assert surface.get_pixel(95, 95) == (255, 255, 255)


def test_blurred_circle_partly_off_canvas():
    surface = PillowSurface(30, 30)
    surface.set_blur(5)
    surface.fill_circle(0, 0, 20, RED)
    assert channels_close(surface.get_pixel(0, 0), (255, 0, 0))
    surface.fill_circle(500, 500, 10, BLUE)  # entirely outside: no-op
    assert surface.get_pixel(29, 29) != (0, 0, 255)


def test_snapshot_is_independent_copy():
    surface = PillowSurface(10, 10)
    snap = surface.snapshot()
    surface.fill_rect(0, 0, 10, 10, RED)
    assert snap.getpixel((5, 5)) == (255, 255, 255)


def test_closed_surface_is_unavailable():
    surface = PillowSurface(10, 10)
    surface.close()
    with pytest.raises(SurfaceUnavailableError):
        surface.fill_rect(0, 0, 5, 5, RED)
    with pytest.raises(SurfaceUnavailableError):
        surface.fill_circle(5, 5, 2, RED)
    with pytest.raises(SurfaceUnavailableError):
        surface.snapshot()


# === FrameRenderer ===

def test_draw_order_and_blur_state(scene):
    surface = MagicMock()
    surface.width = scene.config.width
    surface.height = scene.config.height
    config = replace(scene.config, blur=12)

    FrameRenderer().draw_frame(surface, scene.with_config(config), 0.5)

    names = [c[0] for c in surface.method_calls]
    assert names[0] == "fill_rect"
    assert names[1] == "set_blur"
    assert names[2:-1] == ["fill_circle"] * len(scene.blobs)
    assert names[-1] == "set_blur"
    assert surface.method_calls[1] == call.set_blur(12)
    assert surface.method_calls[-1] == call.set_blur(0)
    surface.resize.assert_not_called()


def test_renderer_resizes_surface_to_scene(scene):
    surface = PillowSurface(10, 10)
    FrameRenderer().draw_frame(surface, scene, 0.0)
    assert (surface.width, surface.height) == (scene.config.width, scene.config.height)
    assert surface.blur == 0


def test_frames_are_pure_functions_of_t(scene):
    renderer = FrameRenderer()
    blurred = scene.with_config(replace(scene.config, blur=4))

    first = PillowSurface(1, 1)
    renderer.draw_frame(first, blurred, 0.3)
    expected = first.snapshot().tobytes()

    # Same surface after unrelated frames
    renderer.draw_frame(first, blurred, 0.7)
    renderer.draw_frame(first, blurred, 0.1)
    renderer.draw_frame(first, blurred, 0.3)
    assert first.snapshot().tobytes() == expected

    # Fresh surface
    second = PillowSurface(1, 1)
    renderer.draw_frame(second, blurred, 0.3)
    assert second.snapshot().tobytes() == expected


def test_later_blobs_paint_over_earlier_ones(scene):
    still = replace(scene.config, movement_scale=0.0)
    under = scene.blobs[0].with_color(RED)
    over = replace(scene.blobs[0], id="over", color=BLUE)

    surface = PillowSurface(1, 1)
    FrameRenderer().draw_frame(surface, Scene((under, over), still), 0.0)

    cx = int(under.center_x * still.width)
    cy = int(under.center_y * still.height)
    assert surface.get_pixel(cx, cy) == (0, 0, 255)


def test_background_fills_frame(scene, small_config):
    black = replace(small_config, background_color=Color.black())
    surface = PillowSurface(1, 1)
    FrameRenderer().draw_frame(surface, Scene((), black), 0.0)
    assert surface.snapshot().getcolors() == [(black.width * black.height, (0, 0, 0))]
