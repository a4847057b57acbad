"""Tests for turning framebuffer snapshots into pygame surfaces."""

import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from chip8emu.shell.frame_renderer import FrameRenderer, frame_to_rgb


def _frame(*lit):
    pixels = bytearray(64 * 32)
    for x, y in lit:
        pixels[y * 64 + x] = 1
    return bytes(pixels)


class TestFrameToRgb:

    def test_lut_lookup(self):
        lut = np.array([[1, 2, 3], [200, 100, 50]], dtype=np.uint8)
        rgb = frame_to_rgb(_frame((5, 2)), lut)
        assert rgb.shape == (32, 64, 3)
        assert tuple(rgb[2, 5]) == (200, 100, 50)
        assert tuple(rgb[0, 0]) == (1, 2, 3)


class TestFrameRenderer:

    def test_render_lit_pixel(self):
        renderer = FrameRenderer()
        surface = renderer.render(_frame((0, 0), (63, 31)))
        assert surface.get_size() == (64, 32)
        assert tuple(surface.get_at((0, 0)))[:3] == (255, 255, 255)
        assert tuple(surface.get_at((63, 31)))[:3] == (255, 255, 255)
        assert tuple(surface.get_at((1, 0)))[:3] == (0, 0, 0)

    def test_custom_colours_and_redraw(self):
        renderer = FrameRenderer(off_colour=(0, 32, 0), on_colour=(0, 255, 0))
        renderer.render(_frame((10, 10)))
        renderer.set_colours((10, 10, 10), (250, 250, 250))
        surface = renderer.redraw()
        assert tuple(surface.get_at((10, 10)))[:3] == (250, 250, 250)
        assert tuple(surface.get_at((11, 10)))[:3] == (10, 10, 10)

    def test_wrong_frame_size(self):
        with pytest.raises(ValueError):
            FrameRenderer().render(b"\x00" * 100)
