"""Tests for the 64x32 XOR framebuffer."""

import pytest

from chip8emu.core.frame_buffer import FrameBuffer


@pytest.fixture
def fb():
    return FrameBuffer()


class TestFrameBuffer:

    def test_starts_blank_and_clean(self, fb):
        assert len(fb.pixels) == 64 * 32
        assert not any(fb.pixels)
        assert fb.dirty is False

    def test_draw_sets_pixels_msb_first(self, fb):
        collision = fb.draw_sprite(0, 0, b"\x81")
        assert collision is False
        assert fb.read_pixel(0, 0) == 1
        assert fb.read_pixel(7, 0) == 1
        assert sum(fb.pixels) == 2
        assert fb.dirty is True

    def test_overdraw_reports_collision(self, fb):
        fb.draw_sprite(3, 4, b"\x80")
        assert fb.draw_sprite(3, 4, b"\xC0") is True
        assert fb.read_pixel(3, 4) == 0
        assert fb.read_pixel(4, 4) == 1

    def test_coordinates_wrap(self, fb):
        fb.draw_sprite(64 + 63, 32 + 31, b"\xC0\xC0")
        assert fb.read_pixel(63, 31) == 1
        assert fb.read_pixel(0, 31) == 1
        assert fb.read_pixel(63, 0) == 1
        assert fb.read_pixel(0, 0) == 1

    def test_empty_sprite_marks_dirty(self, fb):
        assert fb.draw_sprite(10, 10, b"") is False
        assert fb.dirty is True

    def test_clear_marks_dirty(self, fb):
        fb.draw_sprite(0, 0, b"\xFF")
        fb.consume()
        fb.clear()
        assert not any(fb.pixels)
        assert fb.dirty is True

    def test_reset_does_not_request_redraw(self, fb):
        fb.draw_sprite(0, 0, b"\xFF")
        fb.reset()
        assert not any(fb.pixels)
        assert fb.dirty is False

    def test_consume_returns_snapshot(self, fb):
        fb.draw_sprite(0, 0, b"\x80")
        frame = fb.consume()
        fb.draw_sprite(0, 0, b"\x80")
        assert frame[0] == 1
        assert fb.pixels[0] == 0

    @pytest.mark.parametrize("x, y", [(-1, 0), (64, 0), (0, 32), (0, -1)])
    def test_read_pixel_off_screen(self, fb, x, y):
        with pytest.raises(IndexError):
            fb.read_pixel(x, y)

    def test_rows_and_str(self, fb):
        fb.draw_sprite(0, 1, b"\xA0")
        rows = fb.rows()
        assert len(rows) == 32
        assert rows[1][:4] == bytes([1, 0, 1, 0])
        lines = str(fb).splitlines()
        assert len(lines) == 32
        assert lines[1].startswith("#.#.")
        assert set(lines[0]) == {"."}
