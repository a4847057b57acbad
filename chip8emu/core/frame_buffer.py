"""
FrameBuffer -- the 64x32 monochrome display of the CHIP-8.

The buffer holds one byte per pixel (0 = off, 1 = lit) in row-major order:
``pixels[y * width + x]``.  Sprites are XOR-plotted; a lit pixel turned off
by a plot is a *collision*.

A ``dirty`` flag records whether the picture changed since the host last
took a frame with :meth:`consume`.
"""

from __future__ import annotations

from typing import Iterable, List

from chip8emu.core.types import DISPLAY_HEIGHT, DISPLAY_WIDTH


class FrameBuffer:
    """64x32 XOR-plotted framebuffer with a redraw flag."""

    WIDTH: int = DISPLAY_WIDTH
    HEIGHT: int = DISPLAY_HEIGHT

    # Sprites are always one byte (8 pixels) wide.
    SPRITE_WIDTH: int = 8

    def __init__(self) -> None:
        self.pixels: bytearray = bytearray(self.WIDTH * self.HEIGHT)
        self.dirty: bool = False

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def read_pixel(self, x: int, y: int) -> int:
        """Return 1 if the pixel at (*x*, *y*) is lit, else 0.

        Raises:
            IndexError: If the coordinate is off screen.
        """
        if not (0 <= x < self.WIDTH and 0 <= y < self.HEIGHT):
            raise IndexError(f"pixel ({x}, {y}) out of range [0, {self.WIDTH}) x [0, {self.HEIGHT})")
        return self.pixels[y * self.WIDTH + x]

    def rows(self) -> List[bytes]:
        """Return the picture as HEIGHT rows of WIDTH pixel bytes."""
        w = self.WIDTH
        return [bytes(self.pixels[y * w:(y + 1) * w]) for y in range(self.HEIGHT)]

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Turn every pixel off and mark the frame dirty."""
        self.pixels[:] = bytes(len(self.pixels))
        self.dirty = True

    def draw_sprite(self, x: int, y: int, sprite: Iterable[int]) -> bool:
        """XOR-plot an 8-pixel-wide sprite with its top-left corner at (*x*, *y*).

        Every pixel wraps on both axes.  The frame is marked dirty even for
        an empty sprite.

        Args:
            x: Column of the left edge (any int, wrapped modulo 64).
            y: Row of the top edge (any int, wrapped modulo 32).
            sprite: One byte per row, most significant bit leftmost.

        Returns:
            ``True`` if any previously lit pixel was turned off.
        """
        w = self.WIDTH
        h = self.HEIGHT
        pixels = self.pixels
        collision = False

        for row, bits in enumerate(sprite):
            py = (y + row) % h
            base = py * w
            for col in range(self.SPRITE_WIDTH):
                if (bits >> (7 - col)) & 1:
                    index = base + (x + col) % w
                    if pixels[index]:
                        collision = True
                    pixels[index] ^= 1

        self.dirty = True
        return collision

    # ------------------------------------------------------------------
    # Host hand-off
    # ------------------------------------------------------------------

    def consume(self) -> bytes:
        """Return a snapshot of the current pixels and clear the dirty flag."""
        self.dirty = False
        return bytes(self.pixels)

    def reset(self) -> None:
        """Blank the display without requesting a redraw."""
        self.pixels[:] = bytes(len(self.pixels))
        self.dirty = False

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return "\n".join(
            "".join("#" if p else "." for p in row) for row in self.rows()
        )

    def __repr__(self) -> str:
        return (
            f"FrameBuffer("
            f"width={self.WIDTH}, "
            f"height={self.HEIGHT}, "
            f"lit={sum(self.pixels)}, "
            f"dirty={self.dirty})"
        )
