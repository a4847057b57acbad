"""
Frame renderer for chip8emu.
Converts the machine's 64x32 one-byte-per-pixel framebuffer into an RGB
pygame Surface.

Each pixel byte is 0 (off) or 1 (lit); a two-entry numpy colour table maps
the whole frame to RGB in one indexing operation, and the result is blitted
with :mod:`pygame.surfarray`.  Scaling to the window size is left to the
caller.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
import pygame

from chip8emu.core.frame_buffer import FrameBuffer

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

DEFAULT_OFF_COLOUR: RGB = (0, 0, 0)
DEFAULT_ON_COLOUR: RGB = (255, 255, 255)


def frame_to_rgb(
    pixels: bytes,
    lut: np.ndarray,
    width: int = FrameBuffer.WIDTH,
    height: int = FrameBuffer.HEIGHT,
) -> np.ndarray:
    """Map a pixel snapshot to an ``(height, width, 3)`` uint8 RGB array.

    Any non-zero pixel byte counts as lit.
    """
    frame = np.frombuffer(pixels, dtype=np.uint8).reshape((height, width))
    return lut[np.minimum(frame, 1)]


class FrameRenderer:
    """Turn framebuffer snapshots into a :class:`pygame.Surface`.

    Parameters
    ----------
    off_colour, on_colour:
        RGB triples for unlit and lit pixels.
    """

    def __init__(
        self,
        off_colour: RGB = DEFAULT_OFF_COLOUR,
        on_colour: RGB = DEFAULT_ON_COLOUR,
    ) -> None:
        self._width: int = FrameBuffer.WIDTH
        self._height: int = FrameBuffer.HEIGHT

        self._lut: np.ndarray = np.zeros((2, 3), dtype=np.uint8)
        self.set_colours(off_colour, on_colour)

        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))
        self._last_frame: Optional[bytes] = None

        logger.info("FrameRenderer: %dx%d", self._width, self._height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def set_colours(self, off_colour: RGB, on_colour: RGB) -> None:
        """Replace the two display colours."""
        self._lut[0] = off_colour
        self._lut[1] = on_colour

    def render(self, pixels: bytes) -> pygame.Surface:
        """Draw a framebuffer snapshot and return the surface.

        The same :class:`pygame.Surface` object is reused every frame.

        Raises:
            ValueError: If *pixels* is not exactly 64 * 32 bytes.
        """
        if len(pixels) != self._width * self._height:
            raise ValueError(
                f"frame must have {self._width * self._height} pixels, got {len(pixels)}"
            )
        rgb = frame_to_rgb(pixels, self._lut, self._width, self._height)

        # pygame surfarray expects (W, H, 3) -- transpose width and height.
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        self._last_frame = pixels
        return self._surface

    def redraw(self) -> pygame.Surface:
        """Re-render the last frame (after a colour change, for example)."""
        if self._last_frame is not None:
            return self.render(self._last_frame)
        return self._surface
