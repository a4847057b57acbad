"""Exception types raised by the chip8emu core and shell."""

from __future__ import annotations


class Chip8Error(Exception):
    """Base class for all chip8emu errors."""


class RomLoadError(Chip8Error, ValueError):
    """Program data cannot be loaded (oversized, empty, or not bytes).

    Raised before any byte reaches memory, so the machine is left exactly
    as it was.
    """
