"""
Keypad -- the 16-key hexadecimal input device of the CHIP-8.

Key states are written only by the host (through the machine's
``set_key``) and read by the interpreter.  Keys are numbered 0x0-0xF:

::

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F
"""

from __future__ import annotations

from typing import List, Optional

from chip8emu.core.types import NUM_KEYS


class Keypad:
    """Sixteen independent boolean key states."""

    def __init__(self) -> None:
        self._keys: List[bool] = [False] * NUM_KEYS

    @staticmethod
    def _check_index(index: int) -> None:
        if not isinstance(index, int) or not 0 <= index < NUM_KEYS:
            raise IndexError(f"key index {index!r} out of range [0, {NUM_KEYS})")

    def set_key(self, index: int, pressed: bool) -> None:
        """Record a press (``True``) or release (``False``) of key *index*.

        Raises:
            IndexError: If *index* is not an int in 0..15.
        """
        self._check_index(index)
        self._keys[index] = bool(pressed)

    def is_key_down(self, index: int) -> bool:
        """Return ``True`` while key *index* is held.

        Raises:
            IndexError: If *index* is not an int in 0..15.
        """
        self._check_index(index)
        return self._keys[index]

    def first_pressed(self) -> Optional[int]:
        """Return the lowest-numbered key currently held, or ``None``."""
        for index, down in enumerate(self._keys):
            if down:
                return index
        return None

    def pressed_keys(self) -> List[int]:
        return [i for i, down in enumerate(self._keys) if down]

    def clear_all(self) -> None:
        """Release every key."""
        for i in range(NUM_KEYS):
            self._keys[i] = False

    def __repr__(self) -> str:
        held = ",".join(f"{k:X}" for k in self.pressed_keys())
        return f"Keypad(held=[{held}])"
