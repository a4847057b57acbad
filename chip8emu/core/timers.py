"""
Delay and sound timers.

Both are 8-bit counters that count down once per tick while non-zero.  The
sound timer reaching zero by a decrement is the *tone edge*: the host plays
one beep for each edge.  Loading zero directly is not an edge.
"""

from __future__ import annotations


class Timers:
    """The CHIP-8 delay and sound timers."""

    def __init__(self) -> None:
        self.delay: int = 0
        self.sound: int = 0

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def set_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    def tick(self) -> bool:
        """Advance both timers by one tick.

        Returns:
            ``True`` if the sound timer has just transitioned to zero.
        """
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1
            return self.sound == 0
        return False

    def __repr__(self) -> str:
        return f"Timers(delay={self.delay}, sound={self.sound})"
