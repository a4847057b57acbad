"""
Core constants and type definitions for chip8emu.

Machine geometry, the built-in hexadecimal font, and the fault records the
interpreter hands to its host.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


# ---------------------------------------------------------------------------
# Machine geometry
# ---------------------------------------------------------------------------

MEMORY_SIZE: int = 0x1000        # 4096 bytes
ADDRESS_MASK: int = 0xFFF        # every address wraps to 12 bits
PROGRAM_START: int = 0x200
MAX_PROGRAM_SIZE: int = MEMORY_SIZE - PROGRAM_START   # 3584 bytes

NUM_REGISTERS: int = 16
FLAG_REGISTER: int = 0xF
STACK_DEPTH: int = 16
NUM_KEYS: int = 16

DISPLAY_WIDTH: int = 64
DISPLAY_HEIGHT: int = 32

TIMER_HZ: int = 60
# One instruction every 2 ms.
DEFAULT_CPU_HZ: int = 500


# ---------------------------------------------------------------------------
# Font table: 16 glyphs (0-F), 5 bytes each, stored at address 0x000
# ---------------------------------------------------------------------------

FONT_START: int = 0x000
FONT_GLYPH_SIZE: int = 5

# fmt: off
FONT_SET: bytes = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
# fmt: on


# ---------------------------------------------------------------------------
# Faults
# ---------------------------------------------------------------------------

class FaultKind(IntEnum):
    UNKNOWN_OPCODE = 1
    STACK_UNDERFLOW = 2
    STACK_OVERFLOW = 3

    @property
    def fatal(self) -> bool:
        """Stack faults halt the machine; decode faults do not."""
        return self != FaultKind.UNKNOWN_OPCODE


@dataclass(frozen=True)
class Fault:
    """One interpreter fault, as delivered to the host.

    Attributes:
        kind: What went wrong.
        address: Address the offending instruction was fetched from.
        opcode: The 16-bit instruction word.
        cycle: Value of the machine's cycle counter when it happened.
    """

    kind: FaultKind
    address: int
    opcode: int
    cycle: int

    def __str__(self) -> str:
        return (
            f"{self.kind.name} at ${self.address:03X} "
            f"(opcode {self.opcode:04X}, cycle {self.cycle})"
        )
