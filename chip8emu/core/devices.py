"""
Memory device for chip8emu.

The whole CHIP-8 address space is one 4 KB RAM.  The address is masked with
0xFFF on every access, so the interpreter can never touch anything outside
the 4096-byte region no matter what a ROM computes.

Layout after reset:

=============  ==========================================
Range          Contents
=============  ==========================================
0x000-0x04F    Hexadecimal font (16 glyphs x 5 bytes)
0x050-0x1FF    Unused (zero)
0x200-0xFFF    Program
=============  ==========================================
"""

from __future__ import annotations

from typing import Iterable

from chip8emu.core.types import ADDRESS_MASK, FONT_SET, FONT_START, MEMORY_SIZE


class Memory:
    """4096-byte RAM with 12-bit address wrap-around."""

    SIZE: int = MEMORY_SIZE

    def __init__(self) -> None:
        self._data: bytearray = bytearray(self.SIZE)

    def reset(self) -> None:
        """Clear the RAM and write the font table at address 0."""
        self._data[:] = bytes(self.SIZE)
        self._data[FONT_START:FONT_START + len(FONT_SET)] = FONT_SET

    def __getitem__(self, addr: int) -> int:
        return self._data[addr & ADDRESS_MASK]

    def __setitem__(self, addr: int, value: int) -> None:
        self._data[addr & ADDRESS_MASK] = value & 0xFF

    def __len__(self) -> int:
        return self.SIZE

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit word; the second byte wraps like the first."""
        return (self[addr] << 8) | self[addr + 1]

    def read_block(self, addr: int, length: int) -> bytes:
        """Return *length* bytes starting at *addr*, wrapping at 0xFFF."""
        return bytes(self[addr + i] for i in range(length))

    def write_block(self, addr: int, data: Iterable[int]) -> None:
        """Copy *data* into memory starting at *addr*, wrapping at 0xFFF."""
        for offset, value in enumerate(data):
            self[addr + offset] = value

    def __repr__(self) -> str:
        return f"Memory(size={self.SIZE})"
