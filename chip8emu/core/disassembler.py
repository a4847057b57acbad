"""
CHIP-8 disassembler.

Turns 16-bit instruction words into the conventional Cowgod-style mnemonics
used by most CHIP-8 documentation.  Words that do not decode to one of the
35 instructions are rendered as ``DW 0xNNNN`` (a raw data word).

Example::

    >>> disassemble(0x600A)
    'LD V0, 0x0A'
    >>> list(disassemble_program(b"\\x00\\xE0\\x12\\x00"))
    [(512, 224, 'CLS'), (514, 4608, 'JP 0x200')]
"""

from __future__ import annotations

from typing import Iterator, Tuple

from chip8emu.core.types import PROGRAM_START

_ALU_MNEMONICS: dict[int, str] = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

# Fx.. forms: low byte -> format string taking ``x``.
_F_FORMS: dict[int, str] = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(opcode: int) -> str:
    """Return the mnemonic for a single 16-bit instruction word."""
    opcode &= 0xFFFF
    family = opcode >> 12
    x = (opcode >> 8) & 0xF
    y = (opcode >> 4) & 0xF
    n = opcode & 0xF
    nn = opcode & 0xFF
    nnn = opcode & 0xFFF

    if opcode == 0x00E0:
        return "CLS"
    if opcode == 0x00EE:
        return "RET"
    if family == 0x1:
        return f"JP 0x{nnn:03X}"
    if family == 0x2:
        return f"CALL 0x{nnn:03X}"
    if family == 0x3:
        return f"SE V{x:X}, 0x{nn:02X}"
    if family == 0x4:
        return f"SNE V{x:X}, 0x{nn:02X}"
    if family == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    if family == 0x6:
        return f"LD V{x:X}, 0x{nn:02X}"
    if family == 0x7:
        return f"ADD V{x:X}, 0x{nn:02X}"
    if family == 0x8 and n in _ALU_MNEMONICS:
        return f"{_ALU_MNEMONICS[n]} V{x:X}, V{y:X}"
    if family == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    if family == 0xA:
        return f"LD I, 0x{nnn:03X}"
    if family == 0xB:
        return f"JP V0, 0x{nnn:03X}"
    if family == 0xC:
        return f"RND V{x:X}, 0x{nn:02X}"
    if family == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    if family == 0xE and nn == 0x9E:
        return f"SKP V{x:X}"
    if family == 0xE and nn == 0xA1:
        return f"SKNP V{x:X}"
    if family == 0xF and nn in _F_FORMS:
        return _F_FORMS[nn].format(x=x)
    return f"DW 0x{opcode:04X}"


def disassemble_program(
    data: bytes,
    origin: int = PROGRAM_START,
) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, opcode, mnemonic)`` for each 2-byte word in *data*.

    A trailing odd byte is padded with zero.
    """
    for offset in range(0, len(data), 2):
        hi = data[offset]
        lo = data[offset + 1] if offset + 1 < len(data) else 0
        opcode = (hi << 8) | lo
        yield origin + offset, opcode, disassemble(opcode)
