"""
ROM loading service for chip8emu.

CHIP-8 ROMs are raw instruction bytes with no header, checksum or magic
number; they are loaded verbatim at 0x200.  This service reads a ROM from
disk and checks that it can fit, so the machine is only ever handed a
program it will accept.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Tuple

from chip8emu.core.disassembler import disassemble_program
from chip8emu.core.errors import RomLoadError
from chip8emu.core.types import MAX_PROGRAM_SIZE, PROGRAM_START

logger = logging.getLogger(__name__)

# Number of leading instructions shown by :meth:`RomBytesService.describe`.
_PREVIEW_INSTRUCTIONS: int = 8


@dataclass(frozen=True)
class RomInfo:
    """Summary of a ROM file."""

    title: str
    size: int
    free_bytes: int
    end_address: int
    preview: Tuple[Tuple[int, int, str], ...]


class RomBytesService:
    """Static utility for loading CHIP-8 ROM files."""

    # -- reading -----------------------------------------------------------

    @staticmethod
    def read(path: str) -> bytes:
        """Read and validate a ROM file.

        Returns:
            The ROM bytes.

        Raises:
            FileNotFoundError: If *path* does not exist.
            OSError: On general I/O failure.
            RomLoadError: If the file is empty or larger than 3584 bytes.
        """
        with open(path, "rb") as fh:
            data = fh.read()

        RomBytesService.validate(data, os.path.basename(path))
        logger.info("Read ROM %s (%d bytes)", path, len(data))
        return data

    @staticmethod
    def validate(data: bytes, name: str = "ROM") -> None:
        """Raise :class:`RomLoadError` unless *data* is a loadable program."""
        if not data:
            raise RomLoadError(f"{name} is empty")
        if len(data) > MAX_PROGRAM_SIZE:
            raise RomLoadError(
                f"{name} is {len(data)} bytes; the largest CHIP-8 program is "
                f"{MAX_PROGRAM_SIZE} bytes"
            )

    # -- metadata ----------------------------------------------------------

    @staticmethod
    def describe(path: str) -> RomInfo:
        """Read *path* and return a :class:`RomInfo` for it."""
        data = RomBytesService.read(path)
        preview = tuple(
            disassemble_program(data[: _PREVIEW_INSTRUCTIONS * 2], PROGRAM_START)
        )
        return RomInfo(
            title=os.path.splitext(os.path.basename(path))[0],
            size=len(data),
            free_bytes=MAX_PROGRAM_SIZE - len(data),
            end_address=PROGRAM_START + len(data) - 1,
            preview=preview,
        )

    @staticmethod
    def listing(path: str) -> List[str]:
        """Return a full disassembly of the ROM, one line per word."""
        data = RomBytesService.read(path)
        return [
            f"${addr:03X}  {opcode:04X}  {text}"
            for addr, opcode, text in disassemble_program(data, PROGRAM_START)
        ]
