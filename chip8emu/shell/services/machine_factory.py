"""
Machine creation factory for chip8emu.

Builds a reset machine with a ROM file loaded, ready for the host loop.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("pong.ch8", tick_timers_on_step=False)
"""

from __future__ import annotations

import logging
from typing import Any

from chip8emu.core.machine import Chip8Machine
from chip8emu.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create an emulated CHIP-8 machine from a ROM file."""

    @staticmethod
    def create(rom_path: str, **machine_kwargs: Any) -> Chip8Machine:
        """Build and return a machine with *rom_path* loaded at 0x200.

        Parameters
        ----------
        rom_path:
            Filesystem path to the ROM file.
        **machine_kwargs:
            Passed straight to :class:`Chip8Machine` (``tick_timers_on_step``,
            ``rng``, ``on_tone``, ``on_fault``).

        Raises
        ------
        FileNotFoundError
            If *rom_path* does not exist.
        RomLoadError
            If the ROM is empty or too large.
        """
        logger.info("Loading ROM: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)

        machine = Chip8Machine(**machine_kwargs)
        machine.load_program(rom_bytes)
        logger.info("Machine created: %r", machine)
        return machine

    @staticmethod
    def reload(machine: Chip8Machine, rom_path: str) -> None:
        """Reset *machine* and load *rom_path* into it again.

        The ROM is read before the reset, so an unreadable file leaves the
        running machine alone.
        """
        rom_bytes = RomBytesService.read(rom_path)
        machine.reset()
        machine.load_program(rom_bytes)
        logger.info("Machine reset and reloaded from %s", rom_path)

    @staticmethod
    def describe(rom_path: str) -> dict[str, str]:
        """Return a human-readable description of a ROM file.

        Returns a dict with keys: ``title``, ``rom_size``, ``free_bytes``,
        ``end_address``, ``entry``.
        """
        info = RomBytesService.describe(rom_path)
        entry = info.preview[0][2] if info.preview else ""
        return {
            "title": info.title,
            "rom_size": str(info.size),
            "free_bytes": str(info.free_bytes),
            "end_address": f"${info.end_address:03X}",
            "entry": entry,
        }
