# chip8emu core
"""
The CHIP-8 virtual machine.

Use :class:`Chip8Machine` as the single entry point; the component classes
are exported for hosts and tests that want to inspect them directly.
"""

from chip8emu.core.cpu import Chip8CPU
from chip8emu.core.devices import Memory
from chip8emu.core.disassembler import disassemble, disassemble_program
from chip8emu.core.errors import Chip8Error, RomLoadError
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.input_state import Keypad
from chip8emu.core.machine import Chip8Machine
from chip8emu.core.timers import Timers
from chip8emu.core.types import Fault, FaultKind

__all__ = [
    "Chip8CPU",
    "Chip8Error",
    "Chip8Machine",
    "Fault",
    "FaultKind",
    "FrameBuffer",
    "Keypad",
    "Memory",
    "RomLoadError",
    "Timers",
    "disassemble",
    "disassemble_program",
]
