"""chip8emu: a CHIP-8 interpreter with a pygame front end.

Packages:
    core: the virtual machine (memory, CPU, display, keypad, timers)
    shell: ROM loading, machine construction, frame rendering
    platform: pygame window, keyboard and audio
"""

__version__ = "1.0.0"

from chip8emu.core import Chip8Machine, Fault, FaultKind, RomLoadError

__all__ = ["Chip8Machine", "Fault", "FaultKind", "RomLoadError"]
