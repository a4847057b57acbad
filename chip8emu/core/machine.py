"""
Chip8Machine -- one complete emulated CHIP-8 system.

The machine owns every piece of interpreter state and is the only object a
host talks to:

* **Memory** -- 4 KB RAM with the font at 0x000 and the program at 0x200.
* **Chip8CPU** -- registers, stack and instruction dispatch.
* **FrameBuffer** -- 64x32 display with a dirty flag.
* **Keypad** -- 16 host-driven key states.
* **Timers** -- delay and sound timers.

Host entry points: :meth:`reset`, :meth:`load_program`, :meth:`step`,
:meth:`set_key`, :meth:`consume_dirty_frame`, and for hosts that keep the
60 Hz timer cadence separate from instruction throughput,
:meth:`tick_timers` and :meth:`run_frame`.

Core-to-host notifications are plain callbacks:

* ``on_tone()`` -- once per sound-timer transition to zero.
* ``on_fault(fault)`` -- for every :class:`~chip8emu.core.types.Fault`.

Fault policy
------------
An unknown opcode is reported and execution continues.  A stack underflow
(``00EE`` with nothing to return to) or overflow (``2nnn`` with 16 return
addresses already saved) is reported and halts the machine: :meth:`step`
then does nothing and returns ``False`` until :meth:`reset` is called.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence, Tuple, Union

from chip8emu.core.cpu import Chip8CPU
from chip8emu.core.devices import Memory
from chip8emu.core.disassembler import disassemble
from chip8emu.core.errors import RomLoadError
from chip8emu.core.frame_buffer import FrameBuffer
from chip8emu.core.input_state import Keypad
from chip8emu.core.timers import Timers
from chip8emu.core.types import MAX_PROGRAM_SIZE, PROGRAM_START, Fault, FaultKind

logger = logging.getLogger(__name__)

# Recorded faults beyond this many are dropped oldest-first; a ROM spinning
# on a bad word would otherwise grow the list without bound.
_FAULT_HISTORY: int = 256


class Chip8Machine:
    """A CHIP-8 virtual machine.

    Parameters
    ----------
    tick_timers_on_step:
        When ``True`` (the default) every :meth:`step` also ticks the delay
        and sound timers.  When ``False`` the host ticks them itself at
        60 Hz through :meth:`tick_timers` or :meth:`run_frame`.
    rng:
        Source of random bytes for ``Cxnn``.  Pass a seeded
        :class:`random.Random` for reproducible runs.
    on_tone:
        Called with no arguments on every sound-timer edge to zero.
    on_fault:
        Called with the :class:`Fault` for every interpreter fault.
    """

    def __init__(
        self,
        *,
        tick_timers_on_step: bool = True,
        rng: Optional[random.Random] = None,
        on_tone: Optional[Callable[[], None]] = None,
        on_fault: Optional[Callable[[Fault], None]] = None,
    ) -> None:
        self.mem: Memory = Memory()
        self.frame_buffer: FrameBuffer = FrameBuffer()
        self.keypad: Keypad = Keypad()
        self.timers: Timers = Timers()
        self.rng: random.Random = rng if rng is not None else random.Random()

        self.tick_timers_on_step: bool = tick_timers_on_step
        self.on_tone: Optional[Callable[[], None]] = on_tone
        self.on_fault: Optional[Callable[[Fault], None]] = on_fault

        # Machine run-state.
        self.machine_halt: bool = False
        self.frame_number: int = 0
        self.tone_count: int = 0
        self._faults: Deque[Fault] = deque(maxlen=_FAULT_HISTORY)

        self.cpu: Chip8CPU = Chip8CPU(self)
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Return the machine to its power-on state.

        Memory is cleared and the font rewritten, registers, stack, timers,
        display and keypad are zeroed, PC is set to 0x200 and any halt is
        lifted.  A previously loaded program is gone afterwards.
        """
        self.mem.reset()
        self.cpu.reset()
        self.frame_buffer.reset()
        self.keypad.clear_all()
        self.timers.reset()
        self.machine_halt = False
        self.frame_number = 0
        self.tone_count = 0
        self._faults.clear()

    def load_program(self, data: Union[bytes, bytearray, Sequence[int]]) -> None:
        """Copy a program into memory at 0x200.

        The data is validated in full before the first byte is written, so
        a rejected program leaves memory untouched.

        Raises:
            RomLoadError: If *data* is not a sequence of byte values or is
                longer than 3584 bytes.
        """
        if isinstance(data, (int, str)):
            raise RomLoadError(f"program data must be a byte sequence, got {type(data).__name__}")
        try:
            program = bytes(data)
        except (TypeError, ValueError) as exc:
            raise RomLoadError(f"program data is not a byte sequence: {exc}") from exc

        if len(program) > MAX_PROGRAM_SIZE:
            raise RomLoadError(
                f"program is {len(program)} bytes; at most {MAX_PROGRAM_SIZE} "
                f"fit between ${PROGRAM_START:03X} and the end of memory"
            )

        self.mem.write_block(PROGRAM_START, program)
        logger.info("Loaded %d-byte program at $%03X", len(program), PROGRAM_START)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def step(self) -> bool:
        """Run one fetch-decode-execute cycle, then (in coupled timing mode)
        tick the timers.

        Returns:
            ``True`` if an instruction ran, ``False`` if the machine is
            halted by a stack fault.
        """
        if self.machine_halt:
            return False
        self.cpu.execute()
        if self.tick_timers_on_step:
            self.tick_timers()
        return True

    def tick_timers(self) -> None:
        """Advance the delay and sound timers by one 60 Hz tick."""
        if self.timers.tick():
            self.tone_count += 1
            if self.on_tone is not None:
                self.on_tone()

    def run_frame(self, cycles: int) -> int:
        """Advance the emulation by one 60 Hz frame.

        Runs up to *cycles* instructions (stopping early if the machine
        halts) and, in decoupled timing mode, ticks the timers once.

        Returns:
            The number of instructions executed.
        """
        if self.machine_halt:
            return 0
        executed = 0
        for _ in range(cycles):
            if not self.step():
                break
            executed += 1
        if not self.tick_timers_on_step:
            self.tick_timers()
        self.frame_number += 1
        return executed

    # ------------------------------------------------------------------
    # Faults
    # ------------------------------------------------------------------

    def report_fault(self, kind: FaultKind) -> Fault:
        """Record a fault for the instruction currently executing.

        Called by the CPU.  Stack faults also halt the machine.
        """
        fault = Fault(
            kind=kind,
            address=self.cpu.instruction_address,
            opcode=self.cpu.opcode,
            cycle=self.cpu.clock,
        )
        self._faults.append(fault)

        if kind.fatal:
            self.machine_halt = True
            logger.error("Interpreter halted: %s [%s]", fault, disassemble(fault.opcode))
        else:
            logger.warning("Unknown opcode: %s", fault)

        if self.on_fault is not None:
            self.on_fault(fault)
        return fault

    @property
    def faults(self) -> List[Fault]:
        """Faults recorded since the last reset, oldest first."""
        return list(self._faults)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_key(self, index: int, pressed: bool) -> None:
        """Press or release keypad key *index* (0-15).

        Raises:
            IndexError: If *index* is out of range.
        """
        self.keypad.set_key(index, pressed)

    def is_key_down(self, index: int) -> bool:
        """Return whether keypad key *index* (0-15) is held.

        Raises:
            IndexError: If *index* is out of range.
        """
        return self.keypad.is_key_down(index)

    def release_all_keys(self) -> None:
        """Release every keypad key."""
        self.keypad.clear_all()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def dirty(self) -> bool:
        """``True`` if the display changed since the last consumed frame."""
        return self.frame_buffer.dirty

    def consume_dirty_frame(self) -> bytes:
        """Return the current 64x32 pixels (row-major, 1 = lit) and clear
        the dirty flag."""
        return self.frame_buffer.consume()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def halted(self) -> bool:
        return self.machine_halt

    @property
    def pc(self) -> int:
        return self.cpu.pc

    @property
    def i(self) -> int:
        return self.cpu.i

    @property
    def v(self) -> bytes:
        """A copy of registers V0-VF."""
        return bytes(self.cpu.v)

    @property
    def stack(self) -> Tuple[int, ...]:
        """Saved return addresses, bottom first."""
        return tuple(self.cpu.stack)

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @property
    def sound_timer(self) -> int:
        return self.timers.sound

    @property
    def waiting_for_key(self) -> bool:
        return self.cpu.waiting_for_key

    @property
    def cycle_count(self) -> int:
        return self.cpu.clock

    def read_memory(self, addr: int, length: int = 1) -> bytes:
        """Return *length* bytes of memory starting at *addr* (wrapping)."""
        return self.mem.read_block(addr, length)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"pc=${self.cpu.pc:03X}, "
            f"i=${self.cpu.i:03X}, "
            f"cycles={self.cpu.clock}, "
            f"halted={self.machine_halt})"
        )
