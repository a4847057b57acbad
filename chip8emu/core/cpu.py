"""
CHIP-8 interpreter core for chip8emu.

Implements the 35 instructions of the original CHIP-8.  Each instruction is
one big-endian 16-bit word; the high nibble selects a *family* and families
0x0, 0x8, 0xE and 0xF are split further by their low nibble or low byte.

Operand fields are decoded eagerly for every instruction:

=====  ===========  ==========================================
Field  Bits         Usage
=====  ===========  ==========================================
x      8-11         first register
y      4-7          second register
n      0-3          sprite height / 8xyN selector
nn     0-7          8-bit immediate / Ex, Fx selector
nnn    0-11         12-bit address
=====  ===========  ==========================================

Behaviour worth knowing:

* PC is advanced past the instruction *before* it executes, so jumps and
  calls overwrite the advanced value and skips add another 2.
* For the flag-setting ALU instructions (8xy4-8xyE) both operands are read
  first, VF is written, and the result is written to Vx last.  With x = F
  the result therefore overwrites the flag.
* Fx0A waits for a key by stepping PC back over itself; the host keeps
  regaining control between steps and the timers keep running.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List

from chip8emu.core.disassembler import disassemble
from chip8emu.core.types import (
    ADDRESS_MASK,
    FLAG_REGISTER,
    FONT_GLYPH_SIZE,
    FONT_START,
    NUM_REGISTERS,
    PROGRAM_START,
    STACK_DEPTH,
    FaultKind,
)

if TYPE_CHECKING:
    from chip8emu.core.machine import Chip8Machine

logger = logging.getLogger(__name__)


class Chip8CPU:
    """The CHIP-8 processor: registers, stack and instruction dispatch.

    Parameters
    ----------
    machine:
        Back-reference to the owning machine.  The CPU reaches memory via
        ``machine.mem``, the display via ``machine.frame_buffer``, keys via
        ``machine.keypad``, timers via ``machine.timers``, random bytes via
        ``machine.rng`` and reports faults with ``machine.report_fault``.
    """

    def __init__(self, machine: Chip8Machine) -> None:
        self.m = machine

        # Registers
        self.v: bytearray = bytearray(NUM_REGISTERS)
        self.i: int = 0
        self.pc: int = PROGRAM_START
        self.stack: List[int] = []

        # Current instruction and its decoded operand fields
        self.opcode: int = 0
        self.instruction_address: int = PROGRAM_START
        self._x: int = 0
        self._y: int = 0
        self._n: int = 0
        self._nn: int = 0
        self._nnn: int = 0

        # Number of instructions executed since reset
        self.clock: int = 0

        # True while an Fx0A instruction is spinning on an empty keypad
        self.waiting_for_key: bool = False

        self._opcode_table: List[Callable[[], None]] = self._build_opcode_table()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Zero the registers and stack and point PC at the program."""
        self.v[:] = bytes(NUM_REGISTERS)
        self.i = 0
        self.pc = PROGRAM_START
        self.stack.clear()
        self.opcode = 0
        self.instruction_address = PROGRAM_START
        self.clock = 0
        self.waiting_for_key = False

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    def execute(self) -> None:
        """Fetch, decode and execute exactly one instruction."""
        address = self.pc
        opcode = self.m.mem.read_word(address)
        self.pc = (address + 2) & ADDRESS_MASK

        self.instruction_address = address
        self.opcode = opcode
        self._x = (opcode >> 8) & 0xF
        self._y = (opcode >> 4) & 0xF
        self._n = opcode & 0xF
        self._nn = opcode & 0xFF
        self._nnn = opcode & 0xFFF

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%03X  %04X  %s", address, opcode, disassemble(opcode))

        self._opcode_table[opcode >> 12]()
        self.clock += 1

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.pc = (self.pc + 2) & ADDRESS_MASK

    def _set_with_flag(self, result: int, flag: int) -> None:
        """Write the flag to VF, then an ALU result to Vx."""
        self.v[FLAG_REGISTER] = flag
        self.v[self._x] = result & 0xFF

    # ------------------------------------------------------------------
    # Opcode table
    # ------------------------------------------------------------------

    def _build_opcode_table(self) -> List[Callable[[], None]]:
        """Construct the 16-entry family dispatch table.

        Families with sub-operations dispatch again through a dict keyed by
        the selector field; a missing key is a decode fault.
        """
        undefined = self.op_undefined

        table_0: Dict[int, Callable[[], None]] = {
            0x0E0: self.op_00e0,
            0x0EE: self.op_00ee,
        }
        table_8: Dict[int, Callable[[], None]] = {
            0x0: self.op_8xy0,
            0x1: self.op_8xy1,
            0x2: self.op_8xy2,
            0x3: self.op_8xy3,
            0x4: self.op_8xy4,
            0x5: self.op_8xy5,
            0x6: self.op_8xy6,
            0x7: self.op_8xy7,
            0xE: self.op_8xye,
        }
        table_e: Dict[int, Callable[[], None]] = {
            0x9E: self.op_ex9e,
            0xA1: self.op_exa1,
        }
        table_f: Dict[int, Callable[[], None]] = {
            0x07: self.op_fx07,
            0x0A: self.op_fx0a,
            0x15: self.op_fx15,
            0x18: self.op_fx18,
            0x1E: self.op_fx1e,
            0x29: self.op_fx29,
            0x33: self.op_fx33,
            0x55: self.op_fx55,
            0x65: self.op_fx65,
        }

        def family_0() -> None:
            table_0.get(self._nnn, undefined)()

        def family_5() -> None:
            if self._n == 0:
                self.op_5xy0()
            else:
                undefined()

        def family_8() -> None:
            table_8.get(self._n, undefined)()

        def family_9() -> None:
            if self._n == 0:
                self.op_9xy0()
            else:
                undefined()

        def family_e() -> None:
            table_e.get(self._nn, undefined)()

        def family_f() -> None:
            table_f.get(self._nn, undefined)()

        return [
            family_0,      # 0x0
            self.op_1nnn,  # 0x1
            self.op_2nnn,  # 0x2
            self.op_3xnn,  # 0x3
            self.op_4xnn,  # 0x4
            family_5,      # 0x5
            self.op_6xnn,  # 0x6
            self.op_7xnn,  # 0x7
            family_8,      # 0x8
            family_9,      # 0x9
            self.op_annn,  # 0xA
            self.op_bnnn,  # 0xB
            self.op_cxnn,  # 0xC
            self.op_dxyn,  # 0xD
            family_e,      # 0xE
            family_f,      # 0xF
        ]

    def op_undefined(self) -> None:
        """Unrecognised encoding: report it and carry on."""
        self.m.report_fault(FaultKind.UNKNOWN_OPCODE)

    # ================================================================
    # 0x0 -- display clear / return
    # ================================================================

    def op_00e0(self) -> None:
        """CLS"""
        self.m.frame_buffer.clear()

    def op_00ee(self) -> None:
        """RET -- an empty stack halts the machine."""
        if not self.stack:
            self.m.report_fault(FaultKind.STACK_UNDERFLOW)
            return
        self.pc = self.stack.pop()

    # ================================================================
    # 0x1 - 0x2 -- jump / call
    # ================================================================

    def op_1nnn(self) -> None:
        self.pc = self._nnn

    def op_2nnn(self) -> None:
        """CALL -- a full stack halts the machine without jumping."""
        if len(self.stack) >= STACK_DEPTH:
            self.m.report_fault(FaultKind.STACK_OVERFLOW)
            return
        self.stack.append(self.pc)
        self.pc = self._nnn

    # ================================================================
    # 0x3 - 0x5, 0x9 -- conditional skips
    # ================================================================

    def op_3xnn(self) -> None:
        self._skip_if(self.v[self._x] == self._nn)

    def op_4xnn(self) -> None:
        self._skip_if(self.v[self._x] != self._nn)

    def op_5xy0(self) -> None:
        self._skip_if(self.v[self._x] == self.v[self._y])

    def op_9xy0(self) -> None:
        self._skip_if(self.v[self._x] != self.v[self._y])

    # ================================================================
    # 0x6 - 0x7 -- immediates
    # ================================================================

    def op_6xnn(self) -> None:
        self.v[self._x] = self._nn

    def op_7xnn(self) -> None:
        # No carry flag for 7xnn.
        self.v[self._x] = (self.v[self._x] + self._nn) & 0xFF

    # ================================================================
    # 0x8 -- register ALU
    # ================================================================

    def op_8xy0(self) -> None:
        self.v[self._x] = self.v[self._y]

    def op_8xy1(self) -> None:
        self.v[self._x] |= self.v[self._y]

    def op_8xy2(self) -> None:
        self.v[self._x] &= self.v[self._y]

    def op_8xy3(self) -> None:
        self.v[self._x] ^= self.v[self._y]

    def op_8xy4(self) -> None:
        total = self.v[self._x] + self.v[self._y]
        self._set_with_flag(total, 1 if total > 0xFF else 0)

    def op_8xy5(self) -> None:
        vx, vy = self.v[self._x], self.v[self._y]
        self._set_with_flag(vx - vy, 1 if vx >= vy else 0)

    def op_8xy6(self) -> None:
        vx = self.v[self._x]
        self._set_with_flag(vx >> 1, vx & 1)

    def op_8xy7(self) -> None:
        vx, vy = self.v[self._x], self.v[self._y]
        self._set_with_flag(vy - vx, 1 if vy >= vx else 0)

    def op_8xye(self) -> None:
        vx = self.v[self._x]
        self._set_with_flag(vx << 1, (vx >> 7) & 1)

    # ================================================================
    # 0xA - 0xD -- index, computed jump, random, draw
    # ================================================================

    def op_annn(self) -> None:
        self.i = self._nnn

    def op_bnnn(self) -> None:
        self.pc = (self._nnn + self.v[0]) & ADDRESS_MASK

    def op_cxnn(self) -> None:
        self.v[self._x] = self.m.rng.getrandbits(8) & self._nn

    def op_dxyn(self) -> None:
        """DRW Vx, Vy, n -- XOR an n-row sprite from memory[I] at (Vx, Vy)."""
        sprite = self.m.mem.read_block(self.i, self._n)
        collision = self.m.frame_buffer.draw_sprite(
            self.v[self._x], self.v[self._y], sprite
        )
        self.v[FLAG_REGISTER] = 1 if collision else 0

    # ================================================================
    # 0xE -- keypad skips
    # ================================================================

    def op_ex9e(self) -> None:
        self._skip_if(self.m.keypad.is_key_down(self.v[self._x] & 0xF))

    def op_exa1(self) -> None:
        self._skip_if(not self.m.keypad.is_key_down(self.v[self._x] & 0xF))

    # ================================================================
    # 0xF -- timers, key wait, index arithmetic, BCD, block transfer
    # ================================================================

    def op_fx07(self) -> None:
        self.v[self._x] = self.m.timers.delay

    def op_fx0a(self) -> None:
        key = self.m.keypad.first_pressed()
        if key is None:
            self.pc = (self.pc - 2) & ADDRESS_MASK
            self.waiting_for_key = True
            return
        self.v[self._x] = key
        self.waiting_for_key = False

    def op_fx15(self) -> None:
        self.m.timers.set_delay(self.v[self._x])

    def op_fx18(self) -> None:
        self.m.timers.set_sound(self.v[self._x])

    def op_fx1e(self) -> None:
        self.i = (self.i + self.v[self._x]) & ADDRESS_MASK

    def op_fx29(self) -> None:
        # Not masked: 255 * 5 is still inside memory.
        self.i = FONT_START + self.v[self._x] * FONT_GLYPH_SIZE

    def op_fx33(self) -> None:
        value = self.v[self._x]
        mem = self.m.mem
        mem[self.i] = value // 100
        mem[self.i + 1] = (value // 10) % 10
        mem[self.i + 2] = value % 10

    def op_fx55(self) -> None:
        mem = self.m.mem
        for r in range(self._x + 1):
            mem[self.i + r] = self.v[r]
        self.i = (self.i + self._x + 1) & ADDRESS_MASK

    def op_fx65(self) -> None:
        mem = self.m.mem
        for r in range(self._x + 1):
            self.v[r] = mem[self.i + r]
        self.i = (self.i + self._x + 1) & ADDRESS_MASK

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        regs = " ".join(f"V{r:X}={self.v[r]:02X}" for r in range(NUM_REGISTERS))
        return (
            f"Chip8CPU(PC=${self.pc:03X} I=${self.i:03X} SP={len(self.stack)} "
            f"{regs})"
        )
