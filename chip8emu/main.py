"""
chip8emu -- CHIP-8 interpreter.

Command-line entry point.  Parses arguments, loads a ROM, and either
launches the pygame window or runs one of the headless diagnostic modes.

Usage examples::

    # Run a ROM
    chip8emu roms/pong.ch8

    # Bigger window, faster CPU
    chip8emu roms/pong.ch8 --scale 15 --cpu-hz 700

    # Timers tick on every instruction
    chip8emu roms/pong.ch8 --legacy-timing

    # Show ROM metadata and a disassembly without launching
    chip8emu roms/pong.ch8 --info

    # Run 1000 instructions headless and dump the machine state
    chip8emu roms/pong.ch8 --debug 1000
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from chip8emu.core.errors import RomLoadError
from chip8emu.core.machine import Chip8Machine
from chip8emu.core.types import DEFAULT_CPU_HZ, TIMER_HZ
from chip8emu.shell.services.machine_factory import MachineFactory
from chip8emu.shell.services.rom_bytes_service import RomBytesService


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chip8emu",
        description="CHIP-8 interpreter.  Load a ROM file and play it in a pygame window.",
    )

    parser.add_argument(
        "rom",
        help="Path to the ROM file (raw CHIP-8 bytes, loaded at 0x200)",
    )

    # Display
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=10,
        help="Display scale factor (1-20).  Default: 10.",
    )

    # Timing
    parser.add_argument(
        "--cpu-hz",
        type=int,
        default=DEFAULT_CPU_HZ,
        metavar="HZ",
        help=f"Instructions per second.  Default: {DEFAULT_CPU_HZ}.",
    )
    parser.add_argument(
        "--legacy-timing",
        action="store_true",
        default=False,
        help=f"Tick the timers on every instruction instead of at {TIMER_HZ} Hz.",
    )

    # Audio
    parser.add_argument(
        "--no-audio",
        action="store_true",
        default=False,
        help="Disable the beep.",
    )
    parser.add_argument(
        "--beep",
        default=None,
        metavar="WAV",
        help="WAV file to play as the beep instead of the built-in tone.",
    )

    # Debugging / info
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print ROM metadata and a disassembly, then exit.",
    )
    parser.add_argument(
        "--debug",
        type=int,
        default=None,
        metavar="STEPS",
        help="Run STEPS instructions without a window, print the machine state and exit.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG instruction trace).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Info mode
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> None:
    """Print human-readable metadata and a disassembly for a ROM."""
    info = MachineFactory.describe(rom_path)

    print("chip8emu ROM Information")
    print("=" * 40)
    for key, value in info.items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    for line in RomBytesService.listing(rom_path):
        print(f"  {line}")


# ---------------------------------------------------------------------------
# Debug mode
# ---------------------------------------------------------------------------

def _run_debug(machine: Chip8Machine, steps: int) -> int:
    """Run *steps* instructions headless and print the resulting state."""
    print("=" * 60)
    print("chip8emu Debug Diagnostics")
    print("=" * 60)

    executed = 0
    for _ in range(steps):
        if not machine.step():
            break
        executed += 1

    print(f"Machine: {machine}")
    print(f"Executed: {executed}/{steps} instructions")
    print(f"PC=${machine.pc:03X}  I=${machine.i:03X}  "
          f"DT={machine.delay_timer}  ST={machine.sound_timer}")
    regs = machine.v
    print("  " + " ".join(f"V{r:X}={regs[r]:02X}" for r in range(8)))
    print("  " + " ".join(f"V{r:X}={regs[r]:02X}" for r in range(8, 16)))
    print(f"Stack: {[f'${a:03X}' for a in machine.stack]}")
    print(f"Waiting for key: {machine.waiting_for_key}")
    print(f"Beeps: {machine.tone_count}")
    for fault in machine.faults:
        print(f"Fault: {fault}")

    print("\n" + str(machine.frame_buffer))
    print("=" * 60)
    return 1 if machine.halted else 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 on a ROM or runtime error.  A missing
        ROM argument makes argparse exit with status 2.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    logger = logging.getLogger("chip8emu.main")

    # Validate the ROM path early.
    rom_path: str = os.path.expanduser(args.rom)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    try:
        if args.info:
            _print_rom_info(rom_path)
            return 0

        if args.debug is not None:
            # No frame loop here, so the timers run per instruction.
            machine = MachineFactory.create(rom_path, tick_timers_on_step=True)
            return _run_debug(machine, args.debug)
    except (OSError, RomLoadError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Launch the window.  pygame is only imported when a window is needed.
    from chip8emu.platform.window import Window

    logger.info("Starting emulation ...")
    try:
        window = Window(
            rom_path,
            scale=args.scale,
            cpu_hz=args.cpu_hz,
            legacy_timing=args.legacy_timing,
            enable_audio=not args.no_audio,
            beep_path=args.beep,
        )
        window.run()
    except (OSError, RomLoadError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.exception("Fatal error during emulation")
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
