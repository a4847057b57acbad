"""Shared pytest configuration for the chip8emu test suite."""

import os
import random
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Headless SDL so the pygame-backed modules import and run without a display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from chip8emu.core.machine import Chip8Machine


def assemble(*words: int) -> bytes:
    """Pack 16-bit instruction words into big-endian program bytes."""
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def machine():
    """A machine whose timers only move when a test ticks them."""
    return Chip8Machine(tick_timers_on_step=False, rng=random.Random(1234))


@pytest.fixture
def coupled_machine():
    """A machine that ticks its timers after every instruction."""
    return Chip8Machine(tick_timers_on_step=True, rng=random.Random(1234))


@pytest.fixture
def run():
    """Load *words* into *machine* and execute *steps* instructions."""

    def _run(machine, *words, steps=None):
        machine.load_program(assemble(*words))
        for _ in range(len(words) if steps is None else steps):
            machine.step()
        return machine

    return _run


@pytest.fixture
def rom_file(tmp_path):
    """Write program words to a ``.ch8`` file and return its path."""

    def _write(*words, name="test.ch8", raw=None):
        path = tmp_path / name
        path.write_bytes(raw if raw is not None else assemble(*words))
        return str(path)

    return _write
