"""Tests for building machines from ROM files."""

import random

import pytest

from chip8emu.core.errors import RomLoadError
from chip8emu.shell.services.machine_factory import MachineFactory


class TestCreate:

    def test_program_is_loaded(self, rom_file):
        machine = MachineFactory.create(rom_file(0x600A, 0x7005))
        assert machine.read_memory(0x200, 4) == b"\x60\x0A\x70\x05"
        assert machine.pc == 0x200

    def test_machine_options_are_forwarded(self, rom_file):
        tones = []
        machine = MachineFactory.create(
            rom_file(0x1200),
            tick_timers_on_step=False,
            rng=random.Random(7),
            on_tone=lambda: tones.append(1),
        )
        assert machine.tick_timers_on_step is False
        machine.timers.set_sound(1)
        machine.run_frame(5)
        assert tones == [1]

    def test_bad_rom_raises(self, rom_file):
        with pytest.raises(RomLoadError):
            MachineFactory.create(rom_file(raw=b""))


class TestReload:

    def test_reload_restarts_program(self, rom_file):
        path = rom_file(0x600A, 0x1202)
        machine = MachineFactory.create(path)
        machine.step()
        machine.step()
        machine.set_key(3, True)
        MachineFactory.reload(machine, path)
        assert machine.pc == 0x200
        assert machine.v[0] == 0
        assert machine.is_key_down(3) is False
        assert machine.read_memory(0x200, 2) == b"\x60\x0A"

    def test_failed_reload_leaves_machine_alone(self, rom_file, tmp_path):
        machine = MachineFactory.create(rom_file(0x600A))
        machine.step()
        with pytest.raises(FileNotFoundError):
            MachineFactory.reload(machine, str(tmp_path / "gone.ch8"))
        assert machine.v[0] == 0x0A
        assert machine.pc == 0x202


class TestDescribe:

    def test_describe(self, rom_file):
        info = MachineFactory.describe(rom_file(0x00E0, 0x1200, name="demo.ch8"))
        assert info == {
            "title": "demo",
            "rom_size": "4",
            "free_bytes": "3580",
            "end_address": "$203",
            "entry": "CLS",
        }
