"""Tests for the pygame keyboard, audio and window adapters (no display needed)."""

import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from chip8emu.core.errors import RomLoadError
from chip8emu.core.machine import Chip8Machine
from chip8emu.platform.audio import ToneDevice, square_wave
from chip8emu.platform.input_handler import KEY_MAP, InputHandler
from chip8emu.platform.window import Window


def _key(event_type, key):
    return pygame.event.Event(event_type, key=key)


class TestInputHandler:

    @pytest.fixture
    def handler(self):
        return InputHandler(Chip8Machine())

    def test_key_map_covers_all_sixteen_keys(self):
        assert sorted(KEY_MAP.values()) == list(range(16))

    def test_key_down_and_up(self, handler):
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_q))
        assert handler.machine.is_key_down(0x4) is True
        handler.handle_event(_key(pygame.KEYUP, pygame.K_q))
        assert handler.machine.is_key_down(0x4) is False

    def test_x_is_key_zero(self, handler):
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_x))
        assert handler.machine.is_key_down(0x0) is True

    def test_unmapped_key_ignored(self, handler):
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_m))
        assert handler.machine.keypad.pressed_keys() == []

    def test_escape_and_close_request_quit(self, handler):
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_ESCAPE))
        assert handler.quit_requested is True

        other = InputHandler(Chip8Machine())
        other.handle_event(pygame.event.Event(pygame.QUIT))
        assert other.quit_requested is True

    def test_pause_and_reset_are_one_shot(self, handler):
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_p))
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_F1))
        assert handler.take_pause_toggle() is True
        assert handler.take_pause_toggle() is False
        assert handler.take_reset_request() is True
        assert handler.take_reset_request() is False

    def test_focus_loss_releases_keys(self, handler):
        handler.handle_event(_key(pygame.KEYDOWN, pygame.K_v))
        handler.handle_event(pygame.event.Event(pygame.WINDOWFOCUSLOST))
        assert handler.machine.is_key_down(0xF) is False


class TestAudio:

    def test_square_wave_shape(self):
        wave = square_wave(frequency=1.0, seconds=1.0, sample_rate=100, amplitude=100)
        assert wave.dtype == np.int16
        assert len(wave) == 100
        assert set(np.unique(wave)) == {-100, 100}
        # 1 Hz at 100 samples per second: 50 samples per half period.
        assert (wave[:50] == 100).all()
        assert (wave[50:100] == -100).all()

    def test_disabled_device_counts_beeps(self):
        device = ToneDevice(enabled=False)
        device.play_tone()
        device.play_tone()
        assert device.enabled is False
        assert device.beeps == 2
        device.shutdown()

    def test_machine_tone_drives_device(self):
        device = ToneDevice(enabled=False)
        machine = Chip8Machine(on_tone=device.play_tone)
        machine.load_program(bytes([0x60, 0x01, 0xF0, 0x18, 0x12, 0x04]))
        for _ in range(4):
            machine.step()
        assert device.beeps == 1


class TestWindow:

    def test_missing_rom_leaves_pygame_uninitialised(self, tmp_path):
        pygame.quit()
        with pytest.raises(FileNotFoundError):
            Window(str(tmp_path / "missing.ch8"), enable_audio=False)
        assert pygame.get_init() is False

    def test_bad_rom_leaves_pygame_uninitialised(self, rom_file):
        pygame.quit()
        with pytest.raises(RomLoadError):
            Window(rom_file(raw=b""), enable_audio=False)
        assert pygame.get_init() is False
