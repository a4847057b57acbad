"""Tests for the 16-key keypad."""

import pytest

from chip8emu.core.input_state import Keypad


class TestKeypad:

    @pytest.fixture
    def keypad(self):
        return Keypad()

    def test_all_keys_start_released(self, keypad):
        assert all(not keypad.is_key_down(k) for k in range(16))
        assert keypad.first_pressed() is None

    def test_press_and_release(self, keypad):
        keypad.set_key(0xA, True)
        assert keypad.is_key_down(0xA) is True
        keypad.set_key(0xA, False)
        assert keypad.is_key_down(0xA) is False

    def test_first_pressed_is_lowest(self, keypad):
        keypad.set_key(0xE, True)
        keypad.set_key(0x2, True)
        assert keypad.first_pressed() == 0x2
        assert keypad.pressed_keys() == [0x2, 0xE]

    def test_clear_all(self, keypad):
        for k in (1, 5, 9):
            keypad.set_key(k, True)
        keypad.clear_all()
        assert keypad.pressed_keys() == []

    @pytest.mark.parametrize("index", [-1, 16, "3", 2.0])
    def test_bad_index(self, keypad, index):
        with pytest.raises(IndexError):
            keypad.set_key(index, True)

    def test_repr_lists_held_keys(self, keypad):
        keypad.set_key(0xB, True)
        assert repr(keypad) == "Keypad(held=[B])"
