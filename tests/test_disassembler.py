"""Tests for the CHIP-8 disassembler."""

import pytest

from chip8emu.core.disassembler import disassemble, disassemble_program


class TestDisassemble:

    @pytest.mark.parametrize(
        "opcode, text",
        [
            (0x00E0, "CLS"),
            (0x00EE, "RET"),
            (0x1ABC, "JP 0xABC"),
            (0x2300, "CALL 0x300"),
            (0x3A42, "SE VA, 0x42"),
            (0x4B00, "SNE VB, 0x00"),
            (0x5120, "SE V1, V2"),
            (0x600A, "LD V0, 0x0A"),
            (0x7C01, "ADD VC, 0x01"),
            (0x8124, "ADD V1, V2"),
            (0x8127, "SUBN V1, V2"),
            (0x812E, "SHL V1, V2"),
            (0x9340, "SNE V3, V4"),
            (0xA2F0, "LD I, 0x2F0"),
            (0xB210, "JP V0, 0x210"),
            (0xC5FF, "RND V5, 0xFF"),
            (0xD125, "DRW V1, V2, 5"),
            (0xE39E, "SKP V3"),
            (0xE3A1, "SKNP V3"),
            (0xF40A, "LD V4, K"),
            (0xF629, "LD F, V6"),
            (0xF755, "LD [I], V7"),
            (0xF865, "LD V8, [I]"),
        ],
    )
    def test_mnemonics(self, opcode, text):
        assert disassemble(opcode) == text

    @pytest.mark.parametrize("opcode", [0x0000, 0x0123, 0x5121, 0x8008, 0xE000, 0xF0FF])
    def test_undefined_words_are_data(self, opcode):
        assert disassemble(opcode) == f"DW 0x{opcode:04X}"


class TestDisassembleProgram:

    def test_addresses_start_at_origin(self):
        listing = list(disassemble_program(b"\x00\xE0\x12\x00"))
        assert listing == [(0x200, 0x00E0, "CLS"), (0x202, 0x1200, "JP 0x200")]

    def test_odd_trailing_byte_is_padded(self):
        listing = list(disassemble_program(b"\x60\x0A\x70", origin=0x300))
        assert listing[-1] == (0x302, 0x7000, "ADD V0, 0x00")
