"""Tests for opcode descriptions."""

import pytest
from chipvm.disassemble import describe, disassemble


@pytest.mark.parametrize("instruction,mnemonic", [
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x1234, "JP"),
    (0x2345, "CALL"),
    (0x3A12, "SE"),
    (0x4A12, "SNE"),
    (0x5AB0, "SE"),
    (0x6A12, "LD"),
    (0x7A12, "ADD"),
    (0x8AB4, "ADD"),
    (0x8AB5, "SUB"),
    (0x8AB7, "SUBN"),
    (0x8ABE, "SHL"),
    (0x9AB0, "SNE"),
    (0xA123, "LD"),
    (0xB123, "JP"),
    (0xCA0F, "RND"),
    (0xDAB5, "DRW"),
    (0xEA9E, "SKP"),
    (0xEAA1, "SKNP"),
    (0xFA33, "BCD"),
    (0xFA1E, "ADD"),
])
def test_known_mnemonics(instruction, mnemonic):
    assert describe(instruction)[0] == mnemonic


@pytest.mark.parametrize("instruction", [0x0123, 0x5AB1, 0x8AB8, 0xEA00, 0xFAFF])
def test_unknown_opcodes(instruction):
    assert describe(instruction) == ("UNKNOWN", "no-op")


def test_descriptions_include_operands():
    assert describe(0x2345)[1] == "call subroutine at 0x345"
    assert describe(0x8AB4)[1] == "VA += VB, VF = carry"
    assert describe(0xF265)[1] == "load V0-V2 from I"


def test_disassemble_format():
    assert disassemble(0x00E0) == "0x00E0  CLS     clear screen"
    assert disassemble(0x1200, address=0x200).startswith("0x200: 0x1200  JP")
