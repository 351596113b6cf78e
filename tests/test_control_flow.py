"""Tests for control flow instructions."""

import pytest
from chipvm import execute


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_is_absolute(self, fresh_state):
        """1NNN ignores the current PC."""
        state = fresh_state.replace(pc=fresh_state.pc + 0x40)
        state = execute(state, 0x1ABC)
        assert state.pc == 0xABC

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0x10))
        state = execute(state, 0xB300)
        assert state.pc == 0x310

    def test_jump_with_offset_ignores_vx(self, fresh_state):
        """BNNN always uses V0, even when the X nibble is non-zero."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0x04).at[3].set(0x40))
        state = execute(state, 0xB320)
        assert state.pc == 0x324

    def test_jump_with_offset_masks_to_12_bits(self, fresh_state):
        """BNNN wraps inside the 4K address space."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        state = execute(state, 0xBFFF)
        assert state.pc == (0xFFF + 0xFF) & 0xFFF


class TestSkipInstructions:
    """Test all skip instruction variants."""

    @pytest.mark.parametrize("value,instruction,skips", [
        (0x42, 0x3542, True),   # 3XNN equal
        (0x41, 0x3542, False),  # 3XNN not equal
        (0x10, 0x4520, True),   # 4XNN not equal
        (0x20, 0x4520, False),  # 4XNN equal
    ])
    def test_skip_immediate(self, fresh_state, value, instruction, skips):
        """3XNN / 4XNN compare V5 against NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(value))
        initial_pc = state.pc

        state = execute(state, instruction)

        assert state.pc == initial_pc + (2 if skips else 0)

    @pytest.mark.parametrize("v1,v2,instruction,skips", [
        (0x55, 0x55, 0x5120, True),
        (0x55, 0x44, 0x5120, False),
        (0xAA, 0xBB, 0x9120, True),
        (0xAA, 0xAA, 0x9120, False),
    ])
    def test_skip_register(self, fresh_state, v1, v2, instruction, skips):
        """5XY0 / 9XY0 compare V1 against V2."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(v1).at[2].set(v2))
        initial_pc = state.pc

        state = execute(state, instruction)

        assert state.pc == initial_pc + (2 if skips else 0)

    def test_skip_equal_register_needs_zero_low_nibble(self, fresh_state):
        """5XYN with N != 0 is not a skip instruction."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(7).at[2].set(7))
        initial_pc = state.pc

        state = execute(state, 0x5121)

        assert state.pc == initial_pc
