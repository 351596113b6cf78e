"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, load_rom_bytes


@pytest.fixture
def fresh_state():
    """Provide a fresh interpreter state for each test."""
    return create_state()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def rom_from_words(*words):
    """Assemble big-endian opcode words into ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def state_with_program(*words):
    """Fresh state with the given opcodes loaded at 0x200."""
    return load_rom_bytes(create_state(), rom_from_words(*words))
