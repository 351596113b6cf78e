"""CHIP-8 interpreter state structures."""

import enum
from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipvm.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from chipvm.decode import DecodedInstruction, decode


class RunState(enum.Enum):
    """Scheduler gate driven by the input collaborator."""
    RUNNING = "running"
    PAUSED = "paused"
    QUIT = "quit"


class StackState(PyTreeNode):
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine state.

    ``V[0xF]`` doubles as the carry/borrow/collision flag; it is the same
    storage as any other general register. ``display`` is indexed ``[x, y]``.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    current_instruction: DecodedInstruction = field(
        default_factory=lambda: decode(jnp.zeros((), dtype=jnp.uint16))
    )
    run_state: RunState = field(pytree_node=False, default=RunState.RUNNING)


def create_state(rng: Optional[jax.Array] = None) -> EmulatorState:
    """Create a zeroed machine with the font table loaded at 0x000."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng=rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
