"""CHIP-8 keypad instructions (Exxx)."""

import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.instructions.control_flow import skip_if
from chipvm.instructions.system import no_op


def execute_skip_if_key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E - Skip if key VX is pressed."""
    return skip_if(state, state.keypad[state.V[instruction.x] & 0xF])


def execute_skip_if_key_not_pressed(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EXA1 - Skip if key VX is not pressed."""
    return skip_if(state, ~state.keypad[state.V[instruction.x] & 0xF])


def execute_key_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch EX9E / EXA1, anything else is a no-op."""
    index = jnp.where(instruction.nn == 0x9E, 1, jnp.where(instruction.nn == 0xA1, 2, 0))
    return jax.lax.switch(
        index,
        [no_op, execute_skip_if_key_pressed, execute_skip_if_key_not_pressed],
        state, instruction
    )
