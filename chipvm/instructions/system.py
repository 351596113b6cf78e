"""CHIP-8 system instructions (0x0xxx)."""

import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unrecognised opcode: PC has already moved past it."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions; 0NNN machine routines are ignored."""
    index = jnp.where(instruction.raw == 0x00E0, 1, jnp.where(instruction.raw == 0x00EE, 2, 0))
    return jax.lax.switch(
        index,
        [no_op, execute_clear_screen, execute_return],
        state, instruction
    )
