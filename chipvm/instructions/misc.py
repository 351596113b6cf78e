"""CHIP-8 timer, index and memory transfer instructions (Fxxx)."""

import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import ADDRESS_MASK, FONT_START, FONT_CHAR_SIZE, MEMORY_SIZE, NUM_REGISTERS
from chipvm.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I, keeping I within 12 bits."""
    new_i = (state.I + jnp.astype(state.V[instruction.x], jnp.uint16)) & ADDRESS_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Rewinds PC while nothing is pressed so the instruction runs again on the
    next cycle; otherwise stores the lowest pressed key index in VX.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_CHAR_SIZE
    return state.replace(I=jnp.astype(font_address & ADDRESS_MASK, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]
    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    # Writes past the end of memory are dropped by the scatter
    indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
    new_memory = state.memory.at[indices].set(digits, mode="drop")
    return state.replace(memory=new_memory)


def _transfer_mask(state: EmulatorState, instruction: DecodedInstruction) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Addresses I..I+15 and which of them take part in an FX55/FX65 transfer."""
    offsets = jnp.arange(NUM_REGISTERS)
    addresses = jnp.astype(state.I, jnp.int32) + offsets
    mask = (offsets <= instruction.x) & (addresses < MEMORY_SIZE)
    return addresses, mask


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I; I is unchanged."""
    addresses, mask = _transfer_mask(state, instruction)
    # Out-of-range addresses are redirected past the end so the scatter drops them
    targets = jnp.where(mask, addresses, MEMORY_SIZE)
    new_memory = state.memory.at[targets].set(state.V, mode="drop")
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I; I is unchanged."""
    addresses, mask = _transfer_mask(state, instruction)
    memory_values = state.memory.at[addresses].get(mode="fill", fill_value=0)
    new_V = jnp.where(mask, memory_values, state.V)
    return state.replace(V=new_V)


MISC_OPERATIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}

_BRANCHES = [no_op] + list(MISC_OPERATIONS.values())
_BRANCH_INDEX = jnp.array(
    [list(MISC_OPERATIONS).index(nn) + 1 if nn in MISC_OPERATIONS else 0 for nn in range(256)],
    dtype=jnp.int32,
)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch FXNN instructions on NN; unknown NN is a no-op."""
    return jax.lax.switch(
        _BRANCH_INDEX[instruction.nn],
        _BRANCHES,
        state, instruction
    )
