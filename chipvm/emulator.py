"""Main CHIP-8 interpreter engine: bootstrap, fetch, decode and dispatch."""

from typing import Optional

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState, create_state
from chipvm.decode import decode
from chipvm.constants import ADDRESS_MASK, MAX_ROM_SIZE, PROGRAM_START
from chipvm.errors import RomTooLargeError, RomUnreadableError
from chipvm.instructions.system import execute_system_instruction
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.keypad import execute_key_instruction
from chipvm.instructions.misc import execute_misc_instruction

# Indexed by the opcode's top nibble
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_key_instruction,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute a single CHIP-8 instruction.

    PC is expected to already point past ``instruction``; skips, jumps and
    calls are computed from that advanced value.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(
        decoded_instruction.opcode,
        INSTRUCTION_FAMILIES,
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch the big-endian word at PC and advance PC by 2."""
    high = state.memory[state.pc & ADDRESS_MASK]
    low = state.memory[(state.pc + 1) & ADDRESS_MASK]
    return state.replace(pc=state.pc + 2), _pack_u16(high, low)


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle."""
    state, instruction = fetch(state)
    state = state.replace(current_instruction=decode(instruction))
    return execute(state, instruction)


def load_rom_bytes(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy a raw ROM image into memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Read a ROM file, turning I/O failures into RomUnreadableError."""
    try:
        with open(filename, 'rb') as f:
            return f.read()
    except OSError as e:
        raise RomUnreadableError(filename, e.strerror or str(e)) from e


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_rom_bytes(state, read_rom(filename))


def boot(filename: str, rng: Optional[jax.Array] = None) -> EmulatorState:
    """Create a fresh machine and load the ROM at ``filename`` into it."""
    return load_rom(create_state(rng), filename)
