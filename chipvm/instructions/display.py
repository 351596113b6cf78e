"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean (64, 32) mask of the set sprite bits that land on screen.

    The origin wraps into the frame; the sprite body is clipped at the right
    and bottom edges instead of wrapping.
    """
    sprite_x = jnp.astype(state.V[instruction.x] % SCREEN_WIDTH, jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y] % SCREEN_HEIGHT, jnp.int32)

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    in_sprite = (col_offset >= 0) & (col_offset < 8) & (row_offset >= 0) & (row_offset < instruction.n)

    sprite_rows = state.memory[jnp.astype(state.I, jnp.int32) + jnp.clip(row_offset, 0, 15)]
    bits = (sprite_rows >> jnp.astype(7 - jnp.clip(col_offset, 0, 7), jnp.uint8)) & 1
    return (bits == 1) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR an 8xN sprite from memory[I] at (VX, VY), VF = collision."""
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[15].set(jnp.astype(collision, jnp.uint8))
    )
