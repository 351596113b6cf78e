"""CHIP-8 ALU operations (8xxx).

Each operation returns ``(result, flag)``. A ``None`` flag leaves VF alone;
otherwise the flag is written first and the result second, so ``8FY4`` and
friends end up holding the arithmetic result rather than the flag.

The two subtractions take their operands from the registers after VF has
been set, so ``8XF5`` and ``8XF7`` subtract the new flag value.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, None]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, None]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, None]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, None]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy <= vx, jnp.uint8)
    return vx - vy, no_borrow


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx <= vy, jnp.uint8)
    return vy - vx, no_borrow


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return vx << 1, (vx >> 7) & 1


ALU_OPERATIONS = {
    0x0: alu_set,
    0x1: alu_or,
    0x2: alu_and,
    0x3: alu_xor,
    0x4: alu_add,
    0x5: alu_sub_xy,
    0x6: alu_shift_right,
    0x7: alu_sub_yx,
    0xE: alu_shift_left,
}


# Operations whose result is computed from the registers after the flag write
FLAG_BEFORE_OPERANDS = (alu_sub_xy, alu_sub_yx)


def _make_branch(operation):
    def branch(V: jnp.ndarray, x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
        result, flag = operation(V[x], V[y])
        if flag is not None:
            V = V.at[15].set(jnp.astype(flag, jnp.uint8))
        if operation in FLAG_BEFORE_OPERANDS:
            result, _ = operation(V[x], V[y])
        return V.at[x].set(jnp.astype(result, jnp.uint8))
    return branch


def _undefined_branch(V: jnp.ndarray, x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return V


# Sub-opcode N -> branch index; undefined sub-opcodes map to the no-op branch
_BRANCHES = [_undefined_branch] + [_make_branch(op) for op in ALU_OPERATIONS.values()]
_BRANCH_INDEX = jnp.array(
    [list(ALU_OPERATIONS).index(n) + 1 if n in ALU_OPERATIONS else 0 for n in range(16)],
    dtype=jnp.int32,
)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    new_V = jax.lax.switch(
        _BRANCH_INDEX[instruction.n],
        _BRANCHES,
        state.V, instruction.x, instruction.y
    )
    return state.replace(V=new_V)
