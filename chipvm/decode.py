"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of a 16-bit CHIP-8 opcode."""
    raw: int
    opcode: int  # Top nibble, selects the instruction family
    x: int       # VX register index
    y: int       # VY register index
    n: int       # 4-bit constant
    nn: int      # 8-bit constant
    nnn: int     # 12-bit address


def decode(instruction: int) -> DecodedInstruction:
    """Split a big-endian opcode word into its operand fields."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction >> 12) & 0xF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )
