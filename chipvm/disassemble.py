"""Human-readable descriptions of CHIP-8 opcodes for debug traces."""

from chipvm.decode import decode

_ALU_MNEMONICS = {
    0x0: ("LD", "V{x:X} = V{y:X}"),
    0x1: ("OR", "V{x:X} |= V{y:X}"),
    0x2: ("AND", "V{x:X} &= V{y:X}"),
    0x3: ("XOR", "V{x:X} ^= V{y:X}"),
    0x4: ("ADD", "V{x:X} += V{y:X}, VF = carry"),
    0x5: ("SUB", "V{x:X} -= V{y:X}, VF = not borrow"),
    0x6: ("SHR", "V{x:X} >>= 1, VF = bit 0"),
    0x7: ("SUBN", "V{x:X} = V{y:X} - V{x:X}, VF = not borrow"),
    0xE: ("SHL", "V{x:X} <<= 1, VF = bit 7"),
}

_MISC_MNEMONICS = {
    0x07: ("LD", "V{x:X} = delay timer"),
    0x0A: ("LD", "wait for key, store in V{x:X}"),
    0x15: ("LD", "delay timer = V{x:X}"),
    0x18: ("LD", "sound timer = V{x:X}"),
    0x1E: ("ADD", "I += V{x:X}"),
    0x29: ("LD", "I = font glyph for V{x:X}"),
    0x33: ("BCD", "store BCD of V{x:X} at I"),
    0x55: ("LD", "store V0-V{x:X} at I"),
    0x65: ("LD", "load V0-V{x:X} from I"),
}


def describe(instruction: int) -> tuple[str, str]:
    """Return ``(mnemonic, description)`` for a raw opcode.

    Opcodes outside the baseline instruction set come back as
    ``("UNKNOWN", "no-op")``.
    """
    inst = decode(int(instruction))
    x, y, n, nn, nnn = inst.x, inst.y, inst.n, inst.nn, inst.nnn
    family = inst.opcode

    if inst.raw == 0x00E0:
        return "CLS", "clear screen"
    if inst.raw == 0x00EE:
        return "RET", "return from subroutine"
    if family == 0x1:
        return "JP", f"jump to 0x{nnn:03X}"
    if family == 0x2:
        return "CALL", f"call subroutine at 0x{nnn:03X}"
    if family == 0x3:
        return "SE", f"skip if V{x:X} == 0x{nn:02X}"
    if family == 0x4:
        return "SNE", f"skip if V{x:X} != 0x{nn:02X}"
    if family == 0x5 and n == 0:
        return "SE", f"skip if V{x:X} == V{y:X}"
    if family == 0x6:
        return "LD", f"V{x:X} = 0x{nn:02X}"
    if family == 0x7:
        return "ADD", f"V{x:X} += 0x{nn:02X}"
    if family == 0x8 and n in _ALU_MNEMONICS:
        mnemonic, template = _ALU_MNEMONICS[n]
        return mnemonic, template.format(x=x, y=y)
    if family == 0x9:
        return "SNE", f"skip if V{x:X} != V{y:X}"
    if family == 0xA:
        return "LD", f"I = 0x{nnn:03X}"
    if family == 0xB:
        return "JP", f"jump to V0 + 0x{nnn:03X}"
    if family == 0xC:
        return "RND", f"V{x:X} = random & 0x{nn:02X}"
    if family == 0xD:
        return "DRW", f"draw 8x{n} sprite at (V{x:X}, V{y:X})"
    if family == 0xE and nn == 0x9E:
        return "SKP", f"skip if key V{x:X} pressed"
    if family == 0xE and nn == 0xA1:
        return "SKNP", f"skip if key V{x:X} not pressed"
    if family == 0xF and nn in _MISC_MNEMONICS:
        mnemonic, template = _MISC_MNEMONICS[nn]
        return mnemonic, template.format(x=x)
    return "UNKNOWN", "no-op"


def disassemble(instruction: int, address: int = None) -> str:
    """Format an opcode as ``[ADDR: ]OPCODE  MNEMONIC  description``."""
    mnemonic, description = describe(instruction)
    prefix = f"0x{address:03X}: " if address is not None else ""
    return f"{prefix}0x{int(instruction):04X}  {mnemonic:<7s} {description}"
