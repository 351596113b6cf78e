"""Frontend configuration: window scale, colours and CPU speed."""

import dataclasses
from typing import Tuple

from chipvm.constants import DEFAULT_INSTRUCTIONS_PER_SECOND

DEFAULT_SCALE = 20
DEFAULT_FG_COLOR = 0xF3E2D4FF
DEFAULT_BG_COLOR = 0x17313EFF


def rgba_components(color: int) -> Tuple[int, int, int, int]:
    """Split a 0xRRGGBBAA colour into its four channels."""
    if not 0 <= color <= 0xFFFFFFFF:
        raise ValueError(f"Colour 0x{color:X} does not fit in 32 bits")
    return (color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def rgba_from_rgb(rgb: Tuple[int, int, int], alpha: int = 0xFF) -> int:
    """Pack an ``(r, g, b)`` triple into 0xRRGGBBAA."""
    r, g, b = rgb
    return (r << 24) | (g << 16) | (b << 8) | alpha


def parse_color(text: str) -> int:
    """Parse ``0xRRGGBBAA``, ``#RRGGBBAA`` or ``RRGGBB`` (opaque) into an int."""
    value = text.strip().lower()
    if value.startswith("#"):
        value = value[1:]
    elif value.startswith("0x"):
        value = value[2:]
    if len(value) == 6:
        value += "ff"
    if len(value) != 8:
        raise ValueError(f"Cannot parse colour '{text}', expected RRGGBB or RRGGBBAA")
    return int(value, 16)


@dataclasses.dataclass(frozen=True)
class EmulatorConfig:
    """Options for the display/input/audio collaborators.

    Attributes:
        scale: Size in screen pixels of one CHIP-8 pixel
        fg_color: Colour of lit pixels as 0xRRGGBBAA
        bg_color: Colour of unlit pixels as 0xRRGGBBAA
        instructions_per_second: CPU speed handed to the scheduler
        sound: Whether to play a tone while the sound timer runs
        debug: Whether to log every executed instruction
    """
    scale: int = DEFAULT_SCALE
    fg_color: int = DEFAULT_FG_COLOR
    bg_color: int = DEFAULT_BG_COLOR
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    sound: bool = True
    debug: bool = False

    def __post_init__(self):
        if self.scale <= 0:
            raise ValueError(f"Scale must be positive, got {self.scale}")
        if self.instructions_per_second <= 0:
            raise ValueError(
                f"Instructions per second must be positive, got {self.instructions_per_second}"
            )
        rgba_components(self.fg_color)
        rgba_components(self.bg_color)

    @property
    def fg_rgb(self) -> Tuple[int, int, int]:
        return rgba_components(self.fg_color)[:3]

    @property
    def bg_rgb(self) -> Tuple[int, int, int]:
        return rgba_components(self.bg_color)[:3]
