"""CHIP-8 rendering utilities for visualization."""

import jax.numpy as jnp
import numpy as np
from typing import Tuple

from chipvm.config import DEFAULT_FG_COLOR, DEFAULT_BG_COLOR, rgba_components


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (64, 32) representing CHIP-8 display
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.array(display, dtype=np.bool_)

    # State: (64 width, 32 height) -> image: (32 height, 64 width)
    pixels = pixels.T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


COLOR_SCHEMES = {
    "default": (rgba_components(DEFAULT_FG_COLOR)[:3], rgba_components(DEFAULT_BG_COLOR)[:3]),
    "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "white": ((255, 255, 255), (0, 0, 0)),  # White on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def create_color_scheme(
    scheme: str = "default",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name, one of ``COLOR_SCHEMES``

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def display_to_text(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the display as lines of text, one per screen row."""
    pixels = np.array(display, dtype=np.bool_).T
    return "\n".join("".join(on if p else off for p in row) for row in pixels)


def square_wave(
    frequency: float = 440.0,
    sample_rate: int = 44100,
    volume: float = 0.25,
) -> np.ndarray:
    """One second of a mono int16 square wave, looped by the buzzer."""
    t = np.arange(sample_rate) / sample_rate
    wave = np.where(np.sin(2 * np.pi * frequency * t) >= 0, 1.0, -1.0)
    return (wave * volume * np.iinfo(np.int16).max).astype(np.int16)
