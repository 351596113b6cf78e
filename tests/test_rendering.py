"""Tests for display rasterisation helpers."""

import numpy as np
import pytest
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text, square_wave


def test_display_to_rgb_shape_and_colors(fresh_state):
    display = fresh_state.display.at[1, 0].set(True)

    frame = chip8_display_to_rgb(display, scale=2, on_color=(1, 2, 3), off_color=(9, 9, 9))

    assert frame.shape == (64, 128, 3)
    assert frame.dtype == np.uint8
    # Pixel (x=1, y=0) covers rows 0-1, columns 2-3
    assert tuple(frame[0, 2]) == (1, 2, 3)
    assert tuple(frame[1, 3]) == (1, 2, 3)
    assert tuple(frame[0, 0]) == (9, 9, 9)
    assert tuple(frame[2, 2]) == (9, 9, 9)


def test_default_color_scheme():
    on_color, off_color = create_color_scheme("default")
    assert on_color == (0xF3, 0xE2, 0xD4)
    assert off_color == (0x17, 0x31, 0x3E)


def test_unknown_color_scheme():
    with pytest.raises(ValueError):
        create_color_scheme("neon")


def test_display_to_text(fresh_state):
    display = fresh_state.display.at[0, 0].set(True).at[63, 31].set(True)

    lines = display_to_text(display).splitlines()

    assert len(lines) == 32
    assert all(len(line) == 64 for line in lines)
    assert lines[0][0] == "#"
    assert lines[31][63] == "#"
    assert lines[0][1] == "."


def test_square_wave():
    wave = square_wave(frequency=100, sample_rate=1000, volume=0.5)
    assert wave.dtype == np.int16
    assert len(wave) == 1000
    assert set(np.unique(wave)) == {-16383, 16383}
