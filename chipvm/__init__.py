"""CHIP-8 interpreter package."""

from chipvm.state import EmulatorState, RunState, StackState, create_state
from chipvm.emulator import execute, fetch, step, load_rom, load_rom_bytes, boot
from chipvm.decode import DecodedInstruction, decode
from chipvm.disassemble import disassemble
from chipvm.control import request_quit, toggle_pause, key_down, key_up
from chipvm.scheduler import Scheduler, tick, run_instructions, decrement_timers, instructions_per_tick, run_headless
from chipvm.errors import RomLoadError, RomTooLargeError, RomUnreadableError
from chipvm.config import EmulatorConfig
from chipvm.constants import *
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "RunState",
    "StackState",
    "create_state",
    "fetch",
    "step",
    "execute",
    "load_rom",
    "load_rom_bytes",
    "boot",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "request_quit",
    "toggle_pause",
    "key_down",
    "key_up",
    "Scheduler",
    "tick",
    "run_instructions",
    "decrement_timers",
    "instructions_per_tick",
    "run_headless",
    "RomLoadError",
    "RomTooLargeError",
    "RomUnreadableError",
    "EmulatorConfig",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
