"""
CHIP-8 emulator frontend: pygame window, keyboard and buzzer around the chipvm core
"""

import argparse
import dataclasses
import sys
import time

import jax
import pygame

from chipvm import (
    EmulatorConfig, RomLoadError, RunState, Scheduler, create_state, key_down, key_up,
    load_rom_bytes, request_quit, run_headless, toggle_pause,
)
from chipvm.config import DEFAULT_SCALE, DEFAULT_FG_COLOR, DEFAULT_BG_COLOR, parse_color, rgba_from_rgb
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, DEFAULT_INSTRUCTIONS_PER_SECOND
from chipvm.keymap import build_key_map
from chipvm.logging import EmulatorLogger
from chipvm.rendering import (
    COLOR_SCHEMES, chip8_display_to_rgb, create_color_scheme, display_to_text, square_wave,
)
from chipvm.emulator import read_rom
from chipvm.scheduler import run_instructions


class PygameFrontend:
    """Render, input and audio collaborator handed to the scheduler."""

    def __init__(self, config: EmulatorConfig, logger: EmulatorLogger):
        self.config = config
        self.logger = logger

        pygame.init()
        self.screen = pygame.display.set_mode(
            (SCREEN_WIDTH * config.scale, SCREEN_HEIGHT * config.scale)
        )
        pygame.display.set_caption("CHIP-8")
        self.screen.fill(config.bg_rgb)
        pygame.display.flip()

        self.key_map = build_key_map(pygame.key.key_code)

        self.buzzer = None
        if config.sound:
            pygame.mixer.init(frequency=44100, size=-16, channels=1)
            self.buzzer = pygame.mixer.Sound(buffer=square_wave(sample_rate=44100).tobytes())
        self.buzzing = False

    def handle_input(self, state):
        """Apply pending window and keyboard events to the state."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return request_quit(state)
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return request_quit(state)
                if event.key == pygame.K_SPACE:
                    state = toggle_pause(state)
                    self.logger.log_run_state(state)
                elif event.key in self.key_map:
                    state = key_down(state, self.key_map[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in self.key_map:
                    state = key_up(state, self.key_map[event.key])
        return state

    def render(self, state):
        frame = chip8_display_to_rgb(
            state.display,
            scale=self.config.scale,
            on_color=self.config.fg_rgb,
            off_color=self.config.bg_rgb,
        )
        # surfarray wants (width, height, 3)
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def update_buzzer(self, state):
        if self.buzzer is None:
            return
        should_buzz = state.run_state is RunState.RUNNING and int(state.sound_timer) > 0
        if should_buzz and not self.buzzing:
            self.buzzer.play(loops=-1)
        elif not should_buzz and self.buzzing:
            self.buzzer.stop()
        self.buzzing = should_buzz

    def on_frame(self, state):
        if self.config.debug and state.run_state is RunState.RUNNING:
            self.logger.log_instruction(state)
        self.render(state)
        self.update_buzzer(state)
        return self.handle_input(state)

    def close(self):
        if self.buzzer is not None:
            self.buzzer.stop()
            pygame.mixer.quit()
        pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="CHIP-8 interpreter")
    parser.add_argument("rom", type=str, help="Path to a raw CHIP-8 ROM image")
    parser.add_argument(
        "--scale",
        type=int,
        default=DEFAULT_SCALE,
        help=f"Window pixels per CHIP-8 pixel (default: {DEFAULT_SCALE})",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(COLOR_SCHEMES),
        default="default",
        help="Named foreground/background pair (default: default)",
    )
    parser.add_argument(
        "--fg",
        type=parse_color,
        default=None,
        help=f"Foreground colour RRGGBB[AA], overrides the palette (default: {DEFAULT_FG_COLOR:08X})",
    )
    parser.add_argument(
        "--bg",
        type=parse_color,
        default=None,
        help=f"Background colour RRGGBB[AA], overrides the palette (default: {DEFAULT_BG_COLOR:08X})",
    )
    parser.add_argument(
        "--rate",
        type=int,
        default=DEFAULT_INSTRUCTIONS_PER_SECOND,
        help=f"Instructions per second (default: {DEFAULT_INSTRUCTIONS_PER_SECOND})",
    )
    parser.add_argument("--no-sound", action="store_true", help="Disable the buzzer")
    parser.add_argument("--debug", action="store_true", help="Trace the last instruction of every tick")
    parser.add_argument(
        "--headless",
        type=int,
        metavar="TICKS",
        default=None,
        help="Run TICKS ticks without a window and print the final screen",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the CXNN random generator")
    return parser.parse_args(argv)


def resolve_colors(args) -> tuple[int, int]:
    """Foreground and background as 0xRRGGBBAA: the palette, then explicit --fg/--bg."""
    on_color, off_color = create_color_scheme(args.palette)
    fg = args.fg if args.fg is not None else rgba_from_rgb(on_color)
    bg = args.bg if args.bg is not None else rgba_from_rgb(off_color)
    return fg, bg


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = EmulatorLogger(log_level="DEBUG" if args.debug else "INFO")

    fg_color, bg_color = resolve_colors(args)
    try:
        config = EmulatorConfig(
            scale=args.scale,
            fg_color=fg_color,
            bg_color=bg_color,
            instructions_per_second=args.rate,
            sound=not args.no_sound and args.headless is None,
            debug=args.debug,
        )
    except ValueError as e:
        logger.error(str(e))
        return 1

    seed = args.seed if args.seed is not None else time.time_ns() & 0xFFFFFFFF
    try:
        rom_data = read_rom(args.rom)
        state = load_rom_bytes(create_state(jax.random.PRNGKey(seed)), rom_data)
    except RomLoadError as e:
        logger.error(str(e))
        return 1
    logger.log_boot(args.rom, len(rom_data), dataclasses.asdict(config))

    if args.headless is not None:
        state = run_headless(state, args.headless, config.instructions_per_second)
        print(display_to_text(state.display))
        return 0

    try:
        frontend = PygameFrontend(config, logger)
    except pygame.error as e:
        logger.error(f"Could not initialise display/audio: {e}")
        pygame.quit()
        return 1

    scheduler = Scheduler(rate=config.instructions_per_second)
    logger.log_run_state(state)
    start_time = time.time()
    try:
        # Compile the instruction batch before the first timed tick
        run_instructions(state, scheduler.instructions_per_tick)
        state = scheduler.run(state, frontend.on_frame)
    finally:
        frontend.close()

    logger.log_run_state(state)
    logger.log_shutdown(scheduler.ticks, time.time() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
