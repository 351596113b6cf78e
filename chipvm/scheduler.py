"""60Hz timing scheduler.

Instructions run in batches of ``rate // 60`` per tick; the delay and sound
timers drop by one per tick no matter how many instructions ran.
"""

import time
from functools import partial
from typing import Callable, Optional

import jax
import jax.lax
import jax.numpy as jnp
from tqdm import tqdm

from chipvm.constants import TIMER_FREQUENCY, DEFAULT_INSTRUCTIONS_PER_SECOND
from chipvm.emulator import step
from chipvm.state import EmulatorState, RunState


def instructions_per_tick(rate: int) -> int:
    """Number of instructions executed per 60Hz tick at ``rate`` instructions/s."""
    if rate <= 0:
        raise ValueError(f"Instruction rate must be positive, got {rate}")
    return rate // TIMER_FREQUENCY


def run_instruction(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=1)
def run_instructions(state: EmulatorState, n: int) -> EmulatorState:
    """Execute ``n`` fetch-decode-execute cycles."""
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def tick(state: EmulatorState, n: int) -> EmulatorState:
    """Advance one 60Hz tick: ``n`` instructions then a timer decrement.

    Paused and quit machines are returned untouched.
    """
    if state.run_state is not RunState.RUNNING:
        return state
    state = run_instructions(state, n)
    return decrement_timers(state)


class Scheduler:
    """Drives the interpreter against a wall clock at 60 ticks per second.

    Args:
        rate: Instructions per second (default 500, i.e. 8 per tick)
        clock: Monotonic time source in seconds
        sleep: Function used to wait out the rest of each tick
    """

    def __init__(
        self,
        rate: int = DEFAULT_INSTRUCTIONS_PER_SECOND,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.rate = rate
        self.instructions_per_tick = instructions_per_tick(rate)
        self.tick_duration = 1.0 / TIMER_FREQUENCY
        self.clock = clock
        self.sleep = sleep
        self.ticks = 0

    def run(
        self,
        state: EmulatorState,
        on_frame: Optional[Callable[[EmulatorState], EmulatorState]] = None,
        max_ticks: Optional[int] = None,
    ) -> EmulatorState:
        """Loop until the machine reaches QUIT.

        ``on_frame`` is the render/input collaborator: it receives the state
        after every tick (paused or not) and returns it, possibly with keypad
        or run-state changes. QUIT is only observed between ticks.
        """
        while state.run_state is not RunState.QUIT:
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            start = self.clock()

            state = tick(state, self.instructions_per_tick)
            if on_frame is not None:
                state = on_frame(state)
            self.ticks += 1

            elapsed = self.clock() - start
            self.sleep(max(0.0, self.tick_duration - elapsed))
        return state


def run_headless(
    state: EmulatorState,
    ticks: int,
    rate: int = DEFAULT_INSTRUCTIONS_PER_SECOND,
    show_progress: bool = True,
    desc: str = None,
) -> EmulatorState:
    """Run ``ticks`` ticks as fast as possible, without a clock or frontend."""
    n = instructions_per_tick(rate)
    if desc is None:
        desc = f"Emulating ({ticks:,} ticks)"
    for _ in tqdm(range(ticks), desc=desc, unit="tick", disable=not show_progress):
        if state.run_state is RunState.QUIT:
            break
        state = tick(state, n)
    return state
