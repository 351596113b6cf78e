"""Tests for the 60Hz scheduler and the fetch-decode-execute loop."""

import jax.numpy as jnp
import pytest
from chipvm import (
    RunState, Scheduler, decrement_timers, fetch, instructions_per_tick, key_down,
    request_quit, run_headless, run_instructions, step, tick, toggle_pause,
)
from conftest import state_with_program


def with_timers(state, delay, sound):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


class TestFetchStep:
    """Test fetch and single steps."""

    def test_fetch_is_big_endian(self):
        """The high byte comes from PC, the low byte from PC+1."""
        state, instruction = fetch(state_with_program(0xA2F0))
        assert instruction == 0xA2F0
        assert state.pc == 0x202

    def test_step_records_current_instruction(self):
        """step keeps the decoded fields of the last instruction."""
        state = step(state_with_program(0x6A2B))

        assert state.V[0xA] == 0x2B
        assert state.current_instruction.raw == 0x6A2B
        assert state.current_instruction.opcode == 0x6
        assert state.current_instruction.x == 0xA
        assert state.current_instruction.nn == 0x2B
        assert state.pc == 0x202

    def test_unknown_opcode_skipped(self):
        """An undefined opcode is stepped over."""
        state = step(state_with_program(0xE0FF, 0x6105))
        assert state.pc == 0x202
        state = step(state)
        assert state.V[1] == 5


class TestTick:
    """Test batches and timers."""

    def test_instructions_per_tick(self):
        assert instructions_per_tick(500) == 8
        assert instructions_per_tick(700) == 11
        assert instructions_per_tick(60) == 1
        assert instructions_per_tick(30) == 0

    def test_instructions_per_tick_rejects_non_positive(self):
        with pytest.raises(ValueError):
            instructions_per_tick(0)

    def test_tick_runs_exact_batch(self):
        """At 500/s a tick executes exactly 8 instructions."""
        state = state_with_program(*([0x7001] * 20))

        state = tick(state, instructions_per_tick(500))

        assert state.V[0] == 8
        assert state.pc == 0x200 + 16

    def test_tick_decrements_timers_once(self):
        """Timers drop by exactly one per tick however many instructions ran."""
        state = with_timers(state_with_program(0x1200), 10, 3)

        state = tick(state, 8)
        assert state.delay_timer == 9
        assert state.sound_timer == 2

        state = tick(state, 1)
        assert state.delay_timer == 8
        assert state.sound_timer == 1

    def test_timers_stop_at_zero(self):
        """Zero timers stay at zero."""
        state = with_timers(state_with_program(0x1200), 1, 0)

        state = tick(state, 8)
        state = tick(state, 8)

        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_decrement_timers(self):
        state = decrement_timers(with_timers(state_with_program(), 255, 1))
        assert state.delay_timer == 254
        assert state.sound_timer == 0

    def test_delay_timer_visible_to_program(self):
        """A program reading the delay timer sees the per-tick countdown."""
        # delay = 60, then loop on F107 (V1 = delay) / 1204
        state = state_with_program(0x603C, 0xF015, 0xF107, 0x1204)

        state = tick(state, 8)
        assert state.delay_timer == 59

        state = tick(state, 8)
        assert state.V[1] == 59
        assert state.delay_timer == 58

    def test_paused_tick_is_noop(self):
        """A paused machine neither executes nor counts down."""
        state = toggle_pause(with_timers(state_with_program(0x7001), 5, 5))

        new_state = tick(state, 8)

        assert new_state.pc == 0x200
        assert new_state.V[0] == 0
        assert new_state.delay_timer == 5

    def test_run_instructions_matches_steps(self):
        """The jitted batch equals repeated single steps."""
        program = (0x6005, 0x6103, 0x8014, 0xA300, 0xF155)
        batched = run_instructions(state_with_program(*program), 5)
        stepped = state_with_program(*program)
        for _ in range(5):
            stepped = step(stepped)

        assert jnp.array_equal(batched.V, stepped.V)
        assert jnp.array_equal(batched.memory, stepped.memory)
        assert batched.pc == stepped.pc


class TestWaitAcrossTicks:
    """FX0A holds the PC until a key arrives."""

    def test_wait_for_key_blocks_then_resumes(self):
        state = state_with_program(0xF20A, 0x6301)

        for _ in range(3):
            state = tick(state, 8)
            assert state.pc == 0x200
            assert state.V[3] == 0

        state = key_down(state, 0x9)
        state = tick(state, 8)

        assert state.V[2] == 0x9
        assert state.V[3] == 1
        assert state.pc > 0x202


class FakeClock:
    """Deterministic clock advancing a fixed amount per reading."""

    def __init__(self, step_seconds):
        self.now = 0.0
        self.step_seconds = step_seconds
        self.sleeps = []

    def __call__(self):
        self.now += self.step_seconds
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)


class TestScheduler:
    """Test the wall-clock loop."""

    def test_run_until_quit(self):
        """The loop exits at the first iteration boundary after QUIT."""
        clock = FakeClock(0.001)
        scheduler = Scheduler(rate=500, clock=clock, sleep=clock.sleep)
        frames = []

        def on_frame(state):
            frames.append(int(state.V[0]))
            return request_quit(state) if len(frames) == 3 else state

        state = scheduler.run(state_with_program(*([0x7001] * 40)), on_frame)

        assert frames == [8, 16, 24]
        assert scheduler.ticks == 3
        assert state.run_state is RunState.QUIT
        assert len(clock.sleeps) == 3
        assert all(s == pytest.approx(1 / 60 - 0.001) for s in clock.sleeps)

    def test_overrun_sleeps_zero(self):
        """A tick longer than 1/60s does not sleep."""
        clock = FakeClock(0.05)
        scheduler = Scheduler(rate=500, clock=clock, sleep=clock.sleep)

        scheduler.run(state_with_program(0x1200), max_ticks=2)

        assert clock.sleeps == [0.0, 0.0]

    def test_paused_still_calls_frontend(self):
        """Paused ticks skip execution but keep servicing the frontend."""
        clock = FakeClock(0.0)
        scheduler = Scheduler(rate=500, clock=clock, sleep=clock.sleep)
        seen = []

        def on_frame(state):
            seen.append((state.run_state, int(state.pc)))
            if len(seen) == 1:
                return toggle_pause(state)
            if len(seen) == 3:
                return request_quit(state)
            return state

        scheduler.run(state_with_program(*([0x7001] * 40)), on_frame)

        assert seen == [
            (RunState.RUNNING, 0x210),
            (RunState.PAUSED, 0x210),
            (RunState.PAUSED, 0x210),
        ]

    def test_quit_state_never_runs(self):
        clock = FakeClock(0.0)
        scheduler = Scheduler(clock=clock, sleep=clock.sleep)

        scheduler.run(request_quit(state_with_program(0x7001)))

        assert scheduler.ticks == 0


def test_run_headless():
    """Headless runs execute a fixed number of ticks."""
    state = run_headless(state_with_program(*([0x7001] * 40)), 3, rate=500, show_progress=False)
    assert state.V[0] == 24
