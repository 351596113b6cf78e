"""Run-state transitions and keypad events coming from the input collaborator."""

from chipvm.constants import NUM_KEYS
from chipvm.state import EmulatorState, RunState


def request_quit(state: EmulatorState) -> EmulatorState:
    """Move to the terminal QUIT state; the scheduler exits at its next iteration."""
    return state.replace(run_state=RunState.QUIT)


def toggle_pause(state: EmulatorState) -> EmulatorState:
    """Flip between RUNNING and PAUSED. QUIT is terminal."""
    if state.run_state is RunState.RUNNING:
        return state.replace(run_state=RunState.PAUSED)
    if state.run_state is RunState.PAUSED:
        return state.replace(run_state=RunState.RUNNING)
    return state


def _check_key(code: int) -> int:
    if not 0 <= code < NUM_KEYS:
        raise ValueError(f"Invalid keypad code {code!r}, expected 0x0-0xF")
    return code


def key_down(state: EmulatorState, code: int) -> EmulatorState:
    """Mark keypad ``code`` as pressed."""
    return state.replace(keypad=state.keypad.at[_check_key(code)].set(True))


def key_up(state: EmulatorState, code: int) -> EmulatorState:
    """Mark keypad ``code`` as released."""
    return state.replace(keypad=state.keypad.at[_check_key(code)].set(False))
