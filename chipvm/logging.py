"""Console logging utilities for the chipvm frontend.

Provides a small levelled console logger and an emulator-specific subclass
that knows how to report boot, run-state changes and per-instruction traces.
"""

import time
import sys
from typing import Any, Dict

from chipvm.disassemble import disassemble
from chipvm.state import EmulatorState


class ConsoleLogger:
    """Flexible console logger with levels, colours and timestamps."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for an interactive or headless emulation session."""

    def __init__(self, name: str = "chipvm", **kwargs):
        super().__init__(name, **kwargs)
        self.last_run_state = None

    def log_boot(self, rom_path: str, rom_size: int, config: Dict[str, Any]):
        """Log the loaded ROM and the active configuration."""
        self.info("=" * 60)
        self.info(f"Loaded ROM {rom_path} ({rom_size} bytes at 0x200)")
        for key, value in config.items():
            if isinstance(value, int) and key.endswith("color"):
                self.info(f"  {key}: 0x{value:08X}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_instruction(self, state: EmulatorState):
        """Trace the most recently executed instruction."""
        if not self._should_log("DEBUG"):
            return
        instruction = int(state.current_instruction.raw)
        # PC already advanced past the instruction, unless a jump moved it
        self.debug(
            f"{disassemble(instruction)} | PC=0x{int(state.pc):03X} "
            f"I=0x{int(state.I):03X} SP={int(state.stack.pointer)}"
        )

    def log_run_state(self, state: EmulatorState):
        """Report RUNNING/PAUSED/QUIT transitions once each."""
        if state.run_state is self.last_run_state:
            return
        if self.last_run_state is not None:
            self.info(f"<{'=' * 12} {state.run_state.name} {'=' * 12}>")
        self.last_run_state = state.run_state

    def log_shutdown(self, ticks: int, elapsed: float):
        """Log session statistics."""
        rate = ticks / elapsed if elapsed > 0 else 0.0
        self.info(f"Stopped after {ticks} ticks in {elapsed:.1f}s ({rate:.1f} ticks/s)")
