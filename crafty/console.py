from __future__ import annotations
import shutil
import sys
import time
from typing import Optional, TextIO


# ----------------------------
# Logging System
# ----------------------------
class Colors:
    """ANSI color codes for console output."""
    INFO = "\033[94m"
    SUCCESS = "\033[92m"
    WARNING = "\033[93m"
    ERROR = "\033[91m"
    MUTED = "\033[90m"
    BOLD = "\033[1m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class Logger:
    def __init__(self):
        self.quiet = False
        self.verbose = False

    def _stream(self, color: str) -> TextIO:
        return sys.stderr if color in ("WARNING", "ERROR") else sys.stdout

    def cprint(self, text, color="INFO"):
        color = color.upper()
        if self.quiet and color in ("INFO", "SUCCESS", "MUTED", "CYAN"):
            return
        stream = self._stream(color)
        if not stream.isatty():
            stream.write(f"{text}\n")
            return

        color_code = getattr(Colors, color, Colors.INFO)
        stream.write(f"{color_code}{text}{Colors.RESET}\n")

    def debug(self, text):
        if self.verbose:
            self.cprint(text, "MUTED")


LOG = Logger()
cprint = LOG.cprint


# ============================================================================
# Progress/ETA System
# ============================================================================
class ProgressBar:
    def __init__(self, total: int, description: str, unit: str = "B"):
        self.total = total
        self.description = description
        self.unit = unit
        self.current = 0
        self.start_time = time.time()
        self.bar_length = 40
        self.terminal_width = shutil.get_terminal_size((80, 20)).columns

    @property
    def enabled(self) -> bool:
        return not LOG.quiet and sys.stdout.isatty()

    def update(self, step: int = 1):
        self.current += step
        if self.total:
            self.current = min(self.current, self.total)
        self._draw_bar()

    def _speed(self, elapsed: float) -> str:
        if self.unit != "B" or elapsed <= 0:
            return ""
        speed = self.current / elapsed
        if speed > 1024**2:
            return f" @ {speed/1024**2:.1f} MB/s"
        if speed > 1024:
            return f" @ {speed/1024:.1f} KB/s"
        return f" @ {speed:.0f} B/s"

    def _draw_bar(self):
        if not self.enabled:
            return

        elapsed = time.time() - self.start_time
        if not self.total:
            # Unknown size: no bar, just a running counter
            msg = f"{self.description}: {self.current} {self.unit}{self._speed(elapsed)}"
        else:
            progress = self.current / self.total
            filled_length = int(self.bar_length * progress)
            bar = '█' * filled_length + '-' * (self.bar_length - filled_length)

            eta_str = "N/A"
            if progress > 0 and elapsed > 0:
                remaining = (elapsed / progress) - elapsed if progress < 1 else 0
                eta_str = format_duration(remaining)

            msg = (f"{self.description}: |{bar}| {progress * 100:.1f}% "
                   f"({self.current}/{self.total} {self.unit}){self._speed(elapsed)} - ETA: {eta_str}")

        if len(msg) > self.terminal_width:
            msg = msg[:self.terminal_width - 4] + "..."

        sys.stdout.write(f"\r{msg}")
        sys.stdout.flush()

    def finish(self):
        if self.enabled:
            sys.stdout.write("\n")
            sys.stdout.flush()


def format_duration(seconds: float) -> str:
    if seconds > 3600:
        return f"{seconds/3600:.1f}h"
    if seconds > 60:
        return f"{seconds/60:.1f}m"
    return f"{seconds:.1f}s"


def format_size(num_bytes: Optional[int]) -> str:
    if not num_bytes:
        return "0 B"
    if num_bytes > 1024**2:
        return f"{num_bytes / 1024**2:.1f} MB"
    if num_bytes > 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes} B"
