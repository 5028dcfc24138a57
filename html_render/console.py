"""Coloured console logging shared by the converter, session and CLI."""

import sys
import threading

from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorLog:
    """Tagged, coloured console logger. Debug lines only appear when ``debug`` is set."""

    def __init__(self, debug: bool = False, stream=None):
        self.debug_enabled = debug
        self._stream = stream
        self._lock = threading.Lock()

    def _write(self, tag: str, message: str) -> None:
        stream = self._stream or sys.stdout
        with self._lock:
            print(f"{tag}{Style.RESET_ALL} {message}", file=stream)

    def debug(self, message: str) -> None:
        """Log debug message with color (only if debug mode is enabled)."""
        if self.debug_enabled:
            self._write(f"{Fore.CYAN}[DEBUG]", message)

    def info(self, message: str) -> None:
        """Log info message with color."""
        self._write(f"{Fore.GREEN}[INFO]", message)

    def warning(self, message: str) -> None:
        """Log warning message with color."""
        self._write(f"{Fore.YELLOW}[WARNING]", message)

    def error(self, message: str) -> None:
        """Log error message with color."""
        self._write(f"{Fore.RED}[ERROR]", message)

    def success(self, message: str) -> None:
        """Log success message with color."""
        self._write(f"{Fore.GREEN}[OK]", message)
