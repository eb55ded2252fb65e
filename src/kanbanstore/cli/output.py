"""Colorful CLI output helpers."""

import sys
from typing import TextIO

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
RESET = "\033[0m"
CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗


def _supports_color(stream: TextIO) -> bool:
    """Check if the stream is a color-capable terminal."""
    return hasattr(stream, "isatty") and stream.isatty()


def _colorize(text: str, color: str, stream: TextIO) -> str:
    if _supports_color(stream):
        return f"{color}{text}{RESET}"
    return text


def success(message: str, stream: TextIO | None = None) -> None:
    """Print success message with green checkmark."""
    stream = stream or sys.stdout
    print(f"{_colorize(CHECK, GREEN, stream)} {message}", file=stream)


def info(message: str, stream: TextIO | None = None) -> None:
    """Print info message with yellow bullet."""
    stream = stream or sys.stdout
    print(f"{_colorize(BULLET, YELLOW, stream)} {message}", file=stream)


def header(message: str, stream: TextIO | None = None) -> None:
    """Print header message in blue."""
    stream = stream or sys.stdout
    print(_colorize(message, BLUE, stream), file=stream)


def error(message: str) -> None:
    """Print error message with red cross to stderr."""
    print(f"{_colorize(CROSS, RED, sys.stderr)} {message}", file=sys.stderr)


def occupancy(task_count: int, wip_limit: int, at_capacity: bool, near_capacity: bool) -> str:
    """Render ``count/limit`` for a column, red when full and yellow when close."""
    label = f"{task_count}/{wip_limit}" if wip_limit else f"{task_count}"
    if at_capacity:
        return _colorize(label, RED, sys.stdout)
    if near_capacity:
        return _colorize(label, YELLOW, sys.stdout)
    return label
