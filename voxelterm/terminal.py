"""Minimal raw-mode terminal driver (POSIX ttys only)."""

from __future__ import annotations

import logging
import os
import select
import shutil
import sys
import termios
import tty
from typing import Optional, Tuple

from .visualization.cells import CellBuffer

LOGGER = logging.getLogger(__name__)

ENTER_ALT_SCREEN = "\x1b[?1049h"
LEAVE_ALT_SCREEN = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"

# Escape sequence -> key name.
_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
}

_SINGLE = {
    "\t": "tab",
    "\x03": "ctrl-c",
    "\x1b": "esc",
}


def parse_key(data: str) -> Optional[str]:
    """Translate raw input into a key name (``None`` for anything unknown)."""
    if not data:
        return None
    if data in _SEQUENCES:
        return _SEQUENCES[data]
    if data in _SINGLE:
        return _SINGLE[data]
    if len(data) == 1 and data.isprintable():
        return data.lower()
    return None


class Terminal:
    """Context manager putting stdin into raw mode on the alternate screen."""

    def __init__(self, stdin=None, stdout=None) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._saved = None

    def __enter__(self) -> "Terminal":
        fd = self.stdin.fileno()
        self._saved = termios.tcgetattr(fd)
        tty.setraw(fd)
        self.stdout.write(ENTER_ALT_SCREEN + HIDE_CURSOR)
        self.stdout.flush()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None
        self.stdout.write(SHOW_CURSOR + LEAVE_ALT_SCREEN)
        self.stdout.flush()

    def size(self) -> Tuple[int, int]:
        columns, lines = shutil.get_terminal_size()
        return columns, lines

    def draw(self, buffer: CellBuffer) -> None:
        # Raw mode disables the CR/LF translation.
        frame = buffer.to_ansi().replace("\n", "\r\n")
        self.stdout.write(CURSOR_HOME + frame)
        self.stdout.flush()

    def read_key(self, timeout: Optional[float] = None) -> Optional[str]:
        """Wait up to ``timeout`` seconds for a key press."""
        fd = self.stdin.fileno()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        data = os.read(fd, 32).decode("utf-8", errors="ignore")
        key = parse_key(data)
        if key is None:
            LOGGER.debug("Ignoring input %r", data)
        return key
