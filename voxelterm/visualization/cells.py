"""In-memory character cell grid and its ANSI serialisation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional

from ..colors import Color, Rgb

# Named palette entries used by the chrome (title bar, borders, labels).
CYAN = 6
DARK_GRAY = 8


class Rect(NamedTuple):
    """Cell-aligned rectangle: origin at the top-left corner."""

    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def inner(self, margin: int = 1) -> "Rect":
        """The rectangle shrunk by ``margin`` cells on every side."""
        width = max(self.width - 2 * margin, 0)
        height = max(self.height - 2 * margin, 0)
        return Rect(self.x + margin, self.y + margin, width, height)


@dataclass
class Cell:
    char: str = " "
    fg: Optional[Color] = None
    bg: Optional[Color] = None
    bold: bool = False


class CellBuffer:
    """Fixed-size grid of :class:`Cell` objects, addressed ``(x, y)``."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Buffer size must not be negative, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[List[Cell]] = [
            [Cell() for _ in range(width)] for _ in range(height)
        ]

    @property
    def area(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def __getitem__(self, pos) -> Cell:
        x, y = pos
        return self._cells[y][x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(
        self,
        x: int,
        y: int,
        char: str,
        fg: Optional[Color] = None,
        bg: Optional[Color] = None,
        bold: bool = False,
    ) -> None:
        """Assign one cell; positions outside the buffer are ignored."""
        if not self.in_bounds(x, y):
            return
        cell = self._cells[y][x]
        cell.char = char
        cell.fg = fg
        cell.bg = bg
        cell.bold = bold

    def set_string(
        self,
        x: int,
        y: int,
        text: str,
        max_width: Optional[int] = None,
        fg: Optional[Color] = None,
        bg: Optional[Color] = None,
        bold: bool = False,
    ) -> int:
        """Write ``text`` left to right; returns the number of cells used."""
        if max_width is not None:
            text = text[: max(max_width, 0)]
        for offset, char in enumerate(text):
            self.set(x + offset, y, char, fg=fg, bg=bg, bold=bold)
        return len(text)

    def rows(self) -> Iterator[List[Cell]]:
        return iter(self._cells)

    def text(self) -> str:
        """Characters only, one line per row (colors dropped)."""
        return "\n".join("".join(cell.char for cell in row) for row in self._cells)

    def to_ansi(self) -> str:
        """Serialise the grid with SGR color sequences, one line per row."""
        lines = []
        for row in self._cells:
            parts = []
            current = None
            for cell in row:
                style = (cell.fg, cell.bg, cell.bold)
                if style != current:
                    parts.append(_sgr(*style))
                    current = style
                parts.append(cell.char)
            parts.append("\x1b[0m")
            lines.append("".join(parts))
        return "\n".join(lines)


def _color_code(color: Optional[Color], background: bool) -> str:
    if color is None:
        return "49" if background else "39"
    base = "48" if background else "38"
    if isinstance(color, Rgb):
        return f"{base};2;{color.r};{color.g};{color.b}"
    return f"{base};5;{int(color)}"


def _sgr(fg: Optional[Color], bg: Optional[Color], bold: bool) -> str:
    codes = ["0"]
    if bold:
        codes.append("1")
    codes.append(_color_code(fg, background=False))
    codes.append(_color_code(bg, background=True))
    return "\x1b[" + ";".join(codes) + "m"
