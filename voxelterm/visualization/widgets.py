"""Chrome around the slice panels: borders, title bar, color bar, lists."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple

import numpy as np

from ..colors import ColorMap, ColorMode, as_color, max_contrast_colors, reduce_colors
from ..metadata import KeyValueList
from .cells import CYAN, DARK_GRAY, CellBuffer, Rect

# Rounded box drawing set.
TOP_LEFT, TOP_RIGHT, BOTTOM_LEFT, BOTTOM_RIGHT = "╭", "╮", "╰", "╯"
BORDER_HORIZONTAL, BORDER_VERTICAL = "─", "│"


def draw_border(buffer: CellBuffer, area: Rect, title: str = "") -> Rect:
    """Draw a rounded border with an optional title; returns the inner area."""
    if area.width < 2 or area.height < 2:
        return Rect(area.x, area.y, 0, 0)
    left, top = area.left, area.top
    right, bottom = area.right - 1, area.bottom - 1
    for x in range(left + 1, right):
        buffer.set(x, top, BORDER_HORIZONTAL)
        buffer.set(x, bottom, BORDER_HORIZONTAL)
    for y in range(top + 1, bottom):
        buffer.set(left, y, BORDER_VERTICAL)
        buffer.set(right, y, BORDER_VERTICAL)
    buffer.set(left, top, TOP_LEFT)
    buffer.set(right, top, TOP_RIGHT)
    buffer.set(left, bottom, BOTTOM_LEFT)
    buffer.set(right, bottom, BOTTOM_RIGHT)
    if title:
        buffer.set_string(left + 1, top, title, max_width=area.width - 2)
    return area.inner()


def split_path(path: str) -> Tuple[str, str, str]:
    """``(directory/, stem, .all.extensions)`` of a file name."""
    p = Path(path)
    directory = str(p.parent) + "/" if str(p.parent) not in ("", ".") else ""
    suffix = "".join(p.suffixes)
    stem = p.name[: len(p.name) - len(suffix)] if suffix else p.name
    return directory, stem, suffix


def draw_title_bar(
    buffer: CellBuffer, area: Rect, filename: str, modes: Sequence[str], mode_index: int
) -> None:
    """File name on the left, mode tabs on the right (active one highlighted).

    The directory, then the extension are dropped when space runs out.
    """
    x = area.right
    modes_width = 0
    for idx in range(len(modes) - 1, -1, -1):
        mode = modes[idx]
        x -= len(mode)
        if idx == mode_index:
            buffer.set_string(x, area.y, mode, bg=CYAN, bold=True)
        else:
            buffer.set_string(x, area.y, mode)
        x -= 1
        modes_width += len(mode) + 1

    available = area.width - modes_width
    directory, stem, ext = split_path(filename)
    if len(directory) + len(stem) + len(ext) < available:
        parts = [(directory, DARK_GRAY, False), (stem, CYAN, True), (ext, DARK_GRAY, False)]
    elif len(stem) + len(ext) < available:
        parts = [(stem, CYAN, True), (ext, DARK_GRAY, False)]
    elif len(stem) < available:
        parts = [(stem, CYAN, True)]
    else:
        parts = []

    x = area.x
    for text, color, bold in parts:
        x += buffer.set_string(x, area.y, text, fg=color, bold=bold)


def draw_color_bar(
    buffer: CellBuffer,
    area: Rect,
    color_map: ColorMap,
    color_mode: ColorMode,
    intensity_range: Tuple[float, float],
) -> None:
    """Gradient across ``area`` with the range ends and the map name on top."""
    if area.width < 1:
        return
    ramp = np.arange(area.width) / max(area.width - 1, 1)
    rgb = color_map.rgb(ramp)
    backgrounds = reduce_colors(rgb, color_mode)
    foregrounds = max_contrast_colors(rgb, color_mode)

    lo, hi = intensity_range
    labels = [(0, f"{lo:.2f}")]
    name = color_map.name
    labels.append((max((area.width - len(name)) // 2, 0), name))
    hi_text = f"{hi:.2f}"
    labels.append((max(area.width - len(hi_text), 0), hi_text))

    chars = [" "] * area.width
    for start, text in labels:
        for offset, char in enumerate(text):
            if start + offset < area.width:
                chars[start + offset] = char

    for i in range(area.width):
        buffer.set(
            area.x + i,
            area.y,
            chars[i],
            fg=as_color(foregrounds[i], color_mode),
            bg=as_color(backgrounds[i], color_mode),
        )


def draw_key_value_list(
    buffer: CellBuffer, area: Rect, entries: KeyValueList, start: int = 0
) -> None:
    """Two-column listing starting at entry ``start``; ``[...]`` if truncated."""
    if area.height < 1 or not entries:
        return
    key_width = max(len(key) for key, _ in entries)
    visible = entries[start:]
    for i, (key, value) in enumerate(visible):
        y = area.y + i
        if i < area.height - 1 or (i == area.height - 1 and i == len(visible) - 1):
            buffer.set_string(area.x, y, key, max_width=key_width, fg=CYAN, bold=True)
            buffer.set_string(
                area.x + key_width + 1, y, value, max_width=area.width - key_width - 1
            )
        elif i == area.height - 1:
            buffer.set_string(area.x + 1, y, "[...]", max_width=area.width - 1)
        else:
            break
