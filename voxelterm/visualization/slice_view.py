"""Slice rendering: aspect fitting, anti-aliasing, colors and crosshair.

Two vertical pixels are packed into one terminal cell with the lower half
block glyph: the upper pixel becomes the cell background and the lower pixel
the foreground.  Pixel rows are counted from the bottom of the image (row 0 is
the low end of the vertical world axis), terminal rows from the top.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..colors import (
    Color,
    ColorMap,
    ColorMode,
    as_color,
    max_contrast_colors,
    reduce_colors,
)
from ..config import MAX_SUPERSAMPLING
from ..cube import Cube
from ..sampling import SliceAxis, downsample_2d, position_2d
from ..slice_cache import SliceCache, SliceKey
from .cells import CellBuffer, Rect

# Orientation labels per world axis (RAS+): low end first.
AXIS_LABELS = ("LR", "PA", "IS")

LOWER_HALF_BLOCK = "▄"
CROSS = "┼"
VERTICAL = "│"
HORIZONTAL = "─"


@dataclass
class SliceParams:
    """Per-frame rendering state shared by the three slice panels.

    ``fill_value`` is ``None`` for the viewer, which clamps to the edge voxels.
    A number paints points outside the voxel grid instead, e.g. the corners
    left empty by an oblique affine; it is part of the cache key.
    """

    position: Sequence[float]
    intensity_range: Tuple[float, float]
    color_map: ColorMap
    color_mode: ColorMode
    max_supersampling: int = MAX_SUPERSAMPLING
    fill_value: Optional[float] = None


def fit_relative(
    src_width: float, src_height: float, dest_width: int, dest_height: int
) -> Tuple[int, int]:
    """Largest integer size with the source aspect ratio inside the destination."""
    if dest_width < 1 or dest_height < 1:
        raise ValueError(f"Destination must be at least 1x1, got {dest_width}x{dest_height}")
    if src_width <= 0 and src_height <= 0:
        return 1, 1
    if src_height <= 0:
        return dest_width, 1
    if src_width <= 0:
        return 1, dest_height

    if src_width * dest_height >= dest_width * src_height:
        width = dest_width
        height = int(src_height * dest_width / src_width + 1e-9)
    else:
        height = dest_height
        width = int(src_width * dest_height / src_height + 1e-9)
    return min(max(width, 1), dest_width), min(max(height, 1), dest_height)


def supersampling_factor(
    local_bounds: Cube, width: int, height: int, max_factor: int = MAX_SUPERSAMPLING
) -> int:
    """Voxels per output pixel, rounded and clamped to ``[1, max_factor]``."""
    extent = max(local_bounds.xd, local_bounds.yd)
    factor = int(round(extent / min(width, height)))
    return min(max(factor, 1), max_factor)


def normalize(values: np.ndarray, intensity_range: Tuple[float, float]) -> np.ndarray:
    """Map ``intensity_range`` onto ``[0, 1]`` without clipping."""
    lo, hi = intensity_range
    span = hi - lo
    values = np.asarray(values, dtype=np.float64)
    if not span > 0:
        return np.zeros_like(values)
    return (values - lo) / span


def cursor_pixel(value: float, lo: float, hi: float, size: int) -> int:
    """Pixel index of a world coordinate along an axis of ``size`` pixels."""
    if not hi > lo:
        return 0
    index = int((value - lo) / (hi - lo) * size)
    return min(max(index, 0), size - 1)


class PairedRowImage(ABC):
    """Image that can be drawn two pixel rows per terminal row."""

    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """``(width, height)`` in pixels."""

    @abstractmethod
    def overlay_char_at(self, x: int, y: int) -> Optional[str]:
        """Overlay glyph for the pixel pair starting at even row ``y``."""

    @abstractmethod
    def color_at(self, x: int, y: int) -> Color:
        """Color of a single pixel."""

    @abstractmethod
    def paired_color_at(self, x: int, y: int) -> Tuple[Color, Color]:
        """``(background, foreground)`` of an overlay cell over rows ``y, y+1``."""


class SliceImage(PairedRowImage):
    """Colorized slice with a crosshair and orientation labels.

    Parameters
    ----------
    values : ndarray
        ``(height, width)`` normalised intensities, row 0 at the bottom.
    cursor : tuple of int, optional
        Crosshair ``(x, y)`` in pixel coordinates.
    labels : tuple of str
        Two-letter labels for the horizontal and vertical axes.
    """

    def __init__(
        self,
        values: np.ndarray,
        color_map: ColorMap,
        color_mode: ColorMode,
        cursor: Optional[Tuple[int, int]] = None,
        labels: Tuple[str, str] = ("  ", "  "),
    ) -> None:
        self.values = np.asarray(values, dtype=np.float64)
        self.color_mode = color_mode
        self.cursor = cursor
        self.labels = labels

        self._colors = reduce_colors(color_map.rgb(self.values), color_mode)
        rows = self.values.shape[0] // 2 * 2
        averaged = (self.values[0:rows:2] + self.values[1:rows:2]) / 2.0
        averaged_rgb = color_map.rgb(averaged)
        self._pair_bg = reduce_colors(averaged_rgb, color_mode)
        self._pair_fg = max_contrast_colors(averaged_rgb, color_mode)

    def size(self) -> Tuple[int, int]:
        height, width = self.values.shape
        return width, height

    def overlay_char_at(self, x: int, y: int) -> Optional[str]:
        if self.cursor is None:
            return None
        cursor_x, cursor_y = self.cursor
        on_column = x == cursor_x
        # Compare row pairs, not rows, so the line does not jump between
        # terminal rows with the parity of the cursor.
        on_row = y // 2 * 2 == cursor_y // 2 * 2
        if not (on_column or on_row):
            return None

        width, height = self.size()
        h_label, v_label = self.labels
        if on_row and x == 0:
            return h_label[0]
        if on_column and y == 0:
            return v_label[0]
        if on_column and y // 2 == height // 2 - 1:
            return v_label[1]
        if on_row and x == width - 1:
            return h_label[1]
        if on_column and on_row:
            return CROSS
        return VERTICAL if on_column else HORIZONTAL

    def color_at(self, x: int, y: int) -> Color:
        return as_color(self._colors[y, x], self.color_mode)

    def paired_color_at(self, x: int, y: int) -> Tuple[Color, Color]:
        pair = y // 2
        return (
            as_color(self._pair_bg[pair, x], self.color_mode),
            as_color(self._pair_fg[pair, x], self.color_mode),
        )


def draw_paired_image(image: PairedRowImage, buffer: CellBuffer, area: Rect) -> None:
    """Write ``image`` centered in ``area``, two pixel rows per cell."""
    width, height = image.size()
    if width > area.width or height > area.height * 2:
        raise ValueError(
            f"Image {width}x{height} does not fit area {area.width}x{area.height * 2}"
        )
    x_offset = (area.width - width) // 2
    y_offset = (area.height * 2 - height) // 2

    for y in range(0, height // 2 * 2, 2):
        row = area.bottom - 1 - (y + y_offset) // 2
        for x in range(width):
            column = area.left + x + x_offset
            glyph = image.overlay_char_at(x, y)
            if glyph is not None:
                bg, fg = image.paired_color_at(x, y)
                buffer.set(column, row, glyph, fg=fg, bg=bg)
            else:
                buffer.set(
                    column,
                    row,
                    LOWER_HALF_BLOCK,
                    fg=image.color_at(x, y),
                    bg=image.color_at(x, y + 1),
                )


def render_slice(
    volume,
    cache: SliceCache,
    params: SliceParams,
    axis: int,
    buffer: CellBuffer,
    area: Rect,
) -> Optional[SliceImage]:
    """Draw the slice through ``params.position`` along ``axis`` into ``area``.

    Returns the drawn image, or ``None`` when ``area`` is empty.
    """
    if area.width < 1 or area.height < 1:
        return None
    slice_axis = SliceAxis.from_index(axis)
    h_axis, v_axis = slice_axis.in_plane
    h_lo, h_hi = volume.world_bounds.bounds(h_axis)
    v_lo, v_hi = volume.world_bounds.bounds(v_axis)

    width, height = fit_relative(h_hi - h_lo, v_hi - v_lo, area.width, area.height * 2)
    # Whole row pairs only, so the cursor row is always drawn.
    height = max(height // 2 * 2, 2)
    factor = supersampling_factor(
        volume.local_bounds, width, height, params.max_supersampling
    )

    depth, h_pos, v_pos = position_2d(params.position, axis)
    key = SliceKey(
        slice_axis, float(depth), params.fill_value, (width * factor, height * factor)
    )
    samples = downsample_2d(cache.get(volume, key), factor)
    values = normalize(samples, params.intensity_range)

    cursor = (
        cursor_pixel(h_pos, h_lo, h_hi, width),
        cursor_pixel(v_pos, v_lo, v_hi, height),
    )
    image = SliceImage(
        values,
        params.color_map,
        params.color_mode,
        cursor=cursor,
        labels=(AXIS_LABELS[h_axis], AXIS_LABELS[v_axis]),
    )
    draw_paired_image(image, buffer, area)
    return image
