"""Intensity to terminal color mapping.

Colors are computed continuously with matplotlib colormaps and then reduced
to what the terminal can show:

* ``TRUECOLOR`` keeps the 24-bit ``Rgb`` value;
* ``ANSI256`` picks the nearest xterm palette index (16-255);
* ``BW`` thresholds the luma to ANSI black (0) or bright white (15).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import NamedTuple, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np

ANSI_BLACK = 0
ANSI_WHITE = 15

# Rec. 709 luma weights and the threshold used to pick black or white.
_LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])
LUMA_THRESHOLD = 128.0


class Rgb(NamedTuple):
    r: int
    g: int
    b: int


# A terminal color is either a 24-bit value or an indexed palette entry.
Color = Union[Rgb, int]


class ColorMode(Enum):
    TRUECOLOR = "truecolor"
    ANSI256 = "ansi256"
    BW = "bw"

    @classmethod
    def from_name(cls, name: str) -> "ColorMode":
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown color mode: {name!r}") from None


@dataclass(frozen=True)
class ColorMap:
    """A named gradient over ``[0, 1]``.

    ``invert`` reverses the direction, e.g. for masks where 0 should be light.
    """

    name: str
    cmap: str
    invert: bool = False

    def rgb(self, values) -> np.ndarray:
        """``uint8`` RGB array of shape ``values.shape + (3,)``.

        Out-of-range inputs are clipped to ``[0, 1]``; NaN maps to 0.
        """
        v = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0)
        v = np.clip(v, 0.0, 1.0)
        if self.invert:
            v = 1.0 - v
        rgba = _get_cmap(self.cmap)(v)
        return np.round(np.asarray(rgba)[..., :3] * 255.0).astype(np.uint8)


COLOR_MAPS: Sequence[ColorMap] = (
    ColorMap("Inferno", "inferno"),
    ColorMap("Viridis", "viridis"),
    ColorMap("Magma", "magma"),
    ColorMap("Plasma", "plasma"),
    ColorMap("Cividis", "cividis"),
    ColorMap("Gray", "gray"),
    ColorMap("Greys", "gray", invert=True),
    ColorMap("Cool-warm", "coolwarm"),
)


@lru_cache
def _get_cmap(name: str):
    return plt.get_cmap(name)


def color_map_by_name(name: str) -> ColorMap:
    """Look up one of :data:`COLOR_MAPS` (case-insensitive)."""
    for cmap in COLOR_MAPS:
        if cmap.name.lower() == name.lower():
            return cmap
    raise ValueError(
        f"Unknown color map {name!r}; choose from {', '.join(c.name for c in COLOR_MAPS)}"
    )


def next_color_map(current: ColorMap) -> ColorMap:
    """The map after ``current`` in :data:`COLOR_MAPS`, wrapping around."""
    try:
        index = COLOR_MAPS.index(current)
    except ValueError:
        return COLOR_MAPS[0]
    return COLOR_MAPS[(index + 1) % len(COLOR_MAPS)]


def luma(rgb) -> np.ndarray:
    """Perceived brightness (0-255) of an ``(..., 3)`` RGB array."""
    return np.asarray(rgb, dtype=np.float64) @ _LUMA_WEIGHTS


@lru_cache(maxsize=1)
def _xterm_palette() -> np.ndarray:
    """RGB values of xterm colors 16-255."""
    levels = np.array([0, 95, 135, 175, 215, 255])
    cube = np.array([(r, g, b) for r in levels for g in levels for b in levels])
    grays = np.array([(v, v, v) for v in range(8, 248, 10)])
    return np.vstack([cube, grays]).astype(np.float64)


def ansi256_from_rgb(rgb) -> np.ndarray:
    """Nearest xterm-256 index for each color of an ``(..., 3)`` array."""
    arr = np.asarray(rgb, dtype=np.float64)
    # Colormaps are 256-entry lookup tables, so match unique colors only.
    unique, inverse = np.unique(arr.reshape(-1, 3), axis=0, return_inverse=True)
    dist = ((unique[:, None, :] - _xterm_palette()) ** 2).sum(axis=-1)
    indices = np.argmin(dist, axis=1) + 16
    return indices[inverse.ravel()].reshape(arr.shape[:-1])


def reduce_colors(rgb: np.ndarray, mode: ColorMode) -> np.ndarray:
    """Convert an RGB array to ``mode``.

    ``TRUECOLOR`` returns the RGB array unchanged; the other modes return an
    integer array of palette indices with the color axis removed.
    """
    if mode is ColorMode.TRUECOLOR:
        return rgb
    if mode is ColorMode.ANSI256:
        return ansi256_from_rgb(rgb)
    return np.where(luma(rgb) < LUMA_THRESHOLD, ANSI_BLACK, ANSI_WHITE)


def max_contrast_colors(rgb: np.ndarray, mode: ColorMode) -> np.ndarray:
    """Black or white, whichever reads best on top of each color."""
    dark = luma(rgb) < LUMA_THRESHOLD
    if mode is ColorMode.TRUECOLOR:
        out = np.zeros(np.shape(rgb), dtype=np.uint8)
        out[dark] = 255
        return out
    if mode is ColorMode.ANSI256:
        return np.where(dark, 231, 16)
    return np.where(dark, ANSI_WHITE, ANSI_BLACK)


def as_color(value, mode: ColorMode) -> Color:
    """Turn one element of a reduced color array into a :data:`Color`."""
    if mode is ColorMode.TRUECOLOR:
        r, g, b = (int(c) for c in value)
        return Rgb(r, g, b)
    return int(value)


def calc_termcolor(mode: ColorMode, cmap: ColorMap, value: float) -> Color:
    """Terminal color of a normalised intensity."""
    return as_color(reduce_colors(cmap.rgb(value), mode), mode)


def calc_termcolor_max_contrast(mode: ColorMode, cmap: ColorMap, value: float) -> Color:
    """Black or white overlay color for a normalised intensity."""
    return as_color(max_contrast_colors(cmap.rgb(value), mode), mode)
