"""Visualization subpackage for voxelterm."""

from .cells import Cell, CellBuffer, Rect
from .slice_view import SliceImage, SliceParams, render_slice
from .widgets import draw_border, draw_color_bar, draw_key_value_list, draw_title_bar

__all__ = [
    "Cell",
    "CellBuffer",
    "Rect",
    "SliceImage",
    "SliceParams",
    "render_slice",
    "draw_border",
    "draw_color_bar",
    "draw_key_value_list",
    "draw_title_bar",
]
