"""Screen layout: title bar, body and color bar."""

from __future__ import annotations

from .app import MODE_TITLES, App, AppMode
from .visualization.cells import CellBuffer, Rect
from .visualization.slice_view import render_slice
from .visualization.widgets import (
    draw_border,
    draw_color_bar,
    draw_key_value_list,
    draw_title_bar,
)

# Panel titles per world axis (direction of increasing coordinate).
COORDS = ("Right", "Anterior", "Superior")


def panel_areas(body: Rect):
    """Split ``body`` into three side-by-side panels; the last takes the rest."""
    width = body.width // 3
    areas = []
    for i in range(3):
        x = body.x + i * width
        w = width if i < 2 else body.right - x
        areas.append(Rect(x, body.y, w, body.height))
    return areas


def render_xyz(app: App, buffer: CellBuffer, body: Rect) -> None:
    params = app.slice_params()
    units = app.volume.header.space_units
    for axis, area in enumerate(panel_areas(body)):
        title = f"{COORDS[axis]} = {params.position[axis]:.2f} {units}"
        inner = draw_border(buffer, area, title)
        render_slice(app.volume, app.cache, params, axis, buffer, inner)


def render(app: App, buffer: CellBuffer) -> None:
    """Draw the whole screen for the current ``app`` state into ``buffer``."""
    screen = buffer.area
    if screen.height < 1 or screen.width < 1:
        return
    title = Rect(0, 0, screen.width, 1)
    draw_title_bar(buffer, title, app.file_path, MODE_TITLES, app.mode_index)
    if screen.height < 3:
        return

    body = Rect(0, 1, screen.width, screen.height - 2)
    if app.mode is AppMode.XYZ:
        render_xyz(app, buffer, body)
    else:
        draw_key_value_list(buffer, body, app.metadata, app.metadata_index)

    bar = Rect(0, screen.height - 1, screen.width, 1)
    draw_color_bar(buffer, bar, app.color_map, app.color_mode, app.intensity_range)
