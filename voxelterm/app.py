"""Application state and key handling for the viewer."""

from __future__ import annotations

from enum import Enum
import logging
import os
from typing import Optional

import numpy as np

from .colors import ColorMap, ColorMode, color_map_by_name, next_color_map
from .config import ViewerConfig
from .metadata import KeyValueList, make_metadata_entries
from .sampling import SliceAxis
from .slice_cache import SliceCache
from .visualization.slice_view import SliceParams
from .volume import Volume, load_volume

LOGGER = logging.getLogger(__name__)


class AppMode(Enum):
    XYZ = "Voxel"
    METADATA = "Metadata"


MODE_TITLES = tuple(mode.value for mode in AppMode)

# Key name -> (axis, direction) in the slice view.
_NAVIGATION = {
    "right": (SliceAxis.X, 1),
    "d": (SliceAxis.X, 1),
    "left": (SliceAxis.X, -1),
    "a": (SliceAxis.X, -1),
    "up": (SliceAxis.Y, 1),
    "w": (SliceAxis.Y, 1),
    "down": (SliceAxis.Y, -1),
    "s": (SliceAxis.Y, -1),
    "z": (SliceAxis.Z, 1),
    "y": (SliceAxis.Z, 1),
    "x": (SliceAxis.Z, -1),
}

QUIT_KEYS = ("q", "esc", "ctrl-c")


class App:
    """Everything the UI needs between two redraws.

    The slice cache lives here for the lifetime of the application and is
    handed to the renderer on every frame.
    """

    def __init__(
        self,
        volume: Volume,
        file_path: str = "",
        config: Optional[ViewerConfig] = None,
    ) -> None:
        self.config = config or ViewerConfig()
        self.volume = volume
        self.file_path = file_path
        self.cache = SliceCache(self.config.cache_capacity)
        self.running = True
        self.mode = AppMode.XYZ

        if volume.header.display_range is not None:
            self.intensity_range = volume.header.display_range
        else:
            self.intensity_range = volume.intensity_range

        world = volume.world_bounds
        self.position = np.array(world.center(), dtype=np.float64)
        self.increment = float(np.min(world.size())) / self.config.step_divisions

        self.color_mode = ColorMode.from_name(self.config.color_mode)
        self.color_map = self._initial_color_map()

        self.metadata: KeyValueList = make_metadata_entries(volume)
        self.metadata_index = 0

    @classmethod
    def from_file(cls, path: os.PathLike, config: Optional[ViewerConfig] = None) -> "App":
        """Load ``path`` and build the initial state."""
        return cls(load_volume(path), file_path=str(path), config=config)

    def _initial_color_map(self) -> ColorMap:
        if self.config.color_map is not None:
            try:
                return color_map_by_name(self.config.color_map)
            except ValueError as exc:
                LOGGER.warning("%s; using the default", exc)
        if self.volume.guess_is_mask():
            return color_map_by_name("Greys")
        return color_map_by_name("Inferno")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def increment_slice(self, axis: int) -> None:
        """Step forward along ``axis`` unless that would leave the volume."""
        axis = SliceAxis.from_index(axis)
        _, hi = self.volume.world_bounds.bounds(axis)
        if self.position[axis] <= hi - self.increment:
            self.position[axis] += self.increment

    def decrement_slice(self, axis: int) -> None:
        """Step backward along ``axis`` unless that would leave the volume."""
        axis = SliceAxis.from_index(axis)
        lo, _ = self.volume.world_bounds.bounds(axis)
        if self.position[axis] >= lo + self.increment:
            self.position[axis] -= self.increment

    def increment_metadata_index(self) -> None:
        if self.metadata_index < len(self.metadata) - 2:
            self.metadata_index += 1

    def decrement_metadata_index(self) -> None:
        if self.metadata_index > 0:
            self.metadata_index -= 1

    def toggle_tab(self) -> None:
        self.mode = AppMode.METADATA if self.mode is AppMode.XYZ else AppMode.XYZ

    def toggle_color_map(self) -> None:
        self.color_map = next_color_map(self.color_map)
        LOGGER.debug("Color map: %s", self.color_map.name)

    def quit(self) -> None:
        self.running = False

    def handle_key(self, key: str) -> None:
        """Apply one key press (names as produced by :mod:`voxelterm.terminal`)."""
        if key in QUIT_KEYS:
            self.quit()
        elif key == "tab":
            self.toggle_tab()
        elif key == "c":
            self.toggle_color_map()
        elif self.mode is AppMode.METADATA:
            if key in ("up", "w"):
                self.decrement_metadata_index()
            elif key in ("down", "s"):
                self.increment_metadata_index()
        elif key in _NAVIGATION:
            axis, direction = _NAVIGATION[key]
            if direction > 0:
                self.increment_slice(axis)
            else:
                self.decrement_slice(axis)

    @property
    def mode_index(self) -> int:
        return list(AppMode).index(self.mode)

    def slice_params(self) -> SliceParams:
        return SliceParams(
            position=tuple(float(p) for p in self.position),
            intensity_range=self.intensity_range,
            color_map=self.color_map,
            color_mode=self.color_mode,
            max_supersampling=self.config.max_supersampling,
        )
