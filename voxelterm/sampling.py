"""Slice grids, trilinear interpolation and block downsampling.

Every slice is described by the axis held fixed and the pair of in-plane
axes it sweeps.  The pairing below is the single source of truth for both the
sampler and the crosshair overlay in :mod:`voxelterm.visualization.slice_view`:

====  ==========  ========
axis  horizontal  vertical
====  ==========  ========
X     Y           Z
Y     X           Z
Z     X           Y
====  ==========  ========
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Sequence, Tuple, TypeVar

import numpy as np

from .cube import Cube

T = TypeVar("T")

_IN_PLANE = {0: (1, 2), 1: (0, 2), 2: (0, 1)}


class SliceAxis(IntEnum):
    """World axis held constant by a slice."""

    X = 0
    Y = 1
    Z = 2

    @classmethod
    def from_index(cls, index: int) -> "SliceAxis":
        try:
            return cls(index)
        except ValueError:
            raise ValueError(f"Unsupported axis: {index!r}") from None

    @property
    def label(self) -> str:
        return self.name

    @property
    def in_plane(self) -> Tuple[int, int]:
        """Indices of the ``(horizontal, vertical)`` axes of the slice."""
        return _IN_PLANE[int(self)]


def position_2d(values: Sequence[T], axis: int) -> Tuple[T, T, T]:
    """Split a per-axis triple into ``(depth, horizontal, vertical)``."""
    h_axis, v_axis = SliceAxis.from_index(axis).in_plane
    return values[axis], values[h_axis], values[v_axis]


def slice_grid_coords(
    axis: int, width: int, height: int, depth: float, cube: Cube
) -> np.ndarray:
    """Regular grid of homogeneous points on the plane ``axis == depth``.

    The grid spans the in-plane extent of ``cube`` with ``width`` samples
    horizontally and ``height`` vertically, both edges included.  Points are
    ordered row-major over ``(vertical, horizontal)`` and returned as a
    ``4 x (width * height)`` batch.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Grid resolution must be positive, got {width}x{height}")
    slice_axis = SliceAxis.from_index(axis)
    h_axis, v_axis = slice_axis.in_plane
    h_lo, h_hi = cube.bounds(h_axis)
    v_lo, v_hi = cube.bounds(v_axis)

    hh, vv = np.meshgrid(
        np.linspace(h_lo, h_hi, width),
        np.linspace(v_lo, v_hi, height),
    )
    coords = np.empty((4, width * height), dtype=np.float64)
    coords[int(slice_axis)] = depth
    coords[h_axis] = hh.ravel()
    coords[v_axis] = vv.ravel()
    coords[3] = 1.0
    return coords


def map_coordinates_3d(
    array: np.ndarray, coords: np.ndarray, fill_value: Optional[float] = None
) -> np.ndarray:
    """Trilinearly interpolate ``array`` at each column of ``coords``.

    Parameters
    ----------
    array : ndarray
        3D scalar field indexed ``[i, j, k]``.
    coords : ndarray
        ``3 x N`` or ``4 x N`` batch of local (voxel) coordinates.
    fill_value : float, optional
        ``None`` (the default) clamps points outside the array to its edge
        voxels.  A number is returned instead for points outside
        ``[0, dim - 1]`` on any axis.

    Returns
    -------
    ndarray
        ``N`` interpolated values.
    """
    data = np.asarray(array, dtype=np.float64)
    points = np.asarray(coords, dtype=np.float64)[:3]
    upper = np.array(data.shape[:3], dtype=np.float64)[:, None] - 1.0

    clamped = np.clip(points, 0.0, upper)
    # Keep the upper neighbour inside the array; on the last voxel the
    # fractional part becomes 1 instead of stepping out of bounds.
    base = np.minimum(np.floor(clamped), np.maximum(upper - 1.0, 0.0))
    frac = clamped - base
    base = base.astype(np.intp)
    nxt = np.minimum(base + 1, upper.astype(np.intp))

    x0, y0, z0 = base
    x1, y1, z1 = nxt
    dx, dy, dz = frac
    ex, ey, ez = 1.0 - dx, 1.0 - dy, 1.0 - dz

    values = (
        ex * ey * ez * data[x0, y0, z0]
        + dx * ey * ez * data[x1, y0, z0]
        + ex * dy * ez * data[x0, y1, z0]
        + dx * dy * ez * data[x1, y1, z0]
        + ex * ey * dz * data[x0, y0, z1]
        + dx * ey * dz * data[x1, y0, z1]
        + ex * dy * dz * data[x0, y1, z1]
        + dx * dy * dz * data[x1, y1, z1]
    )

    if fill_value is not None:
        outside = np.any((points < 0.0) | (points > upper), axis=0)
        values[outside] = fill_value
    return values


def downsample_2d(array: np.ndarray, factor: int) -> np.ndarray:
    """Average non-overlapping ``factor x factor`` blocks.

    Trailing rows and columns that do not fill a whole block are dropped.
    """
    if factor < 1:
        raise ValueError(f"Downsampling factor must be positive, got {factor}")
    data = np.asarray(array, dtype=np.float64)
    if factor == 1:
        return data
    rows = data.shape[0] // factor
    cols = data.shape[1] // factor
    blocks = data[: rows * factor, : cols * factor].reshape(rows, factor, cols, factor)
    return blocks.mean(axis=(1, 3))
