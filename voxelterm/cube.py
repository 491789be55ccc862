"""Axis-aligned bounding boxes in voxel (local) or scanner (world) space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Cube:
    """Axis-aligned box ``[x0, x1] x [y0, y1] x [z0, z1]``.

    Lower bounds must not exceed upper bounds; violating this is a bug in the
    caller and raises :class:`ValueError`.
    """

    x0: float
    y0: float
    z0: float
    x1: float
    y1: float
    z1: float

    def __post_init__(self) -> None:
        if not (self.x0 <= self.x1 and self.y0 <= self.y1 and self.z0 <= self.z1):
            raise ValueError(f"Cube bounds are inverted: {self}")

    @property
    def xd(self) -> float:
        return self.x1 - self.x0

    @property
    def yd(self) -> float:
        return self.y1 - self.y0

    @property
    def zd(self) -> float:
        return self.z1 - self.z0

    @classmethod
    def from_shape(cls, shape: Sequence[int]) -> "Cube":
        """Local-space cube spanning voxel indices ``0 .. dim-1``."""
        x, y, z = (float(dim - 1) for dim in shape[:3])
        return cls(0.0, 0.0, 0.0, x, y, z)

    @classmethod
    def from_coords(cls, coords: np.ndarray) -> "Cube":
        """Smallest cube containing every point of a ``4 x N`` batch.

        The homogeneous fourth row is ignored.
        """
        points = np.asarray(coords, dtype=np.float64)[:3]
        lo = points.min(axis=1)
        hi = points.max(axis=1)
        return cls(*(float(v) for v in lo), *(float(v) for v in hi))

    def corner_coords(self) -> np.ndarray:
        """The eight corners as a ``4 x 8`` homogeneous batch.

        The order is fixed: both extremes first, then the remaining corners.
        """
        return np.array(
            [
                [self.x0, self.y0, self.z0, 1.0],
                [self.x1, self.y1, self.z1, 1.0],
                [self.x1, self.y0, self.z0, 1.0],
                [self.x0, self.y1, self.z1, 1.0],
                [self.x0, self.y0, self.z1, 1.0],
                [self.x1, self.y1, self.z0, 1.0],
                [self.x1, self.y0, self.z1, 1.0],
                [self.x0, self.y1, self.z0, 1.0],
            ],
            dtype=np.float64,
        ).T

    def center(self) -> np.ndarray:
        return np.array(
            [(self.x0 + self.x1) / 2.0, (self.y0 + self.y1) / 2.0, (self.z0 + self.z1) / 2.0]
        )

    def min(self) -> np.ndarray:
        return np.array([self.x0, self.y0, self.z0])

    def max(self) -> np.ndarray:
        return np.array([self.x1, self.y1, self.z1])

    def size(self) -> np.ndarray:
        return np.array([self.xd, self.yd, self.zd])

    def bounds(self, axis: int) -> Tuple[float, float]:
        """``(low, high)`` along ``axis`` (0, 1 or 2)."""
        if axis == 0:
            return self.x0, self.x1
        if axis == 1:
            return self.y0, self.y1
        if axis == 2:
            return self.z0, self.z1
        raise ValueError(f"Unsupported axis: {axis}")

    def contains(self, coords: np.ndarray) -> bool:
        """``True`` when every point of a ``4 x N`` batch lies inside."""
        points = np.asarray(coords, dtype=np.float64)[:3]
        lo = self.min()[:, None]
        hi = self.max()[:, None]
        return bool(np.all((points >= lo) & (points <= hi)))
