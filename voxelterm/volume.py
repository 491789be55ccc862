"""Scalar volumes and the NIfTI loader.

Two coordinate frames are used throughout:

* **local** space is the voxel index grid of the array (one unit per voxel);
* **world** space is the scanner frame obtained by applying the affine.

Navigation happens in world space so that slice spacing is physically
uniform regardless of voxel anisotropy.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import time
import zlib
from typing import Any, Optional, Tuple

import nibabel as nib
from nibabel.filebasedimages import ImageFileError
from nibabel.spatialimages import HeaderDataError
import numpy as np

from .affine import apply_affine, invert_affine
from .cube import Cube
from .exceptions import SingularAffineError, VolumeLoadError
from .sampling import map_coordinates_3d, slice_grid_coords

LOGGER = logging.getLogger(__name__)

# nibabel spatial unit names -> short labels shown in panel titles.
_UNIT_LABELS = {
    "unknown": "au",
    "meter": "m",
    "mm": "mm",
    "micron": "µm",
}


@dataclass(frozen=True, eq=False)
class VolumeHeader:
    """Header fields the viewer relies on."""

    affine: np.ndarray
    spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    display_range: Optional[Tuple[float, float]] = None
    dtype: np.dtype = np.dtype(np.float64)
    space_units: str = "au"
    # Full nibabel header, used for the metadata listing.
    raw: Any = None

    @classmethod
    def from_nifti(cls, img) -> "VolumeHeader":
        """Extract the fields from a nibabel spatial image."""
        header = img.header
        zooms = tuple(float(z) for z in header.get_zooms()[:3])
        zooms = zooms + (1.0,) * (3 - len(zooms))

        display_range = None
        units = "unknown"
        try:
            cal_min = float(header["cal_min"])
            cal_max = float(header["cal_max"])
            if cal_max > cal_min:
                display_range = (cal_min, cal_max)
            units = header.get_xyzt_units()[0]
        except (KeyError, AttributeError, ValueError):
            # Analyze and MGH headers carry neither field.
            pass

        return cls(
            affine=np.array(img.affine, dtype=np.float64),
            spacing=zooms,
            display_range=display_range,
            dtype=np.dtype(header.get_data_dtype()),
            space_units=_UNIT_LABELS.get(units, units),
            raw=header,
        )


def first_3d_view(array: np.ndarray) -> np.ndarray:
    """View of the first 3D sub-array (index 0 along a fourth axis)."""
    if array.ndim == 3:
        return array
    return array[..., 0]


class Volume:
    """Immutable scalar volume with its local/world geometry.

    Parameters
    ----------
    array : ndarray
        Scalars indexed ``[i, j, k]`` or ``[i, j, k, t]``; only ``t = 0`` is
        displayed.
    header : VolumeHeader
        Affine and the other header fields.

    Raises
    ------
    VolumeLoadError
        For unsupported dimensionality or a singular affine.
    """

    def __init__(self, array: np.ndarray, header: VolumeHeader) -> None:
        data = np.array(array, dtype=np.float64)
        if data.ndim not in (3, 4):
            raise VolumeLoadError(
                f"Unsupported dimensionality: expected 3 or 4 axes, got {data.ndim}"
            )
        if data.size == 0:
            raise VolumeLoadError(f"Volume is empty (shape {data.shape})")
        data.setflags(write=False)

        affine = np.array(header.affine, dtype=np.float64)
        try:
            affine_inv = invert_affine(affine)
        except SingularAffineError as exc:
            raise VolumeLoadError(f"Invalid affine transform: {exc}") from exc
        affine.setflags(write=False)
        affine_inv.setflags(write=False)

        self.array = data
        self.array_3d = first_3d_view(data)
        self.header = header
        self.affine = affine
        self.affine_inv = affine_inv

        self.local_bounds = Cube.from_shape(self.array_3d.shape)
        world_corners = apply_affine(affine, self.local_bounds.corner_coords())
        self.world_bounds = Cube.from_coords(world_corners)
        self.intensity_range = _intensity_range(self.array_3d)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return tuple(self.array_3d.shape)

    def slice(
        self,
        axis: int,
        depth: float,
        fill_value: Optional[float],
        resolution: Tuple[int, int],
    ) -> np.ndarray:
        """Resample the plane ``axis == depth`` (world units).

        Parameters
        ----------
        axis : int
            0, 1 or 2 (world X, Y, Z).
        depth : float
            World coordinate of the plane along ``axis``.
        fill_value : float or None
            Out-of-volume policy, see :func:`~voxelterm.sampling.map_coordinates_3d`.
        resolution : tuple of int
            ``(width, height)`` of the output grid.

        Returns
        -------
        ndarray
            ``(height, width)`` array; row 0 is the low end of the vertical
            axis and column 0 the low end of the horizontal axis.
        """
        width, height = resolution
        world = slice_grid_coords(axis, width, height, depth, self.world_bounds)
        local = apply_affine(self.affine_inv, world)
        values = map_coordinates_3d(self.array_3d, local, fill_value)
        return values.reshape(height, width)

    def guess_is_mask(self) -> bool:
        """Integer data whose values span exactly ``[0, 1]``."""
        lo, hi = self.intensity_range
        return (
            np.issubdtype(self.header.dtype, np.integer)
            and abs(lo) < 1.0e-7
            and abs(hi - 1.0) < 1.0e-7
        )


def _intensity_range(array: np.ndarray) -> Tuple[float, float]:
    finite = array[np.isfinite(array)]
    if finite.size == 0:
        return 0.0, 0.0
    return float(finite.min()), float(finite.max())


def load_volume(path: os.PathLike) -> Volume:
    """Read a NIfTI (or any nibabel-supported) image into a :class:`Volume`.

    Raises
    ------
    VolumeLoadError
        When the file is missing, cannot be parsed, has an unsupported data
        type or dimensionality, or carries a singular affine.
    """
    path = Path(path)
    if not path.is_file():
        raise VolumeLoadError(f"File not found: {path}")

    start = time.perf_counter()
    try:
        img = nib.load(str(path))
    except (ImageFileError, HeaderDataError, OSError, ValueError, EOFError, zlib.error) as exc:
        raise VolumeLoadError(f"Could not read image {path}: {exc}") from exc

    shape = img.shape
    if len(shape) not in (3, 4):
        raise VolumeLoadError(
            f"Unsupported dimensionality: expected 3 or 4 axes, got {len(shape)} {shape}"
        )

    header = VolumeHeader.from_nifti(img)
    if header.dtype.fields is not None or np.issubdtype(header.dtype, np.complexfloating):
        raise VolumeLoadError(f"Unsupported data type: {header.dtype}")

    try:
        if len(shape) == 4:
            # Only the first volume of a series is displayed.
            data = np.asarray(img.dataobj[..., 0], dtype=np.float64)[..., np.newaxis]
        else:
            data = img.get_fdata(dtype=np.float64)
    except (TypeError, ValueError, OSError, EOFError, zlib.error) as exc:
        raise VolumeLoadError(f"Could not read voxel data from {path}: {exc}") from exc

    volume = Volume(data, header)
    LOGGER.info(
        "Loaded %s: shape %s, range [%g, %g] in %.3f s",
        path.name,
        shape,
        volume.intensity_range[0],
        volume.intensity_range[1],
        time.perf_counter() - start,
    )
    return volume
