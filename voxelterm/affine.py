"""4x4 homogeneous affine helpers.

Coordinate batches are ``4 x N`` arrays: one homogeneous point per column.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .exceptions import SingularAffineError


def affine_from_rows(
    srow_x: Sequence[float], srow_y: Sequence[float], srow_z: Sequence[float]
) -> np.ndarray:
    """Build the homogeneous matrix from the three NIfTI ``srow`` rows."""
    return np.array(
        [list(srow_x), list(srow_y), list(srow_z), [0.0, 0.0, 0.0, 1.0]],
        dtype=np.float64,
    )


def apply_affine(affine: np.ndarray, coords: np.ndarray) -> np.ndarray:
    """Map a ``4 x N`` batch of homogeneous coordinates through ``affine``."""
    return np.asarray(affine, dtype=np.float64) @ np.asarray(coords, dtype=np.float64)


def invert_affine(affine: np.ndarray) -> np.ndarray:
    """Return the inverse of a 4x4 affine.

    Raises
    ------
    SingularAffineError
        If the matrix is not finite or has no inverse.  This indicates a
        corrupt header and callers are not expected to recover from it.
    """
    matrix = np.asarray(affine, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise SingularAffineError(f"Expected a 4x4 affine, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise SingularAffineError("Affine contains non-finite values")
    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError as exc:
        raise SingularAffineError("Affine is singular") from exc
    if not np.all(np.isfinite(inverse)):
        raise SingularAffineError("Affine is singular")
    return inverse
