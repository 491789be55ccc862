"""Exception types raised by :mod:`voxelterm`."""

from __future__ import annotations


class VoxeltermError(Exception):
    """Base class for errors reported to the user."""


class VolumeLoadError(VoxeltermError):
    """A scan could not be turned into a :class:`~voxelterm.volume.Volume`.

    Raised for unreadable paths, unparseable headers, unsupported array
    dimensionality or data types and singular affines.  There is no partially
    initialised volume: construction either succeeds or raises this.
    """


class SingularAffineError(ValueError):
    """The 4x4 affine has no inverse."""


class ConfigError(VoxeltermError, ValueError):
    """Invalid value in a configuration file."""
