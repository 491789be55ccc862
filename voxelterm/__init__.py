"""Terminal viewer for NIfTI volumes."""

from importlib import metadata

# The loader, the volume model and the slice cache form the public API; the
# rest is the interactive viewer built on top of them.
from .exceptions import ConfigError, SingularAffineError, VolumeLoadError, VoxeltermError
from .slice_cache import SliceCache, SliceKey
from .volume import Volume, VolumeHeader, load_volume

__all__ = [
    "__version__",
    "ConfigError",
    "SingularAffineError",
    "SliceCache",
    "SliceKey",
    "Volume",
    "VolumeHeader",
    "VolumeLoadError",
    "VoxeltermError",
    "load_volume",
]

try:  # pragma: no cover - version resolution
    __version__ = metadata.version("voxelterm")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
