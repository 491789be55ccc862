"""Least-recently-used cache of resampled slices.

Keys contain floating point fields.  They compare and hash on the raw IEEE-754
bit pattern rather than on numeric value: depths come from quantised
navigation steps and repeat exactly between redraws, so two depths that differ
only by rounding (or ``0.0`` and ``-0.0``) are deliberately separate entries.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import logging
import struct
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULT_CACHE_CAPACITY
from .sampling import SliceAxis

LOGGER = logging.getLogger(__name__)


def float_bits(value: Optional[float]) -> Optional[int]:
    """Raw 64-bit pattern of ``value`` (``None`` passes through)."""
    if value is None:
        return None
    return struct.unpack("<q", struct.pack("<d", float(value)))[0]


@dataclass(frozen=True, eq=False)
class SliceKey:
    """Parameters identifying one resampled slice."""

    axis: SliceAxis
    depth: float
    fill_value: Optional[float]
    resolution: Tuple[int, int]

    def __post_init__(self) -> None:
        object.__setattr__(self, "axis", SliceAxis.from_index(self.axis))
        width, height = self.resolution
        if width < 1 or height < 1:
            raise ValueError(f"Slice resolution must be positive, got {self.resolution}")
        object.__setattr__(self, "resolution", (int(width), int(height)))

    def _identity(self):
        return (
            int(self.axis),
            float_bits(self.depth),
            float_bits(self.fill_value),
            self.resolution,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SliceKey):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class SliceCache:
    """Read-through LRU cache in front of :meth:`Volume.slice`.

    Only one entry is stored per key.  The cache is owned by the application
    state and used from the render path only, so it does no locking.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[SliceKey, np.ndarray]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: SliceKey) -> bool:
        return key in self._entries

    def get(self, volume, key: SliceKey) -> np.ndarray:
        """Return the slice for ``key``, computing it on a miss.

        The returned array is read-only and shared with the cache.
        """
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
            self.hits += 1
            return entry

        self.misses += 1
        entry = volume.slice(key.axis, key.depth, key.fill_value, key.resolution)
        entry.setflags(write=False)
        self._entries[key] = entry
        # The new entry sits at the end, so eviction never touches it.
        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            LOGGER.debug("Evicted slice %s", evicted)
        return entry

    def clear(self) -> None:
        self._entries.clear()
