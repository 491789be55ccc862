"""Viewer configuration.

Defaults live in :class:`ViewerConfig`.  Users may override them with a small
YAML file, looked up in this order:

1. the path given on the command line (``--config``),
2. the ``VOXELTERM_CONFIG`` environment variable,
3. ``~/.config/voxelterm/config.yaml``.

A missing default file is not an error; a missing explicit file is.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "VOXELTERM_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/voxelterm/config.yaml").expanduser()

# Number of slices kept by the slice cache before LRU eviction.
DEFAULT_CACHE_CAPACITY = 50
# Upper bound for the supersampling factor used for anti-aliasing.
MAX_SUPERSAMPLING = 16
# The navigation step is the smallest world extent divided by this.
DEFAULT_STEP_DIVISIONS = 32

COLOR_MODE_NAMES = ("truecolor", "ansi256", "bw")


@dataclass(frozen=True)
class ViewerConfig:
    """Tunable viewer settings."""

    cache_capacity: int = DEFAULT_CACHE_CAPACITY
    max_supersampling: int = MAX_SUPERSAMPLING
    step_divisions: int = DEFAULT_STEP_DIVISIONS
    color_mode: str = "truecolor"
    # ``None`` lets the viewer pick a map from the data (masks get greys).
    color_map: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("cache_capacity", "max_supersampling", "step_divisions"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.color_mode not in COLOR_MODE_NAMES:
            raise ConfigError(
                f"color_mode must be one of {', '.join(COLOR_MODE_NAMES)}, "
                f"got {self.color_mode!r}"
            )
        if self.color_map is not None and not isinstance(self.color_map, str):
            raise ConfigError(f"color_map must be a string, got {self.color_map!r}")

    def with_overrides(self, **overrides: Any) -> "ViewerConfig":
        """Return a copy with the non-``None`` ``overrides`` applied."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        if applied:
            LOGGER.info("Configuration overrides: %s", applied)
        return replace(self, **applied)


@lru_cache
def _load_yaml(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _resolve_path(path: Optional[os.PathLike]) -> Optional[Path]:
    if path is not None:
        return Path(path).expanduser()
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    if DEFAULT_CONFIG_PATH.is_file():
        return DEFAULT_CONFIG_PATH
    return None


def parse_config(data: Optional[Dict[str, Any]]) -> ViewerConfig:
    """Build a :class:`ViewerConfig` from a mapping read from YAML.

    Unknown keys are logged and ignored so that newer config files keep
    working with older releases.
    """
    if data is None:
        return ViewerConfig()
    if not isinstance(data, dict):
        raise ConfigError("Configuration file must contain a mapping at top level")

    known = {f.name for f in fields(ViewerConfig)}
    values = {}
    for key, value in data.items():
        if key in known:
            values[key] = value
        else:
            LOGGER.warning("Ignoring unknown configuration key %r", key)
    return ViewerConfig(**values)


def load_config(path: Optional[os.PathLike] = None) -> ViewerConfig:
    """Load the viewer configuration, falling back to the defaults."""
    resolved = _resolve_path(path)
    if resolved is None:
        return ViewerConfig()
    if not resolved.is_file():
        raise ConfigError(f"Configuration file not found: {resolved}")
    try:
        data = _load_yaml(resolved)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {resolved}: {exc}") from exc
    config = parse_config(data)
    LOGGER.info("Loaded configuration from %s", resolved)
    return config
