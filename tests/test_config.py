from __future__ import annotations

import logging
from pathlib import Path

import pytest

from voxelterm import config as config_module
from voxelterm.config import ViewerConfig, load_config, parse_config
from voxelterm.exceptions import ConfigError


def test_defaults():
    cfg = ViewerConfig()
    assert cfg.cache_capacity == 50
    assert cfg.max_supersampling == 16
    assert cfg.step_divisions == 32
    assert cfg.color_mode == "truecolor"
    assert cfg.color_map is None


@pytest.mark.parametrize(
    "values",
    [
        {"cache_capacity": 0},
        {"cache_capacity": "many"},
        {"max_supersampling": True},
        {"step_divisions": -2},
        {"color_mode": "sepia"},
        {"color_map": 3},
    ],
)
def test_invalid_values(values):
    with pytest.raises(ConfigError):
        ViewerConfig(**values)


def test_with_overrides_ignores_none():
    cfg = ViewerConfig().with_overrides(color_mode=None, cache_capacity=5)
    assert cfg.color_mode == "truecolor"
    assert cfg.cache_capacity == 5


def test_parse_config_warns_about_unknown_keys(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = parse_config({"cache_capacity": 7, "colour": "red"})
    assert cfg.cache_capacity == 7
    assert "colour" in caplog.text


def test_parse_config_requires_mapping():
    assert parse_config(None) == ViewerConfig()
    with pytest.raises(ConfigError):
        parse_config(["cache_capacity", 3])


def test_load_config_from_file(tmp_path: Path):
    path = tmp_path / "viewer.yaml"
    path.write_text("cache_capacity: 12\ncolor_mode: ansi256\ncolor_map: Magma\n")
    cfg = load_config(path)
    assert cfg == ViewerConfig(cache_capacity=12, color_mode="ansi256", color_map="Magma")


def test_load_config_from_environment(tmp_path: Path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("step_divisions: 8\n")
    monkeypatch.setenv(config_module.CONFIG_ENV_VAR, str(path))
    assert load_config().step_divisions == 8


def test_load_config_without_any_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv(config_module.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")
    assert load_config() == ViewerConfig()


def test_load_config_missing_explicit_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_load_config_invalid_yaml(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("cache_capacity: [1, 2\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(path)


def test_load_config_empty_file(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == ViewerConfig()
