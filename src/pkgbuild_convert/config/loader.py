"""Configuration loader with support for drop-in directories."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from pkgbuild_convert.config.defaults import DEFAULT_CONFIG_YAML
from pkgbuild_convert.config.schema import Config

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "pkgbuild-convert" / "config.yaml"
DEFAULT_DROPIN_DIR = Path.home() / ".config" / "pkgbuild-convert" / "conf.d"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base section by section.

    Mappings merge key by key; any other value replaces the base value. A key
    set to null in override removes it, so a drop-in file can turn off a
    default entry such as ``file_operations: {rm: null}``.
    """
    merged = dict(base)

    for key, value in override.items():
        if value is None:
            merged.pop(key, None)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def default_data() -> dict[str, Any]:
    """Built-in configuration as a plain dictionary."""
    return yaml.safe_load(DEFAULT_CONFIG_YAML)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Read one configuration file; a missing or empty file gives an empty dict.

    Raises:
        ValueError: If the document is not a mapping
    """
    if not path.is_file():
        return {}

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def load_dropin_directory(dropin_dir: Path, base: dict[str, Any] | None = None) -> dict[str, Any]:
    """Merge every ``*.yaml``/``*.yml`` file of a directory onto base, in file name order."""
    merged = dict(base or {})
    if not dropin_dir.is_dir():
        return merged

    files = sorted(path for path in dropin_dir.iterdir() if path.suffix in (".yaml", ".yml"))

    for path in files:
        merged = deep_merge(merged, load_yaml_file(path))
    return merged


def load_config(
    config_path: Path | str | None = None,
    dropin_dir: Path | str | None = None,
) -> Config:
    """Load configuration from defaults, config file and drop-in directory.

    Args:
        config_path: Path to main config file (default: ~/.config/pkgbuild-convert/config.yaml)
        dropin_dir: Path to drop-in directory (default: ~/.config/pkgbuild-convert/conf.d/)

    Returns:
        Merged configuration object
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    elif isinstance(config_path, str):
        config_path = Path(config_path)

    if dropin_dir is None:
        dropin_dir = DEFAULT_DROPIN_DIR
    elif isinstance(dropin_dir, str):
        dropin_dir = Path(dropin_dir)

    merged_data = deep_merge(default_data(), load_yaml_file(config_path))
    merged_data = load_dropin_directory(dropin_dir, base=merged_data)

    return Config(**merged_data)


def load_config_from_string(yaml_string: str, with_defaults: bool = True) -> Config:
    """Load configuration from a YAML string (useful for testing).

    Args:
        yaml_string: YAML document
        with_defaults: Merge the document over the built-in defaults
    """
    data = yaml.safe_load(yaml_string) or {}
    if with_defaults:
        data = deep_merge(default_data(), data)
    return Config(**data)


def default_config() -> Config:
    """Configuration with built-in defaults only."""
    return Config(**default_data())
