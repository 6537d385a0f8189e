"""Configuration loading and schema definitions."""

from pkgbuild_convert.config.loader import default_config, load_config, load_config_from_string
from pkgbuild_convert.config.schema import (
    ChecksumConfig,
    Config,
    FormatterConfig,
    GlobalConfig,
    ShellConfig,
)

__all__ = [
    "ChecksumConfig",
    "Config",
    "FormatterConfig",
    "GlobalConfig",
    "ShellConfig",
    "default_config",
    "load_config",
    "load_config_from_string",
]
