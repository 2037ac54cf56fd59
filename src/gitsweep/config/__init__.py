"""Configuration loading, resolution, and the embedded default rules."""

from gitsweep.config.loader import (
    ConfigError,
    default_config,
    load_config,
    load_repo_config,
    resolve,
)
from gitsweep.config.schema import MAX_EXTEND_DEPTH, Config, Extends

__all__ = [
    "MAX_EXTEND_DEPTH",
    "Config",
    "ConfigError",
    "Extends",
    "default_config",
    "load_config",
    "load_repo_config",
    "resolve",
]
