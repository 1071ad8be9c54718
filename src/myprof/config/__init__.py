"""
Configuration management for the myprof package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    get_config_path,
    is_config_loaded,
    set_config_path,
)

from .loader import CONFIG_ENV_VAR, default_config_path, load_toml_file
from .validators import validate_defaults_config, validate_logging_config

__all__ = [
    # Main interface
    "get_config",
    "get_config_path",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "CONFIG_ENV_VAR",
    "default_config_path",
    "load_toml_file",
    "validate_defaults_config",
    "validate_logging_config",
]
