"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import ErrorSeverity, handle_config_error
from .loader import default_config_path, load_toml_file
from .validators import validate_defaults_config, validate_logging_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# None means "use default_config_path()", evaluated lazily so the
# environment variable can be set after import.
_CONFIG_FILE_PATH: Optional[Path] = None


def set_config_path(config_path: Optional[Path]) -> None:
    """
    Set a custom configuration file path.

    Passing None restores the default lookup. The cached configuration is
    cleared so the next get_config() reloads from the new location.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = config_path
    _CONFIG = None
    logger.debug(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def get_config_path() -> Path:
    return _CONFIG_FILE_PATH or default_config_path()


def _load_config(config_path: Path) -> AppConfig:
    """
    Load and validate the application configuration.

    A missing file is not an error: built-in defaults apply.

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if not config_path.exists():
        logger.debug(f"No configuration file at {config_path}, using built-in defaults")
        return AppConfig()

    try:
        data = load_toml_file(config_path, "configuration file")
        app_config = AppConfig(
            defaults=validate_defaults_config(data.get("defaults", {})),
            logging=validate_logging_config(data.get("logging", {})),
        )
        logger.debug(f"Successfully loaded configuration from {config_path}")
        return app_config
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(get_config_path())
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.
    """
    config_path = get_config_path()
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(config_path),
        "config_file_exists": config_path.exists(),
    }
