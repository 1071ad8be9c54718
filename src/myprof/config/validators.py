"""
Validation of configuration file sections.
"""

import logging
from typing import Any, Dict

from ..models.config import DefaultsConfig, LoggingConfig
from ..models.enums import MeasureMode, PrinterKind, SortKey
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _check_unknown_keys(section: Dict[str, Any], known: set, section_name: str) -> None:
    for key in section:
        if key not in known:
            logger.warning(f"Ignoring unknown key '{key}' in [{section_name}] section")


def validate_defaults_config(defaults_data: Dict[str, Any]) -> DefaultsConfig:
    """
    Validate the ``[defaults]`` table.

    Args:
        defaults_data: Raw table contents

    Returns:
        Validated DefaultsConfig

    Raises:
        ValidationError: If any value is not acceptable
    """
    if not isinstance(defaults_data, dict):
        raise ValidationError("[defaults] must be a table", field_name="defaults", value=defaults_data)

    _check_unknown_keys(defaults_data, {"printer", "sort", "mode", "min_percent"}, "defaults")
    base = DefaultsConfig()

    printer = validate_enum_choice(
        defaults_data.get("printer", base.printer.value),
        choices=PrinterKind.choices(),
        field_name="defaults.printer",
    )
    sort = validate_enum_choice(
        defaults_data.get("sort", base.sort.value),
        choices=SortKey.choices(),
        field_name="defaults.sort",
    )
    mode = validate_enum_choice(
        defaults_data.get("mode", base.mode.value),
        choices=MeasureMode.choices(),
        field_name="defaults.mode",
    )
    min_percent = validate_positive_float(
        defaults_data.get("min_percent", base.min_percent),
        min_value=0.0,
        max_value=100.0,
        field_name="defaults.min_percent",
    )

    return DefaultsConfig(
        printer=PrinterKind(printer),
        sort=SortKey(sort),
        mode=MeasureMode(mode),
        min_percent=min_percent,
    )


def validate_logging_config(logging_data: Dict[str, Any]) -> LoggingConfig:
    """Validate the ``[logging]`` table."""
    if not isinstance(logging_data, dict):
        raise ValidationError("[logging] must be a table", field_name="logging", value=logging_data)

    _check_unknown_keys(logging_data, {"level"}, "logging")
    level = validate_enum_choice(
        logging_data.get("level", LoggingConfig().level),
        choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )
    return LoggingConfig(level=level)
