"""
Configuration data models.

This module contains the data structures loaded from the user's
``config.toml``: report defaults and logging settings.
"""

from dataclasses import dataclass, field

from .enums import MeasureMode, PrinterKind, SortKey


@dataclass
class DefaultsConfig:
    """
    Defaults applied when the corresponding command-line option is omitted.
    Loaded from the ``[defaults]`` table.
    """

    printer: PrinterKind = PrinterKind.FLAT
    sort: SortKey = SortKey.TOTAL
    mode: MeasureMode = MeasureMode.WALL_TIME
    min_percent: float = 0.0


@dataclass
class LoggingConfig:
    """Settings from the ``[logging]`` table."""

    level: str = "WARNING"


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
