"""
Data models for the profiling launcher.

Configuration Models:
- Report defaults and logging settings loaded from ``config.toml``

Session Models:
- The validated command line (``SessionConfig``)
- Resolved exclusions (``ExclusionTarget``)
- Output destination planning (``OutputPlan``)

Enumerations:
- Measurement modes, renderer kinds and sort keys
"""

from .config import AppConfig, DefaultsConfig, LoggingConfig
from .enums import MeasureMode, PrinterKind, SortKey
from .session import ExclusionTarget, OutputPlan, SessionConfig

__all__ = [
    # Configuration
    "AppConfig",
    "DefaultsConfig",
    "LoggingConfig",
    # Enumerations
    "MeasureMode",
    "PrinterKind",
    "SortKey",
    # Session
    "ExclusionTarget",
    "OutputPlan",
    "SessionConfig",
]
