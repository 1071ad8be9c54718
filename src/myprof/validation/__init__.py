"""
Validation and error handling for the myprof package.

This module provides input validation and the error taxonomy, with
consistent error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    OutputError,
    ResolutionError,
    SessionStateError,
    UsageError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)

from .validators import (
    EXCLUSION_ENTRY_PATTERN,
    validate_directory,
    validate_enum_choice,
    validate_exclusion_entry,
    validate_path_exists,
    validate_positive_float,
)

__all__ = [
    # Errors
    "ErrorSeverity",
    "OutputError",
    "ResolutionError",
    "SessionStateError",
    "UsageError",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    # Validators
    "EXCLUSION_ENTRY_PATTERN",
    "validate_directory",
    "validate_enum_choice",
    "validate_exclusion_entry",
    "validate_path_exists",
    "validate_positive_float",
]
