"""
Exception types and error handling helpers.

This module provides the error taxonomy used across the application together
with the helpers that log errors consistently and terminate the CLI.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type used throughout the validation system.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class UsageError(ValidationError):
    """Bad or missing command-line input. Reported with the usage text."""


class ResolutionError(ValidationError):
    """A dotted name could not be resolved against the live symbol space."""


class OutputError(Exception):
    """The report destination could not be written."""


class SessionStateError(RuntimeError):
    """An operation was attempted in the wrong session lifecycle state."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """
    Report a CLI error and terminate the process.

    Keyword Args:
        exit_code: Process exit status (default 1)
        usage: Usage text printed to stderr ahead of the diagnostic
        include_traceback: Log the traceback along with the message
    """
    exit_code = kwargs.pop('exit_code', 1)
    usage = kwargs.pop('usage', None)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.DEBUG)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    if usage:
        sys.stderr.write(usage)
    sys.stderr.write(f"error: {error}\n")
    sys.exit(exit_code)
