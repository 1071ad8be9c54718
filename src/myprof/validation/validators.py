"""
Validation functions for command-line and configuration values.
"""

import os
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from .exceptions import ValidationError

# SCOPE(#|.)METHOD; the last separator decides the exclusion kind.
EXCLUSION_ENTRY_PATTERN = re.compile(r'^(?P<scope>.+)(?P<sep>[#.])(?P<method>[^#.]+)$')


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a non-negative float.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value != float_value:
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        Validated choice, in the spelling used by ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_directory(
    path: Union[str, Path],
    base_dir: Optional[Path] = None,
    field_name: str = "directory"
) -> Path:
    """
    Validate that a path names an existing directory.

    Relative paths are checked against ``base_dir`` when one is given.

    Returns:
        The path as given, converted to ``Path``

    Raises:
        ValidationError: If the path is missing or not a directory
    """
    candidate = Path(path)
    absolute = candidate if candidate.is_absolute() or base_dir is None else base_dir / candidate
    validate_path_exists(absolute, field_name=field_name)
    if not absolute.is_dir():
        raise ValidationError(
            f"{field_name} is not a directory: {absolute}",
            field_name=field_name,
            value=str(path)
        )
    return candidate


def validate_exclusion_entry(entry: str, field_name: str = "exclude") -> Tuple[str, str, str]:
    """
    Split an exclusion entry into scope, separator and method name.

    Args:
        entry: An entry such as ``"pkg.mod.Klass#method"`` or ``"pkg.mod.Klass.method"``
        field_name: Name of the field being validated

    Returns:
        ``(scope, separator, method)``

    Raises:
        ValidationError: If the entry does not match ``SCOPE(#|.)METHOD``
    """
    entry = entry.strip()
    match = EXCLUSION_ENTRY_PATTERN.match(entry)
    if not match or not match.group("scope").strip(".#"):
        raise ValidationError(
            f"{field_name} entry must look like 'Scope#method' or 'Scope.method', got '{entry}'",
            field_name=field_name,
            value=entry
        )
    return match.group("scope"), match.group("sep"), match.group("method")
