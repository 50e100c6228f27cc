"""
Input validation helpers for the Strata ecosystem engine.

Validation happens at the boundary (record construction, store appends,
config loading) so downstream stages can assume well-formed data.
"""

import math
from typing import Any, Optional, Set


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


def validate_number(value: Any, field: str = "value") -> float:
    """
    Validate that a value is a finite real number (bools rejected).

    Raises:
        ValidationError: If value is not numeric or is NaN/infinite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"must be a number, got {type(value).__name__}", field)
    if not math.isfinite(value):
        raise ValidationError(f"must be finite, got {value}", field)
    return float(value)


def validate_range(value: float, min_val: float, max_val: float,
                   field: str = "value") -> float:
    """
    Validate that a value is within a range.

    Args:
        value: Value to validate
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)
        field: Field name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is outside range
    """
    value = validate_number(value, field)
    if not min_val <= value <= max_val:
        raise ValidationError(
            f"must be between {min_val} and {max_val}, got {value}",
            field
        )
    return value


def validate_strength(value: float, field: str = "strength") -> float:
    """Validate an emotion strength (0.0 to 1.0)."""
    return validate_range(value, 0.0, 1.0, field)


def validate_not_empty(value: Any, field: str = "value") -> Any:
    """
    Validate that a value is not empty (for strings, lists, dicts).

    Raises:
        ValidationError: If value is empty or None
    """
    if value is None:
        raise ValidationError("cannot be None", field)
    if hasattr(value, '__len__') and len(value) == 0:
        raise ValidationError("cannot be empty", field)
    return value


def validate_max_length(value: str, max_length: int, field: str = "value") -> str:
    """
    Validate that a string is no longer than ``max_length`` characters.

    Raises:
        ValidationError: If value is not a string or is too long
    """
    if not isinstance(value, str):
        raise ValidationError(f"must be a string, got {type(value).__name__}", field)
    if len(value) > max_length:
        raise ValidationError(
            f"must be at most {max_length} characters, got {len(value)}",
            field
        )
    return value


def validate_in_set(value: Any, valid_values: Set[Any],
                    field: str = "value") -> Any:
    """
    Validate that a value is in a set of valid values.

    Raises:
        ValidationError: If value is not in valid_values
    """
    if value not in valid_values:
        valid_str = ', '.join(str(v) for v in sorted(valid_values, key=str))
        raise ValidationError(
            f"must be one of [{valid_str}], got '{value}'",
            field
        )
    return value
