"""Model-level validation utilities for data integrity.

Provides reusable validators that enforce business rules at the ORM level,
preventing invalid data from reaching either store regardless of which
route or service writes the data.
"""

from decimal import Decimal

from tableside.core.exceptions import ValidationError


def _as_decimal(value) -> Decimal:
    return Decimal(str(value)) if not isinstance(value, Decimal) else value


def non_negative(key: str, value):
    """Validate that a numeric value is >= 0."""
    if value is not None and _as_decimal(value) < 0:
        raise ValidationError(f"{key} cannot be negative, got {value}")
    return value


def positive(key: str, value):
    """Validate that a numeric value is > 0."""
    if value is not None and _as_decimal(value) <= 0:
        raise ValidationError(f"{key} must be positive, got {value}")
    return value


def in_range(key: str, value, low, high):
    """Validate that a numeric value is between low and high inclusive."""
    if value is not None and not (low <= value <= high):
        raise ValidationError(f"{key} must be between {low} and {high}, got {value}")
    return value


def required_text(key: str, value):
    """Validate that a text value is present and not blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{key} is required")
    return value
