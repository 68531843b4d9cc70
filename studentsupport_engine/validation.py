"""
Boundary validation helpers shared by the engine input types.
"""

import math
from typing import Optional

from .exceptions import ProfileValidationError


def coerce_enum(enum_cls, value, field_name: str):
    """Convert a raw value to a member of a closed enum, rejecting unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ProfileValidationError(
            field_name, f"unknown value {value!r} (expected one of: {allowed})"
        ) from None


def check_amount(value, field_name: str, required: bool = False) -> Optional[float]:
    """Money fields must be finite and non-negative; None passes through unless required."""
    if value is None:
        if required:
            raise ProfileValidationError(field_name, "is required")
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProfileValidationError(field_name, f"must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise ProfileValidationError(field_name, f"must be finite, got {value!r}")
    if value < 0:
        raise ProfileValidationError(field_name, f"cannot be negative, got {value!r}")
    return float(value)


def check_flag(value, field_name: str) -> bool:
    """Yes/no fields must be real booleans; strings and numbers are not guessed at."""
    if not isinstance(value, bool):
        raise ProfileValidationError(field_name, f"must be true or false, got {value!r}")
    return value
