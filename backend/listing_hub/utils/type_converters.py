"""
Type converters — parse optional numeric form and CSV values.

Unlike a lenient cast, a non-empty value that is not a number is a
ValidationError: a typo in a price column must fail the row, not
publish the product without a price.
"""
from typing import Any, Optional

from listing_hub.core.exceptions import ValidationError


def to_float(value: Any, field: str = "value") -> Optional[float]:
    """Convert value to float; None/blank -> None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid number for {field}: {value!r}")


def to_int(value: Any, field: str = "value") -> Optional[int]:
    """Convert value to int; None/blank -> None. '5.0' is accepted."""
    number = to_float(value, field)
    if number is None:
        return None
    if not number.is_integer():
        raise ValidationError(f"Invalid integer for {field}: {value!r}")
    return int(number)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
