"""Validation of raw piece entries before they join the piece list."""

from __future__ import annotations

import math
from typing import Any

from .value_objects import MAX_COUNT, SHEET_LENGTH, SHEET_WIDTH, format_dimension


class ValidationError(Exception):
    """Raised when a submitted piece entry is missing, non-positive or too big.

    Attributes:
        field: Name of the offending input ("width", "length" or "count").
        constraint: Short identifier of the violated rule (required, number,
            integer, positive, max_count, max_width, max_length, max_total_count).
        message: Human-readable message, naming the limit when one applies.
    """

    def __init__(self, field: str, constraint: str, message: str) -> None:
        self.field = field
        self.constraint = constraint
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _parse_number(field: str, value: Any) -> float:
    if _is_missing(value):
        raise ValidationError(field, "required", f"{field.capitalize()} is required")
    if isinstance(value, bool):
        raise ValidationError(field, "number", f"{field.capitalize()} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            field, "number", f"{field.capitalize()} must be a number (got {value!r})"
        ) from None
    if not math.isfinite(number):
        raise ValidationError(field, "number", f"{field.capitalize()} must be finite")
    if number <= 0:
        raise ValidationError(
            field, "positive", f"{field.capitalize()} must be greater than zero"
        )
    return number


def _parse_count(value: Any) -> int:
    number = _parse_number("count", value)
    if not number.is_integer():
        raise ValidationError(
            "count", "integer", f"Count must be a whole number (got {value!r})"
        )
    if number > MAX_COUNT:
        raise ValidationError(
            "count", "max_count", f"Count {int(number)} exceeds the limit (max count: {MAX_COUNT})"
        )
    return int(number)


def validate_piece(width: Any, length: Any, count: Any) -> tuple[float, float, int]:
    """Validate a raw piece entry.

    Accepts numbers or numeric strings, as they arrive from a form, the
    command line or a JSON body.

    Args:
        width: Piece width in meters.
        length: Piece length in meters.
        count: Number of units.

    Returns:
        Tuple of (width, length, count) converted to float, float, int.

    Raises:
        ValidationError: On the first violated rule.
    """
    parsed_width = _parse_number("width", width)
    parsed_length = _parse_number("length", length)
    parsed_count = _parse_count(count)

    if parsed_width > SHEET_WIDTH:
        raise ValidationError(
            "width",
            "max_width",
            f"Width {format_dimension(parsed_width)}m exceeds the sheet width "
            f"(max width: {format_dimension(SHEET_WIDTH)}m)",
        )
    if parsed_length > SHEET_LENGTH:
        raise ValidationError(
            "length",
            "max_length",
            f"Length {format_dimension(parsed_length)}m exceeds the sheet length "
            f"(max length: {format_dimension(SHEET_LENGTH)}m)",
        )

    return parsed_width, parsed_length, parsed_count
