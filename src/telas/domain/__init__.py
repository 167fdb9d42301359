"""Domain layer - pieces, sheet constants and input validation."""

from .entities import PieceList
from .validation import ValidationError, validate_piece
from .value_objects import (
    EPSILON,
    MAX_COUNT,
    MAX_TOTAL_COUNT,
    SHEET_AREA,
    SHEET_LENGTH,
    SHEET_WIDTH,
    PieceSpec,
    format_dimension,
)

__all__ = [
    "EPSILON",
    "MAX_COUNT",
    "MAX_TOTAL_COUNT",
    "PieceList",
    "PieceSpec",
    "SHEET_AREA",
    "SHEET_LENGTH",
    "SHEET_WIDTH",
    "ValidationError",
    "format_dimension",
    "validate_piece",
]
