"""Value objects for the sheet packer domain.

Sheets ("telas") have a fixed size that is not user-configurable. All
dimensions are in meters.
"""

from __future__ import annotations

from dataclasses import dataclass

SHEET_WIDTH: float = 2.45
SHEET_LENGTH: float = 6.0
SHEET_AREA: float = SHEET_WIDTH * SHEET_LENGTH

# Tolerance for dimension comparisons in meters
EPSILON: float = 1e-9

# Upper bounds on requested units, per entry and per piece list. Packing time
# grows with the number of instances.
MAX_COUNT: int = 10_000
MAX_TOTAL_COUNT: int = 10_000


def format_dimension(value: float) -> str:
    """Format a dimension without trailing zeros (``1.0`` -> ``"1"``)."""
    return f"{value:g}"


@dataclass(frozen=True)
class PieceSpec:
    """A rectangular piece to cut, with the number of units wanted.

    Bounds against the sheet size are enforced by input validation, not here,
    so the packer can still be fed (and must survive) oversized pieces.

    Attributes:
        id: Unique identifier assigned when the piece is submitted.
        width: Piece width in meters (across the sheet).
        length: Piece length in meters (along the sheet).
        count: Number of units to cut.
    """

    id: int
    width: float
    length: float
    count: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.length <= 0:
            raise ValueError("Piece dimensions must be positive")
        if self.count < 1:
            raise ValueError("Count must be at least 1")

    @property
    def area(self) -> float:
        """Area of one unit in square meters."""
        return self.width * self.length

    @property
    def total_area(self) -> float:
        """Area of all units in square meters."""
        return self.area * self.count

    @property
    def label(self) -> str:
        """Short ``WxL`` label used on diagrams."""
        return f"{format_dimension(self.width)}x{format_dimension(self.length)}"
