"""Domain entities for the sheet packer."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Iterator

from .validation import ValidationError, validate_piece
from .value_objects import MAX_TOTAL_COUNT, PieceSpec


@dataclass
class PieceList:
    """Ordered list of pieces the caller wants to cut.

    The list is owned by its caller (a CLI run, an API session) and handed to
    the packer explicitly. Entries are never edited in place: they are only
    submitted or removed.

    Attributes:
        pieces: Piece specifications in submission order.
    """

    pieces: list[PieceSpec] = field(default_factory=list)
    _ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.pieces:
            next_id = max(piece.id for piece in self.pieces) + 1
            self._ids = itertools.count(next_id)

    def submit(self, width: Any, length: Any, count: Any) -> PieceSpec:
        """Validate a raw entry and append it to the list.

        The list as a whole holds at most MAX_TOTAL_COUNT units.

        Raises:
            ValidationError: If the entry is rejected. The list is unchanged.
        """
        parsed_width, parsed_length, parsed_count = validate_piece(width, length, count)
        if self.total_count + parsed_count > MAX_TOTAL_COUNT:
            raise ValidationError(
                "count",
                "max_total_count",
                f"Adding {parsed_count} units would exceed the piece list limit "
                f"(max total count: {MAX_TOTAL_COUNT})",
            )
        piece = PieceSpec(
            id=next(self._ids),
            width=parsed_width,
            length=parsed_length,
            count=parsed_count,
        )
        self.pieces.append(piece)
        return piece

    def remove(self, piece_id: int) -> bool:
        """Remove the piece with the given id.

        Returns:
            True if a piece was removed, False if no piece had that id.
        """
        for index, piece in enumerate(self.pieces):
            if piece.id == piece_id:
                del self.pieces[index]
                return True
        return False

    def get(self, piece_id: int) -> PieceSpec | None:
        return next((piece for piece in self.pieces if piece.id == piece_id), None)

    def snapshot(self) -> tuple[PieceSpec, ...]:
        """Immutable copy of the current contents, usable as a cache key."""
        return tuple(self.pieces)

    @property
    def total_count(self) -> int:
        """Number of piece instances across all entries."""
        return sum(piece.count for piece in self.pieces)

    @property
    def total_area(self) -> float:
        """Combined area of all piece instances in square meters."""
        return sum(piece.total_area for piece in self.pieces)

    def __iter__(self) -> Iterator[PieceSpec]:
        return iter(self.pieces)

    def __len__(self) -> int:
        return len(self.pieces)
