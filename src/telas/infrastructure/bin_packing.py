"""Bin packing data models and the shelf packing algorithm for sheets.

This module provides data structures for representing sheet layouts,
piece placements and packing results, together with the area-sorted shelf
heuristic that fills one fixed-size sheet at a time.

All result dataclasses are frozen (immutable) so a packing result can be
shared between callers and cached.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Sequence

from telas.domain.value_objects import (
    EPSILON,
    SHEET_AREA,
    SHEET_LENGTH,
    SHEET_WIDTH,
    PieceSpec,
    format_dimension,
)

logger = logging.getLogger(__name__)


class PackingFailure(Exception):
    """Raised when the packer cannot make progress on the remaining pieces.

    This only happens when a piece that bypassed validation is larger than
    the sheet. The safety ceiling on opened sheets is a termination guard
    that a correct packer never reaches. The
    packer attaches the failure to its result instead of raising it.

    Attributes:
        reason: "stuck" (an empty sheet could not take any piece) or
            "safety_ceiling" (too many sheets were opened).
        bin_index: Index of the sheet being filled when packing stopped.
        unplaced: Remaining instance count per piece id.
    """

    def __init__(self, reason: str, bin_index: int, unplaced: Mapping[int, int]) -> None:
        self.reason = reason
        self.bin_index = bin_index
        self.unplaced: Mapping[int, int] = MappingProxyType(dict(unplaced))
        total = sum(self.unplaced.values())
        if reason == "stuck":
            message = (
                f"Packing stuck on sheet {bin_index + 1}: {total} piece(s) "
                f"cannot be placed on an empty "
                f"{format_dimension(SHEET_WIDTH)}x{format_dimension(SHEET_LENGTH)}m sheet"
            )
        else:
            message = (
                f"Packing stopped after {bin_index} sheets (safety ceiling reached) "
                f"with {total} piece(s) unplaced"
            )
        super().__init__(message)


@dataclass(frozen=True)
class PlacedPiece:
    """One piece instance placed at a position on a sheet.

    Coordinates are offsets in meters from the sheet's top-left corner.

    Attributes:
        spec_id: Id of the piece specification this instance comes from.
        width: Width of the piece in meters (horizontal).
        length: Length of the piece in meters (vertical).
        x: Horizontal offset from the left edge of the sheet.
        y: Vertical offset from the top edge of the sheet.
        bin_index: Zero-based index of the sheet holding this piece.
        instance: One-based number of this instance within its specification.
    """

    spec_id: int
    width: float
    length: float
    x: float
    y: float
    bin_index: int
    instance: int = 1

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def right_edge(self) -> float:
        """X coordinate of the piece's right edge."""
        return self.x + self.width

    @property
    def bottom_edge(self) -> float:
        """Y coordinate of the piece's bottom edge."""
        return self.y + self.length

    @property
    def area(self) -> float:
        return self.width * self.length

    @property
    def label(self) -> str:
        return f"{format_dimension(self.width)}x{format_dimension(self.length)}"

    def overlaps(self, other: PlacedPiece) -> bool:
        """Check whether two placements share any area.

        Rectangles are half-open, so pieces that only touch along an edge do
        not overlap.
        """
        return (
            self.x < other.right_edge - EPSILON
            and other.x < self.right_edge - EPSILON
            and self.y < other.bottom_edge - EPSILON
            and other.y < self.bottom_edge - EPSILON
        )


@dataclass(frozen=True)
class SheetLayout:
    """Layout of pieces on a single sheet (one bin of the packing result).

    Attributes:
        bin_index: Zero-based index of this sheet in the packing result.
        placements: Placed pieces in placement order.
    """

    bin_index: int
    placements: tuple[PlacedPiece, ...]

    def __post_init__(self) -> None:
        if self.bin_index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def used_area(self) -> float:
        """Total area covered by placed pieces in square meters."""
        return sum(p.area for p in self.placements)

    @property
    def utilization(self) -> float:
        """Fraction of the sheet covered by pieces."""
        return self.used_area / SHEET_AREA

    @property
    def waste_percentage(self) -> float:
        """Percentage of the sheet that is waste."""
        return (1 - self.utilization) * 100

    @property
    def piece_count(self) -> int:
        """Number of pieces placed on this sheet."""
        return len(self.placements)


@dataclass(frozen=True)
class PackingMetrics:
    """Summary numbers derived from a packing result.

    Attributes:
        required_bins: Number of sheets used.
        total_area: Combined area of every requested piece instance in square
            meters, computed from the piece list rather than the placements.
        utilization: total_area / (required_bins * sheet area) as a fraction.
            0 when no sheet is used, NaN when packing failed.
        lower_bound_bins: Minimum number of sheets the area alone requires.
    """

    required_bins: int
    total_area: float
    utilization: float
    lower_bound_bins: int

    @property
    def utilization_percentage(self) -> float:
        return self.utilization * 100


@dataclass(frozen=True)
class PackingResult:
    """Complete result of packing a piece list onto sheets.

    Attributes:
        layouts: Sheet layouts in creation order.
        metrics: Derived summary numbers.
        failure: Diagnostic when packing stopped early, None otherwise.
        unplaced: Remaining instance count per piece id when packing failed.
    """

    layouts: tuple[SheetLayout, ...]
    metrics: PackingMetrics
    failure: PackingFailure | None = None
    unplaced: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_complete(self) -> bool:
        """True when every requested instance was placed."""
        return self.failure is None

    @property
    def required_bins(self) -> int:
        return self.metrics.required_bins

    @property
    def total_pieces_placed(self) -> int:
        """Total number of pieces placed across all sheets."""
        return sum(layout.piece_count for layout in self.layouts)

    def placements_for(self, spec_id: int) -> tuple[PlacedPiece, ...]:
        """All placements of one piece specification, across sheets."""
        return tuple(
            placement
            for layout in self.layouts
            for placement in layout.placements
            if placement.spec_id == spec_id
        )

    def raise_for_failure(self) -> None:
        """Raise a new PackingFailure with the attached diagnostic, if any.

        The attached instance is shared by every holder of a memoized result,
        so it is never raised itself.
        """
        if self.failure is not None:
            failure = self.failure
            raise PackingFailure(failure.reason, failure.bin_index, failure.unplaced)


def calculate_metrics(
    layouts: Sequence[SheetLayout],
    pieces: Sequence[PieceSpec],
    failed: bool = False,
) -> PackingMetrics:
    """Derive sheet count, total area and utilization.

    Args:
        layouts: Sheet layouts produced by the packer.
        pieces: The original piece list.
        failed: Whether packing stopped before placing every instance.

    Returns:
        PackingMetrics for the result.
    """
    total_area = sum(piece.total_area for piece in pieces)
    required_bins = len(layouts)

    if failed:
        utilization = math.nan
    elif required_bins == 0:
        utilization = 0.0
    else:
        utilization = total_area / (required_bins * SHEET_AREA)

    lower_bound = math.ceil(total_area / SHEET_AREA - EPSILON) if total_area > 0 else 0

    return PackingMetrics(
        required_bins=required_bins,
        total_area=total_area,
        utilization=utilization,
        lower_bound_bins=lower_bound,
    )


@dataclass
class _Row:
    """Internal row (shelf) representation for the packing algorithm.

    Pieces are placed left-to-right. The row's height is the length of the
    longest piece placed on it.

    Attributes:
        y: Top Y position of the row.
        x: X position where the next piece goes.
        height: Height of the row so far.
        piece_count: Number of pieces on the row.
    """

    y: float
    x: float = 0.0
    height: float = 0.0
    piece_count: int = 0

    @property
    def remaining_width(self) -> float:
        return SHEET_WIDTH - self.x

    @property
    def remaining_height(self) -> float:
        """Height left on the sheet from the top of this row."""
        return SHEET_LENGTH - self.y


class ShelfBinPacker:
    """Area-sorted shelf packing onto fixed 2.45m x 6m sheets.

    Sheets are filled one at a time. For each sheet the remaining piece
    specifications are sorted by area (largest first, ties in submission
    order) and their instances are placed left-to-right in rows; a row is
    closed when the next piece no longer fits across it. Rotation is never
    attempted.

    Attributes:
        safety_factor: Sheets that may be opened per requested instance
            before packing is abandoned.
    """

    def __init__(self, safety_factor: int = 2) -> None:
        if safety_factor < 1:
            raise ValueError("Safety factor must be at least 1")
        self.safety_factor = safety_factor

    def pack(self, pieces: Sequence[PieceSpec]) -> PackingResult:
        """Pack every instance of every piece onto as few sheets as the heuristic finds.

        Args:
            pieces: Piece specifications in submission order.

        Returns:
            PackingResult with one layout per sheet. When packing gets stuck,
            the result holds the sheets filled so far and a PackingFailure.
        """
        if not pieces:
            return PackingResult(layouts=(), metrics=calculate_metrics((), ()))

        remaining = [piece.count for piece in pieces]
        total_instances = sum(remaining)
        # Termination guard only: a sheet that is not stuck places at least one
        # instance, so the packer never opens more sheets than instances.
        max_bins = self.safety_factor * total_instances

        logger.debug(
            "Packing %d instances of %d pieces", total_instances, len(pieces)
        )

        layouts: list[SheetLayout] = []
        failure: PackingFailure | None = None

        while any(count > 0 for count in remaining):
            bin_index = len(layouts)
            if bin_index >= max_bins:
                failure = PackingFailure(
                    "safety_ceiling", bin_index, self._unplaced(pieces, remaining)
                )
                break

            order = self._sort_by_area(pieces, remaining)
            placements = self._pack_single_sheet(pieces, remaining, order, bin_index)

            if not placements:
                failure = PackingFailure(
                    "stuck", bin_index, self._unplaced(pieces, remaining)
                )
                break

            layout = SheetLayout(bin_index=bin_index, placements=tuple(placements))
            layouts.append(layout)

            logger.debug(
                "Sheet %d: %d pieces, %.1f%% used",
                bin_index,
                layout.piece_count,
                layout.utilization * 100,
            )

        if failure is not None:
            logger.error("%s", failure)

        return PackingResult(
            layouts=tuple(layouts),
            metrics=calculate_metrics(layouts, pieces, failed=failure is not None),
            failure=failure,
            unplaced=failure.unplaced if failure is not None else MappingProxyType({}),
        )

    def _sort_by_area(
        self, pieces: Sequence[PieceSpec], remaining: list[int]
    ) -> list[int]:
        """Indices of pieces with instances left, largest area first.

        The sort is stable, so equal areas keep submission order.
        """
        active = [index for index, count in enumerate(remaining) if count > 0]
        return sorted(active, key=lambda index: pieces[index].area, reverse=True)

    def _pack_single_sheet(
        self,
        pieces: Sequence[PieceSpec],
        remaining: list[int],
        order: list[int],
        bin_index: int,
    ) -> list[PlacedPiece]:
        """Place as many instances as possible on one sheet.

        Decrements ``remaining`` for every instance placed. The sheet is
        closed when a full pass over ``order`` places nothing.

        Returns:
            Placements on this sheet, in placement order.
        """
        row = _Row(y=0.0)
        placed: list[PlacedPiece] = []

        progress = True
        while progress:
            progress = False
            for index in order:
                piece = pieces[index]
                while remaining[index] > 0:
                    if piece.length > row.remaining_height + EPSILON:
                        # Cannot fit below the current row top on this sheet
                        break

                    if piece.width <= row.remaining_width + EPSILON:
                        placed.append(
                            self._place_on_row(piece, row, remaining, index, bin_index)
                        )
                        progress = True
                        continue

                    if row.piece_count == 0:
                        # Wider than an empty row, so wider than the sheet
                        break
                    # Close the row for good and retry below it; the height
                    # check above abandons the piece if the new row is too short.
                    row = _Row(y=row.y + row.height)

        return placed

    def _place_on_row(
        self,
        piece: PieceSpec,
        row: _Row,
        remaining: list[int],
        index: int,
        bin_index: int,
    ) -> PlacedPiece:
        """Place one instance at the row cursor and update the row state."""
        placement = PlacedPiece(
            spec_id=piece.id,
            width=piece.width,
            length=piece.length,
            x=row.x,
            y=row.y,
            bin_index=bin_index,
            instance=piece.count - remaining[index] + 1,
        )
        row.x += piece.width
        row.height = max(row.height, piece.length)
        row.piece_count += 1
        remaining[index] -= 1
        return placement

    def _unplaced(
        self, pieces: Sequence[PieceSpec], remaining: list[int]
    ) -> dict[int, int]:
        unplaced: dict[int, int] = {}
        for piece, count in zip(pieces, remaining):
            if count > 0:
                unplaced[piece.id] = unplaced.get(piece.id, 0) + count
        return unplaced


@lru_cache(maxsize=128)
def pack_pieces(pieces: tuple[PieceSpec, ...]) -> PackingResult:
    """Pack a piece list, memoized on its contents.

    PieceSpec is frozen, so the tuple of specs is a content key: an unchanged
    piece list returns the very same result object.
    """
    return ShelfBinPacker().pack(pieces)
