"""Tests for the shelf packing algorithm and its result models.

Tests cover:
- Data model properties (placements, layouts, metrics)
- Area-sorted shelf placement, row height and row closing
- Conservation, non-overlap and bounds on varied piece lists
- Metrics and the area lower bound
- Failure diagnostics for pieces that cannot be placed
- Memoization of pack_pieces
"""

from __future__ import annotations

import math
from collections import Counter
from itertools import combinations

import pytest

from telas.domain import EPSILON, SHEET_LENGTH, SHEET_WIDTH, PieceSpec
from telas.infrastructure.bin_packing import (
    PackingFailure,
    PackingResult,
    PlacedPiece,
    SheetLayout,
    ShelfBinPacker,
    calculate_metrics,
    pack_pieces,
)


@pytest.fixture
def packer() -> ShelfBinPacker:
    return ShelfBinPacker()


PIECE_LISTS = {
    "mixed": [(1.2, 2.5, 3), (0.6, 0.8, 10), (2.45, 1.0, 2), (0.3, 5.9, 4), (0.75, 0.75, 7)],
    "tall_and_narrow": [(0.3, 5.9, 12), (0.2, 4.0, 9), (0.15, 3.1, 5)],
    "wide_and_short": [(2.4, 0.3, 25), (2.45, 0.1, 10), (1.3, 0.25, 6)],
    "near_sheet_size": [(2.45, 5.99, 2), (2.44, 6.0, 1), (0.01, 0.01, 3)],
    "accumulating_widths": [(0.49, 1.0, 11), (0.49, 0.7, 7), (0.35, 0.35, 13)],
    "longer_piece_later_in_row": [(1.0, 1.0, 2), (0.4, 2.0, 1), (1.0, 0.5, 3)],
    "abandoned_after_closing_row": [(1.5, 4.0, 2), (1.5, 3.0, 2), (0.9, 1.0, 4)],
}


def _specs(entries: list[tuple[float, float, int]]) -> tuple[PieceSpec, ...]:
    return tuple(
        PieceSpec(id=i, width=width, length=length, count=count)
        for i, (width, length, count) in enumerate(entries, start=1)
    )


@pytest.fixture(params=list(PIECE_LISTS), ids=list(PIECE_LISTS))
def piece_list(request: pytest.FixtureRequest) -> tuple[PieceSpec, ...]:
    return _specs(PIECE_LISTS[request.param])


def _all_placements(result: PackingResult) -> list[PlacedPiece]:
    return [p for layout in result.layouts for p in layout.placements]


# =============================================================================
# Data models
# =============================================================================


class TestPlacedPiece:
    def test_edges_area_and_label(self) -> None:
        placement = PlacedPiece(spec_id=1, width=1.0, length=2.0, x=0.5, y=1.0, bin_index=0)

        assert placement.right_edge == pytest.approx(1.5)
        assert placement.bottom_edge == pytest.approx(3.0)
        assert placement.area == pytest.approx(2.0)
        assert placement.label == "1x2"

    def test_negative_position_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            PlacedPiece(spec_id=1, width=1.0, length=1.0, x=-0.1, y=0.0, bin_index=0)

    def test_touching_pieces_do_not_overlap(self) -> None:
        a = PlacedPiece(spec_id=1, width=1.0, length=1.0, x=0.0, y=0.0, bin_index=0)
        b = PlacedPiece(spec_id=1, width=1.0, length=1.0, x=1.0, y=0.0, bin_index=0)

        assert not a.overlaps(b)

    def test_overlapping_pieces(self) -> None:
        a = PlacedPiece(spec_id=1, width=1.0, length=1.0, x=0.0, y=0.0, bin_index=0)
        b = PlacedPiece(spec_id=2, width=1.0, length=1.0, x=0.5, y=0.5, bin_index=0)

        assert a.overlaps(b)
        assert b.overlaps(a)


class TestSheetLayout:
    def test_utilization_and_waste(self) -> None:
        layout = SheetLayout(
            bin_index=0,
            placements=(
                PlacedPiece(spec_id=1, width=2.45, length=3.0, x=0.0, y=0.0, bin_index=0),
            ),
        )

        assert layout.used_area == pytest.approx(7.35)
        assert layout.utilization == pytest.approx(0.5)
        assert layout.waste_percentage == pytest.approx(50.0)
        assert layout.piece_count == 1

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            SheetLayout(bin_index=-1, placements=())


# =============================================================================
# Algorithm
# =============================================================================


class TestShelfBinPacker:
    def test_three_one_by_two_pieces_fit_one_sheet(
        self, packer: ShelfBinPacker, three_pieces: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(three_pieces)

        assert result.is_complete
        assert result.required_bins == 1
        assert result.metrics.total_area == pytest.approx(6.0)

        positions = [(p.x, p.y) for p in result.layouts[0].placements]
        assert positions == [(0.0, 0.0), (1.0, 0.0), (0.0, 2.0)]

    def test_empty_list(self, packer: ShelfBinPacker) -> None:
        result = packer.pack(())

        assert result.is_complete
        assert result.layouts == ()
        assert result.metrics.required_bins == 0
        assert result.metrics.total_area == 0
        assert result.metrics.utilization == 0

    def test_full_sheets(
        self, packer: ShelfBinPacker, full_sheets: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(full_sheets)

        assert result.required_bins == 2
        assert result.metrics.utilization == pytest.approx(1.0)
        assert [layout.piece_count for layout in result.layouts] == [1, 1]

    def test_largest_area_placed_first(self, packer: ShelfBinPacker) -> None:
        pieces = (
            PieceSpec(id=1, width=0.5, length=0.5, count=1),
            PieceSpec(id=2, width=2.0, length=3.0, count=1),
        )

        placements = packer.pack(pieces).layouts[0].placements

        assert placements[0].spec_id == 2
        assert (placements[0].x, placements[0].y) == (0.0, 0.0)
        # 0.5 does not fit in the 0.45 left on the first row
        assert (placements[1].x, placements[1].y) == (0.0, 3.0)

    def test_equal_areas_keep_submission_order(self, packer: ShelfBinPacker) -> None:
        pieces = (
            PieceSpec(id=1, width=1.0, length=2.0, count=1),
            PieceSpec(id=2, width=2.0, length=1.0, count=1),
        )

        placements = packer.pack(pieces).layouts[0].placements

        assert [p.spec_id for p in placements] == [1, 2]

    def test_next_row_starts_below_longest_piece_in_row(
        self, packer: ShelfBinPacker
    ) -> None:
        pieces = (
            PieceSpec(id=1, width=1.0, length=1.0, count=2),
            PieceSpec(id=2, width=0.4, length=2.0, count=1),
            PieceSpec(id=3, width=1.0, length=0.5, count=1),
        )

        result = packer.pack(pieces)
        (tall,) = result.placements_for(2)
        (last,) = result.placements_for(3)

        assert tall.y == 0.0
        assert last.y == pytest.approx(2.0)
        assert not tall.overlaps(last)

    def test_row_closed_before_abandoning_piece(self, packer: ShelfBinPacker) -> None:
        pieces = _specs([(1.5, 4.0, 1), (1.5, 3.0, 1), (0.9, 1.0, 1)])

        result = packer.pack(pieces)
        (small,) = result.placements_for(3)
        (abandoned,) = result.placements_for(2)

        # 1.5x3 closes the first row, is too long for the 2m left below it,
        # and the closed row is not reopened for the 0.9x1 piece
        assert (small.bin_index, small.x, small.y) == (0, 0.0, 4.0)
        assert (abandoned.bin_index, abandoned.x, abandoned.y) == (1, 0.0, 0.0)
        assert result.required_bins == 2

    def test_closed_row_is_not_reused(self, packer: ShelfBinPacker) -> None:
        pieces = _specs([(2.0, 5.0, 1), (1.0, 2.0, 1), (0.3, 0.5, 1)])

        result = packer.pack(pieces)
        (small,) = result.placements_for(3)

        # 0.3 would still fit beside the 2m piece, but that row was closed
        assert (small.bin_index, small.x, small.y) == (0, 0.0, 5.0)
        assert result.placements_for(2)[0].bin_index == 1

    def test_longer_piece_in_row_pushes_next_rows_down(
        self, packer: ShelfBinPacker
    ) -> None:
        pieces = _specs([(1.0, 1.0, 2), (0.4, 2.0, 1), (1.0, 0.5, 3)])

        result = packer.pack(pieces)

        assert [(p.x, p.y) for p in result.placements_for(3)] == [
            (0.0, 2.0),
            (1.0, 2.0),
            (0.0, 2.5),
        ]
        assert result.required_bins == 1

    def test_accumulated_widths_fill_row_exactly(self, packer: ShelfBinPacker) -> None:
        pieces = _specs([(0.49, 1.0, 5)])

        placements = packer.pack(pieces).layouts[0].placements

        assert [p.y for p in placements] == [0.0] * 5
        assert [p.x for p in placements] == pytest.approx([0.0, 0.49, 0.98, 1.47, 1.96])

    def test_pieces_are_never_rotated(self, packer: ShelfBinPacker) -> None:
        pieces = (PieceSpec(id=1, width=2.0, length=0.5, count=3),)

        for placement in _all_placements(packer.pack(pieces)):
            assert (placement.width, placement.length) == (2.0, 0.5)

    def test_instances_numbered_per_spec(self, packer: ShelfBinPacker) -> None:
        pieces = (PieceSpec(id=5, width=2.45, length=6.0, count=3),)

        placements = packer.pack(pieces).placements_for(5)

        assert [p.instance for p in placements] == [1, 2, 3]
        assert [p.bin_index for p in placements] == [0, 1, 2]

    def test_safety_factor_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ShelfBinPacker(safety_factor=0)


class TestPackingProperties:
    def test_every_instance_placed_exactly_once(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(piece_list)

        placed = Counter(p.spec_id for p in _all_placements(result))
        assert placed == {piece.id: piece.count for piece in piece_list}
        assert result.total_pieces_placed == sum(p.count for p in piece_list)

    def test_no_overlaps_within_a_sheet(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(piece_list)

        for layout in result.layouts:
            for a, b in combinations(layout.placements, 2):
                assert not a.overlaps(b), f"{a} overlaps {b}"

    def test_placements_inside_sheet(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(piece_list)

        for layout in result.layouts:
            for p in layout.placements:
                assert p.bin_index == layout.bin_index
                assert p.x >= 0 and p.y >= 0
                assert p.right_edge <= SHEET_WIDTH + EPSILON
                assert p.bottom_edge <= SHEET_LENGTH + EPSILON

    def test_sheet_count_respects_area_lower_bound(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        metrics = packer.pack(piece_list).metrics

        assert metrics.required_bins >= metrics.lower_bound_bins >= 1
        assert metrics.utilization <= 1.0 + EPSILON

    def test_every_sheet_holds_at_least_one_piece(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(piece_list)

        assert all(layout.piece_count > 0 for layout in result.layouts)
        assert [layout.bin_index for layout in result.layouts] == list(
            range(result.required_bins)
        )

    def test_packing_is_deterministic(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        assert packer.pack(piece_list) == packer.pack(piece_list)

    def test_total_area_from_piece_list(
        self, packer: ShelfBinPacker, piece_list: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(piece_list)

        expected = sum(piece.width * piece.length * piece.count for piece in piece_list)
        assert result.metrics.total_area == pytest.approx(expected)
        assert sum(layout.used_area for layout in result.layouts) == pytest.approx(expected)


# =============================================================================
# Metrics
# =============================================================================


class TestCalculateMetrics:
    def test_empty(self) -> None:
        metrics = calculate_metrics((), ())

        assert metrics.required_bins == 0
        assert metrics.total_area == 0
        assert metrics.utilization == 0
        assert metrics.lower_bound_bins == 0

    def test_utilization(self, three_pieces: tuple[PieceSpec, ...]) -> None:
        metrics = ShelfBinPacker().pack(three_pieces).metrics

        assert metrics.utilization == pytest.approx(6.0 / 14.7)
        assert metrics.utilization_percentage == pytest.approx(40.816, abs=1e-3)

    def test_lower_bound_exact_multiple(self, full_sheets: tuple[PieceSpec, ...]) -> None:
        metrics = ShelfBinPacker().pack(full_sheets).metrics

        assert metrics.lower_bound_bins == 2

    def test_failed_utilization_is_nan(self) -> None:
        metrics = calculate_metrics((), (PieceSpec(id=1, width=3.0, length=1.0, count=1),), failed=True)

        assert math.isnan(metrics.utilization)
        assert metrics.total_area == pytest.approx(3.0)


# =============================================================================
# Failure diagnostics
# =============================================================================


class TestPackingFailure:
    def test_oversized_piece_reports_stuck(
        self, packer: ShelfBinPacker, oversized_piece: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(oversized_piece)

        assert not result.is_complete
        assert result.layouts == ()
        assert result.failure is not None
        assert result.failure.reason == "stuck"
        assert result.failure.bin_index == 0
        assert result.unplaced == {1: 1}
        assert math.isnan(result.metrics.utilization)

    def test_partial_result_keeps_filled_sheets(self, packer: ShelfBinPacker) -> None:
        pieces = (
            PieceSpec(id=1, width=1.0, length=1.0, count=1),
            PieceSpec(id=2, width=3.0, length=1.0, count=1),
        )

        result = packer.pack(pieces)

        assert result.required_bins == 1
        assert result.placements_for(1)
        assert result.failure is not None
        assert result.failure.bin_index == 1
        assert result.unplaced == {2: 1}

    def test_failure_is_logged(
        self,
        packer: ShelfBinPacker,
        oversized_piece: tuple[PieceSpec, ...],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level("ERROR", logger="telas.infrastructure.bin_packing"):
            packer.pack(oversized_piece)

        assert "Packing stuck on sheet 1" in caplog.text

    def test_raise_for_failure(
        self, packer: ShelfBinPacker, oversized_piece: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(oversized_piece)

        with pytest.raises(PackingFailure, match="cannot be placed"):
            result.raise_for_failure()

    def test_raise_for_failure_raises_new_exception(
        self, packer: ShelfBinPacker, oversized_piece: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(oversized_piece)

        raised = []
        for _ in range(2):
            with pytest.raises(PackingFailure) as exc_info:
                result.raise_for_failure()
            raised.append(exc_info.value)

        assert raised[0] is not raised[1]
        assert result.failure not in raised
        assert result.failure.__traceback__ is None
        assert raised[1].unplaced == result.unplaced

    def test_unplaced_is_read_only(
        self, packer: ShelfBinPacker, oversized_piece: tuple[PieceSpec, ...]
    ) -> None:
        result = packer.pack(oversized_piece)

        with pytest.raises(TypeError):
            result.unplaced[1] = 0  # type: ignore[index]
        with pytest.raises(TypeError):
            result.failure.unplaced[1] = 0  # type: ignore[index, union-attr]
        assert result.unplaced == {1: 1}

    def test_safety_ceiling_not_reached_at_one_sheet_per_instance(self) -> None:
        pieces = _specs([(2.45, 6.0, 4)])

        result = ShelfBinPacker(safety_factor=1).pack(pieces)

        assert result.is_complete
        assert result.required_bins == 4

    def test_raise_for_failure_noop_when_complete(
        self, packer: ShelfBinPacker, three_pieces: tuple[PieceSpec, ...]
    ) -> None:
        packer.pack(three_pieces).raise_for_failure()


# =============================================================================
# Memoization
# =============================================================================


class TestPackPieces:
    def test_same_contents_return_same_result(self) -> None:
        first = pack_pieces((PieceSpec(id=1, width=1.0, length=2.0, count=3),))
        second = pack_pieces((PieceSpec(id=1, width=1.0, length=2.0, count=3),))

        assert first is second

    def test_different_contents_repack(self) -> None:
        first = pack_pieces((PieceSpec(id=1, width=1.0, length=2.0, count=3),))
        second = pack_pieces((PieceSpec(id=1, width=1.0, length=2.0, count=4),))

        assert first is not second
        assert second.total_pieces_placed == 4
