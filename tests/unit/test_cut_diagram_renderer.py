"""Unit tests for CutDiagramRenderer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from telas.application import PackingOutput
from telas.domain import PieceSpec
from telas.infrastructure.bin_packing import PackingResult, ShelfBinPacker
from telas.infrastructure.cut_diagram_renderer import (
    CutDiagramRenderer,
    build_color_map,
    hidden_sheets_note,
    piece_color,
)

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def renderer() -> CutDiagramRenderer:
    return CutDiagramRenderer()


@pytest.fixture
def five_sheets() -> tuple[tuple[PieceSpec, ...], PackingResult]:
    pieces = (PieceSpec(id=1, width=2.45, length=6.0, count=5),)
    return pieces, ShelfBinPacker().pack(pieces)


def _piece_rects(svg: str) -> list[ET.Element]:
    root = ET.fromstring(svg)
    return [rect for rect in root.iter(f"{SVG_NS}rect") if "data-piece-id" in rect.attrib]


class TestColors:
    @pytest.mark.parametrize(
        ("index", "expected"),
        [
            (0, "hsl(0, 50%, 50%)"),
            (1, "hsl(137.5, 50%, 50%)"),
            (3, "hsl(52.5, 50%, 50%)"),
        ],
    )
    def test_golden_angle_hues(self, index: int, expected: str) -> None:
        assert piece_color(index) == expected

    def test_color_map_follows_list_position(self) -> None:
        pieces = (
            PieceSpec(id=4, width=1.0, length=1.0, count=1),
            PieceSpec(id=9, width=1.0, length=1.0, count=1),
        )

        assert build_color_map(pieces) == {4: piece_color(0), 9: piece_color(1)}

    def test_hidden_sheets_note(self) -> None:
        assert hidden_sheets_note(1) == "... 1 more sheet not shown"
        assert hidden_sheets_note(4) == "... 4 more sheets not shown"


class TestRendererInit:
    def test_invalid_scale(self) -> None:
        with pytest.raises(ValueError, match="Scale must be positive"):
            CutDiagramRenderer(scale=0)

    def test_invalid_opacity(self) -> None:
        with pytest.raises(ValueError, match="Opacity"):
            CutDiagramRenderer(piece_opacity=1.5)


class TestRenderSvg:
    def test_valid_svg_with_one_rect_per_piece(
        self, renderer: CutDiagramRenderer, three_pieces_output: PackingOutput
    ) -> None:
        layout = three_pieces_output.packing_result.layouts[0]
        color_map = build_color_map(three_pieces_output.pieces)

        svg = renderer.render_svg(layout, 1, color_map)
        rects = _piece_rects(svg)

        assert len(rects) == 3
        assert {r.get("fill") for r in rects} == {"hsl(0, 50%, 50%)"}
        assert {r.get("fill-opacity") for r in rects} == {"0.7"}
        assert {r.get("stroke") for r in rects} == {"#FFFFFF"}

    def test_scaled_positions(
        self, renderer: CutDiagramRenderer, three_pieces_output: PackingOutput
    ) -> None:
        layout = three_pieces_output.packing_result.layouts[0]

        rects = _piece_rects(renderer.render_svg(layout))

        # 30px header above the sheet
        assert [(r.get("x"), r.get("y")) for r in rects] == [
            ("0", "30"),
            ("100", "30"),
            ("0", "230"),
        ]
        assert rects[0].get("width") == "100"
        assert rects[0].get("height") == "200"

    def test_header_and_labels(
        self, renderer: CutDiagramRenderer, three_pieces_output: PackingOutput
    ) -> None:
        layout = three_pieces_output.packing_result.layouts[0]

        svg = renderer.render_svg(layout, total_sheets=1)

        assert "Sheet 1 of 1 - 3 pieces - 40.8% used" in svg
        assert svg.count(">1x2</text>") == 3

    def test_labels_can_be_hidden(self, three_pieces_output: PackingOutput) -> None:
        layout = three_pieces_output.packing_result.layouts[0]

        svg = CutDiagramRenderer(show_labels=False).render_svg(layout)

        assert "1x2</text>" not in svg

    def test_render_all_svg(
        self,
        renderer: CutDiagramRenderer,
        five_sheets: tuple[tuple[PieceSpec, ...], PackingResult],
    ) -> None:
        pieces, result = five_sheets

        svgs = renderer.render_all_svg(result, pieces)

        assert len(svgs) == 5
        assert "Sheet 5 of 5" in svgs[-1]


class TestRenderCombinedSvg:
    def test_all_sheets_without_cap(
        self,
        renderer: CutDiagramRenderer,
        five_sheets: tuple[tuple[PieceSpec, ...], PackingResult],
    ) -> None:
        pieces, result = five_sheets

        svg = renderer.render_combined_svg(result, pieces)

        assert len(_piece_rects(svg)) == 5
        assert "not shown" not in svg

    def test_cap_adds_note(
        self,
        renderer: CutDiagramRenderer,
        five_sheets: tuple[tuple[PieceSpec, ...], PackingResult],
    ) -> None:
        pieces, result = five_sheets

        svg = renderer.render_combined_svg(result, pieces, max_sheets=3)

        assert len(_piece_rects(svg)) == 3
        assert "... 2 more sheets not shown" in svg
        assert "Sheet 4 of 5" not in svg

    def test_empty_result(self, renderer: CutDiagramRenderer) -> None:
        svg = renderer.render_combined_svg(ShelfBinPacker().pack(()))

        assert "No sheets to display" in svg
        ET.fromstring(svg)


class TestRenderAscii:
    def test_single_sheet(
        self, renderer: CutDiagramRenderer, three_pieces_output: PackingOutput
    ) -> None:
        layout = three_pieces_output.packing_result.layouts[0]

        ascii_art = renderer.render_ascii(layout, width=30)
        lines = ascii_art.split("\n")

        assert lines[0] == "Sheet 1 of 1 - 40.8% used"
        assert all(len(line) == 30 for line in lines[1:])
        assert "1x2" in ascii_art

    def test_width_too_small(
        self, renderer: CutDiagramRenderer, three_pieces_output: PackingOutput
    ) -> None:
        layout = three_pieces_output.packing_result.layouts[0]

        with pytest.raises(ValueError, match="at least 10"):
            renderer.render_ascii(layout, width=5)

    def test_cap(
        self,
        renderer: CutDiagramRenderer,
        five_sheets: tuple[tuple[PieceSpec, ...], PackingResult],
    ) -> None:
        _, result = five_sheets

        text = renderer.render_all_ascii(result, max_sheets=3)

        assert "Sheet 3 of 5" in text
        assert "Sheet 4 of 5" not in text
        assert text.endswith("... 2 more sheets not shown")

    def test_empty(self, renderer: CutDiagramRenderer) -> None:
        assert renderer.render_all_ascii(ShelfBinPacker().pack(())) == "No sheets to display."


class TestRenderSummary:
    def test_summary(
        self, renderer: CutDiagramRenderer, three_pieces_output: PackingOutput
    ) -> None:
        summary = renderer.render_summary(
            three_pieces_output.packing_result, three_pieces_output.pieces
        )

        assert "Sheets Required: 1" in summary
        assert "Total Area: 6.00 m2" in summary
        assert "Utilization: 40.8%" in summary
        assert "#1: 1m x 2m (Qty: 3)" in summary
        assert "Sheet 1: 3 pieces, 40.8% used" in summary

    def test_empty(self, renderer: CutDiagramRenderer) -> None:
        summary = renderer.render_summary(ShelfBinPacker().pack(()))

        assert "Sheets Required: 0" in summary
        assert "Total Area: 0.00 m2" in summary
        assert "Utilization: 0.0%" in summary
        assert "No pieces added" in summary

    def test_incomplete(
        self, renderer: CutDiagramRenderer, failed_output: PackingOutput
    ) -> None:
        summary = renderer.render_summary(failed_output.packing_result, failed_output.pieces)

        assert "Utilization: n/a" in summary
        assert "INCOMPLETE: Packing stuck on sheet 1" in summary
        assert "#1: 1 unplaced" in summary
