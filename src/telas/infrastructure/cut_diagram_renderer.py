"""Cut diagram rendering for sheet packing visualization.

This module provides SVG and ASCII rendering of sheet layouts showing piece
placements, dimensions and waste areas, plus a plain-text summary of the
packing metrics.
"""

from __future__ import annotations

from typing import Sequence

from telas.domain.value_objects import (
    SHEET_LENGTH,
    SHEET_WIDTH,
    PieceSpec,
    format_dimension,
)
from telas.infrastructure.bin_packing import PackingResult, PlacedPiece, SheetLayout

DEFAULT_MAX_SHEETS = 3


def piece_color(index: int) -> str:
    """Color for the piece at ``index`` in the piece list.

    Hues are spread by the golden angle so neighbouring entries stay
    distinguishable however many pieces there are.
    """
    return f"hsl({index * 137.5 % 360:g}, 50%, 50%)"


def build_color_map(pieces: Sequence[PieceSpec]) -> dict[int, str]:
    """Map piece ids to their display colors."""
    return {piece.id: piece_color(index) for index, piece in enumerate(pieces)}


def hidden_sheets_note(hidden: int) -> str:
    return f"... {hidden} more sheet{'s' if hidden != 1 else ''} not shown"


class CutDiagramRenderer:
    """Renders cut diagrams in SVG and ASCII format.

    Attributes:
        scale: Pixels per meter for SVG rendering (default 100).
        piece_fill: Fill color for pieces missing from the color map.
        piece_stroke: Stroke color for piece outlines.
        piece_opacity: Fill opacity of pieces.
        sheet_fill: Background color of the sheet.
        waste_fill: Fill color for waste areas.
        text_color: Color for piece labels.
        header_color: Color for header text.
        show_labels: Whether to draw the ``WxL`` label on each piece.
    """

    def __init__(
        self,
        scale: float = 100.0,
        piece_fill: str = "#3B82F6",  # Blue
        piece_stroke: str = "#FFFFFF",  # White
        piece_opacity: float = 0.7,
        sheet_fill: str = "#F3F4F6",  # Light gray
        waste_fill: str = "#D1D5DB",  # Gray
        text_color: str = "#FFFFFF",  # White
        header_color: str = "#000000",  # Black
        show_labels: bool = True,
    ) -> None:
        if scale <= 0:
            raise ValueError("Scale must be positive")
        if not 0 <= piece_opacity <= 1:
            raise ValueError("Opacity must be between 0 and 1")
        self.scale = scale
        self.piece_fill = piece_fill
        self.piece_stroke = piece_stroke
        self.piece_opacity = piece_opacity
        self.sheet_fill = sheet_fill
        self.waste_fill = waste_fill
        self.text_color = text_color
        self.header_color = header_color
        self.show_labels = show_labels

    def render_svg(
        self,
        layout: SheetLayout,
        total_sheets: int = 1,
        color_map: dict[int, str] | None = None,
    ) -> str:
        """Generate SVG cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placed pieces.
            total_sheets: Total number of sheets (for header display).
            color_map: Display color per piece id, see build_color_map().

        Returns:
            SVG string representation of the layout.
        """
        header_height = 30  # Pixels for header text
        svg_width = SHEET_WIDTH * self.scale
        svg_height = SHEET_LENGTH * self.scale + header_height

        parts: list[str] = [
            f'<svg width="{svg_width:g}" height="{svg_height:g}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            "",
            "  <!-- Background -->",
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{svg_height:g}" '
            f'fill="white"/>',
            "",
            self._render_header(layout, total_sheets, svg_width, header_height),
            "",
            "  <!-- Sheet outline -->",
            f'  <rect x="0" y="{header_height}" width="{svg_width:g}" '
            f'height="{SHEET_LENGTH * self.scale:g}" fill="{self.sheet_fill}" '
            f'stroke="#000000" stroke-width="2"/>',
        ]

        # Waste before pieces so pieces render on top
        waste_svg = self._render_waste_areas(layout, header_height)
        if waste_svg:
            parts.append("")
            parts.append("  <!-- Waste areas -->")
            parts.append(waste_svg)

        parts.append("")
        parts.append("  <!-- Placed pieces -->")
        for placement in layout.placements:
            parts.append(self._render_piece(placement, header_height, color_map or {}))

        parts.append("")
        parts.append("</svg>")

        return "\n".join(parts)

    def render_all_svg(
        self,
        result: PackingResult,
        pieces: Sequence[PieceSpec] = (),
    ) -> list[str]:
        """Generate SVG cut diagrams for all sheets, one string per sheet."""
        color_map = build_color_map(pieces)
        total_sheets = len(result.layouts)
        return [
            self.render_svg(layout, total_sheets, color_map)
            for layout in result.layouts
        ]

    def _render_header(
        self,
        layout: SheetLayout,
        total_sheets: int,
        svg_width: float,
        header_height: float,
    ) -> str:
        header_text = (
            f"Sheet {layout.bin_index + 1} of {total_sheets} - "
            f"{layout.piece_count} piece{'s' if layout.piece_count != 1 else ''} - "
            f"{layout.utilization * 100:.1f}% used"
        )

        return (
            f"  <!-- Header -->\n"
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{header_height}" '
            f'fill="#E0E0E0"/>\n'
            f'  <text x="10" y="{header_height - 8}" '
            f'font-family="Arial, sans-serif" font-size="14" '
            f'fill="{self.header_color}">{header_text}</text>'
        )

    def _render_piece(
        self,
        placement: PlacedPiece,
        header_height: float,
        color_map: dict[int, str],
    ) -> str:
        """Render a single placed piece as SVG rect and label."""
        x = placement.x * self.scale
        y = header_height + placement.y * self.scale
        w = placement.width * self.scale
        h = placement.length * self.scale
        fill_color = color_map.get(placement.spec_id, self.piece_fill)

        rect = (
            f'<rect x="{x:g}" y="{y:g}" width="{w:g}" height="{h:g}" '
            f'fill="{fill_color}" fill-opacity="{self.piece_opacity:g}" '
            f'stroke="{self.piece_stroke}" data-piece-id="{placement.spec_id}"/>'
        )

        font_size = min(12, min(w, h) / 4)
        if not self.show_labels or font_size < 6:
            # Too small for text
            return f"  {rect}"

        return "\n".join(
            [
                "  <g>",
                f"    {rect}",
                f'    <text x="{x + w / 2:g}" y="{y + h / 2 + font_size / 3:g}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size:g}" fill="{self.text_color}">'
                f"{placement.label}</text>",
                "  </g>",
            ]
        )

    def _render_waste_areas(self, layout: SheetLayout, header_height: float) -> str:
        """Render waste areas as gray rectangles.

        Shows the strip below the lowest piece and the strip right of the
        rightmost piece.
        """
        if not layout.placements:
            return ""

        parts: list[str] = []

        max_y = max(p.bottom_edge for p in layout.placements)
        waste_height = SHEET_LENGTH - max_y
        if waste_height > 0.01:  # Only show if meaningful
            parts.append(
                f'  <rect x="0" y="{header_height + max_y * self.scale:g}" '
                f'width="{SHEET_WIDTH * self.scale:g}" '
                f'height="{waste_height * self.scale:g}" '
                f'fill="{self.waste_fill}" stroke="none"/>'
            )

        max_x = max(p.right_edge for p in layout.placements)
        waste_width = SHEET_WIDTH - max_x
        if waste_width > 0.01:
            parts.append(
                f'  <rect x="{max_x * self.scale:g}" y="{header_height}" '
                f'width="{waste_width * self.scale:g}" '
                f'height="{max_y * self.scale:g}" '
                f'fill="{self.waste_fill}" stroke="none"/>'
            )

        return "\n".join(parts)

    def render_combined_svg(
        self,
        result: PackingResult,
        pieces: Sequence[PieceSpec] = (),
        max_sheets: int | None = None,
    ) -> str:
        """Generate single SVG with sheets stacked vertically.

        Args:
            result: Complete packing result.
            pieces: Piece list, used to color pieces consistently.
            max_sheets: Display cap. Sheets beyond it are summarized in a
                note instead of drawn. None draws every sheet.

        Returns:
            Combined SVG string.
        """
        if not result.layouts:
            return (
                '<svg width="200" height="50" xmlns="http://www.w3.org/2000/svg">'
                '<text x="10" y="30">No sheets to display</text></svg>'
            )

        layouts = result.layouts
        if max_sheets is not None:
            layouts = layouts[: max(max_sheets, 0)]
        hidden = len(result.layouts) - len(layouts)

        header_height = 30
        sheet_spacing = 20
        note_height = 30 if hidden else 0
        sheet_height = SHEET_LENGTH * self.scale + header_height + sheet_spacing

        svg_width = SHEET_WIDTH * self.scale
        svg_height = sheet_height * len(layouts) + note_height

        parts: list[str] = [
            f'<svg width="{svg_width:g}" height="{svg_height:g}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width:g}" height="{svg_height:g}" '
            f'fill="white"/>',
        ]

        color_map = build_color_map(pieces)
        total_sheets = len(result.layouts)
        y_offset = 0.0

        for layout in layouts:
            parts.append(f'  <g transform="translate(0, {y_offset:g})">')
            parts.append(f"    <!-- Sheet {layout.bin_index + 1} -->")

            # Reuse the single-sheet body, without its <svg> wrapper
            sheet_svg = self.render_svg(layout, total_sheets, color_map)
            start_idx = sheet_svg.find(">") + 1
            end_idx = sheet_svg.rfind("</svg>")
            for line in sheet_svg[start_idx:end_idx].strip().split("\n"):
                if line.strip():
                    parts.append(f"  {line}")

            parts.append("  </g>")
            y_offset += sheet_height

        if hidden:
            parts.append(
                f'  <text x="10" y="{y_offset + 20:g}" '
                f'font-family="Arial, sans-serif" font-size="14" '
                f'fill="{self.header_color}">{hidden_sheets_note(hidden)}</text>'
            )

        parts.append("</svg>")
        return "\n".join(parts)

    def render_ascii(
        self,
        layout: SheetLayout,
        width: int = 40,
        total_sheets: int = 1,
    ) -> str:
        """Generate ASCII cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placed pieces.
            width: Diagram width in characters, borders included.
            total_sheets: Total number of sheets (for header display).

        Returns:
            ASCII string representation of the layout.
        """
        if width < 10:
            raise ValueError("ASCII width must be at least 10 characters")

        # Reserve 2 chars for borders
        usable_width = width - 2
        scale_x = usable_width / SHEET_WIDTH

        # Characters are about twice as tall as they are wide
        grid_height = max(int(usable_width * (SHEET_LENGTH / SHEET_WIDTH) * 0.5), 10)
        scale_y = grid_height / SHEET_LENGTH

        grid = [[" " for _ in range(usable_width)] for _ in range(grid_height)]

        for placement in layout.placements:
            self._draw_piece_ascii(grid, placement, scale_x, scale_y)

        lines: list[str] = [
            f"Sheet {layout.bin_index + 1} of {total_sheets} - "
            f"{layout.utilization * 100:.1f}% used",
            "+" + "-" * usable_width + "+",
        ]
        for row in grid:
            lines.append("|" + "".join(row) + "|")
        lines.append("+" + "-" * usable_width + "+")

        return "\n".join(lines)

    def _draw_piece_ascii(
        self,
        grid: list[list[str]],
        placement: PlacedPiece,
        scale_x: float,
        scale_y: float,
    ) -> None:
        """Draw a single piece onto the ASCII grid."""
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0

        x1 = max(0, min(int(placement.x * scale_x), grid_width - 1))
        x2 = max(0, min(int(placement.right_edge * scale_x), grid_width - 1))
        y1 = max(0, min(int(placement.y * scale_y), grid_height - 1))
        y2 = max(0, min(int(placement.bottom_edge * scale_y), grid_height - 1))

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for y in (y1, y2):
            for x in (x1, x2):
                grid[y][x] = "+"

        # Label inside the piece, if space permits
        label_row = y1 + 1
        label = placement.label[: max(x2 - x1 - 1, 0)]
        if label_row < y2 and label:
            for i, char in enumerate(label):
                grid[label_row][x1 + 1 + i] = char

    def render_all_ascii(
        self,
        result: PackingResult,
        width: int = 40,
        max_sheets: int | None = None,
    ) -> str:
        """Generate ASCII cut diagrams for the sheets, up to ``max_sheets``."""
        if not result.layouts:
            return "No sheets to display."

        layouts = result.layouts
        if max_sheets is not None:
            layouts = layouts[: max(max_sheets, 0)]
        hidden = len(result.layouts) - len(layouts)

        total_sheets = len(result.layouts)
        parts: list[str] = []
        for layout in layouts:
            parts.append(self.render_ascii(layout, width, total_sheets))
            parts.append("")  # Blank line between sheets

        if hidden:
            parts.append(hidden_sheets_note(hidden))

        return "\n".join(parts).rstrip("\n")

    def render_summary(
        self,
        result: PackingResult,
        pieces: Sequence[PieceSpec] = (),
    ) -> str:
        """Generate text summary of sheet count, area and utilization.

        Args:
            result: Complete packing result.
            pieces: Piece list the result was computed from.

        Returns:
            Formatted summary string.
        """
        metrics = result.metrics
        lines: list[str] = [
            "SHEET CALCULATION SUMMARY",
            "=" * 40,
            f"Sheets Required: {metrics.required_bins}",
            f"Total Area: {metrics.total_area:.2f} m2",
        ]
        if result.is_complete:
            lines.append(f"Utilization: {metrics.utilization_percentage:.1f}%")
        else:
            lines.append("Utilization: n/a")

        lines.append("")
        lines.append("Pieces:")
        if not pieces:
            lines.append("  No pieces added")
        for piece in pieces:
            lines.append(
                f"  #{piece.id}: {format_dimension(piece.width)}m x "
                f"{format_dimension(piece.length)}m (Qty: {piece.count})"
            )

        if result.layouts:
            lines.append("")
            lines.append("Per-Sheet Details:")
            for layout in result.layouts:
                lines.append(
                    f"  Sheet {layout.bin_index + 1}: "
                    f"{layout.piece_count} piece{'s' if layout.piece_count != 1 else ''}, "
                    f"{layout.utilization * 100:.1f}% used"
                )

        if result.failure is not None:
            lines.append("")
            lines.append(f"INCOMPLETE: {result.failure}")
            for spec_id, count in result.unplaced.items():
                lines.append(f"  #{spec_id}: {count} unplaced")

        return "\n".join(lines)
