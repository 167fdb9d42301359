"""DXF format exporter for sheet cut layouts.

Generates 2D DXF files (R2010 format) with one sheet outline per used sheet,
laid out side by side, and every placed piece drawn at its cutting position.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import ezdxf

from telas.domain.value_objects import SHEET_LENGTH, SHEET_WIDTH, format_dimension
from telas.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

    from telas.application.dtos import PackingOutput
    from telas.infrastructure.bin_packing import PlacedPiece, SheetLayout


logger = logging.getLogger(__name__)


LAYERS = {
    "SHEETS": 7,  # White - sheet outlines
    "PIECES": 3,  # Green - piece outlines
    "LABELS": 5,  # Blue - text labels
}

UNIT_SCALES = {"m": 1.0, "mm": 1000.0}


@ExporterRegistry.register("dxf")
class DxfExporter:
    """Exports sheet layouts to DXF for cutting tables and CAD review.

    DXF uses a y-up coordinate system, so placements (measured from the
    sheet's top-left corner) are flipped vertically.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"

    def __init__(self, units: str = "m", sheet_spacing: float = 0.5) -> None:
        """Initialize the DXF exporter.

        Args:
            units: Output units - "m" or "mm".
            sheet_spacing: Gap between sheets in meters.
        """
        if units not in UNIT_SCALES:
            raise ValueError(f"Invalid units: {units}. Must be 'm' or 'mm'")
        if sheet_spacing < 0:
            raise ValueError("Sheet spacing must be non-negative")
        self.units = units
        self.scale = UNIT_SCALES[units]
        self.sheet_spacing = sheet_spacing

    def export(self, output: PackingOutput, path: Path) -> None:
        doc = self._build_document(output)
        doc.saveas(path)
        logger.info("Exported DXF to %s", path)

    def export_string(self, output: PackingOutput) -> str:
        doc = self._build_document(output)
        stream = StringIO()
        doc.write(stream)
        return stream.getvalue()

    def _build_document(self, output: PackingOutput) -> Drawing:
        doc = ezdxf.new("R2010")
        for name, color in LAYERS.items():
            doc.layers.add(name, color=color)

        layouts = output.packing_result.layouts
        if not layouts:
            logger.warning("No sheets to export")

        msp = doc.modelspace()
        for layout in layouts:
            offset_x = layout.bin_index * (SHEET_WIDTH + self.sheet_spacing)
            self._draw_sheet(msp, layout, offset_x)
        return doc

    def _draw_sheet(self, msp: Modelspace, layout: SheetLayout, offset_x: float) -> None:
        """Draw a sheet outline, its title and its placed pieces."""
        self._draw_rectangle(msp, offset_x, 0.0, SHEET_WIDTH, SHEET_LENGTH, "SHEETS")
        msp.add_text(
            f"Sheet {layout.bin_index + 1}",
            height=0.1 * self.scale,
            dxfattribs={"layer": "LABELS"},
        ).set_placement(
            (offset_x * self.scale, (SHEET_LENGTH + 0.1) * self.scale)
        )

        for placement in layout.placements:
            self._draw_piece(msp, placement, offset_x)

    def _draw_piece(
        self, msp: Modelspace, placement: PlacedPiece, offset_x: float
    ) -> None:
        x = offset_x + placement.x
        y = SHEET_LENGTH - placement.bottom_edge
        self._draw_rectangle(msp, x, y, placement.width, placement.length, "PIECES")

        if self.units == "mm":
            text = f"{placement.width * self.scale:.0f} x {placement.length * self.scale:.0f} mm"
        else:
            text = f"{format_dimension(placement.width)} x {format_dimension(placement.length)} m"

        text_height = max(0.03, min(0.15, min(placement.width, placement.length) * 0.08))
        msp.add_mtext(
            text,
            dxfattribs={
                "layer": "LABELS",
                "char_height": text_height * self.scale,
                "insert": (
                    (x + placement.width / 2) * self.scale,
                    (y + placement.length / 2) * self.scale,
                ),
                "attachment_point": 5,  # MIDDLE_CENTER
            },
        )

    def _draw_rectangle(
        self,
        msp: Modelspace,
        x: float,
        y: float,
        width: float,
        height: float,
        layer: str,
    ) -> None:
        """Draw a closed rectangle from its bottom-left corner, in meters."""
        s = self.scale
        points = [
            (x * s, y * s),
            ((x + width) * s, y * s),
            ((x + width) * s, (y + height) * s),
            (x * s, (y + height) * s),
        ]
        msp.add_lwpolyline(points, close=True, dxfattribs={"layer": layer})


__all__ = ["DxfExporter", "LAYERS"]
