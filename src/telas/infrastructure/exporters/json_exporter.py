"""JSON exporter for packing results.

Exports:
- The piece list as submitted
- Summary metrics (sheets, area, utilization, area lower bound)
- Every sheet with its placements
- Failure diagnostics when packing was incomplete
- Schema version field for compatibility
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from telas.domain.value_objects import SHEET_LENGTH, SHEET_WIDTH
from telas.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from telas.application.dtos import PackingOutput
    from telas.infrastructure.bin_packing import SheetLayout


logger = logging.getLogger(__name__)


SCHEMA_VERSION = "1.0"


@ExporterRegistry.register("json")
class JsonExporter:
    """JSON exporter with pieces, sheets, placements and metrics.

    Attributes:
        format_name: "json"
        file_extension: "json"
    """

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, include_placements: bool = True, indent: int = 2) -> None:
        """Initialize the JSON exporter.

        Args:
            include_placements: Whether to list every placed piece per sheet.
            indent: JSON indentation level (default 2 spaces).
        """
        self.include_placements = include_placements
        self.indent = indent

    def export(self, output: PackingOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")
        logger.debug("Wrote JSON packing result to %s", path)

    def export_string(self, output: PackingOutput) -> str:
        return json.dumps(self.to_dict(output), indent=self.indent)

    def to_dict(self, output: PackingOutput) -> dict[str, Any]:
        """Build the JSON-serializable structure for a packing output."""
        result = output.packing_result
        metrics = result.metrics

        data: dict[str, Any] = {
            "schema_version": SCHEMA_VERSION,
            "sheet": {"width": SHEET_WIDTH, "length": SHEET_LENGTH},
            "pieces": [
                {
                    "id": piece.id,
                    "width": piece.width,
                    "length": piece.length,
                    "count": piece.count,
                }
                for piece in output.pieces
            ],
            "metrics": {
                "required_bins": metrics.required_bins,
                "total_area": round(metrics.total_area, 6),
                # NaN is not valid JSON
                "utilization": (
                    None
                    if math.isnan(metrics.utilization)
                    else round(metrics.utilization, 6)
                ),
                "lower_bound_bins": metrics.lower_bound_bins,
            },
            "complete": result.is_complete,
            "bins": [self._layout_to_dict(layout) for layout in result.layouts],
        }

        if result.failure is not None:
            data["failure"] = {
                "reason": result.failure.reason,
                "message": str(result.failure),
                "bin_index": result.failure.bin_index,
                "unplaced": {str(k): v for k, v in result.unplaced.items()},
            }

        return data

    def _layout_to_dict(self, layout: SheetLayout) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "bin_index": layout.bin_index,
            "piece_count": layout.piece_count,
            "used_area": round(layout.used_area, 6),
            "utilization": round(layout.utilization, 6),
        }
        if self.include_placements:
            entry["placements"] = [
                {
                    "spec_id": p.spec_id,
                    "instance": p.instance,
                    "width": p.width,
                    "length": p.length,
                    "x": round(p.x, 6),
                    "y": round(p.y, 6),
                }
                for p in layout.placements
            ]
        return entry
