"""Infrastructure layer - packing engine, rendering and exporters."""

from .bin_packing import (
    PackingFailure,
    PackingMetrics,
    PackingResult,
    PlacedPiece,
    SheetLayout,
    ShelfBinPacker,
    calculate_metrics,
    pack_pieces,
)
from .cut_diagram_renderer import (
    DEFAULT_MAX_SHEETS,
    CutDiagramRenderer,
    build_color_map,
    piece_color,
)

__all__ = [
    "CutDiagramRenderer",
    "DEFAULT_MAX_SHEETS",
    "PackingFailure",
    "PackingMetrics",
    "PackingResult",
    "PlacedPiece",
    "SheetLayout",
    "ShelfBinPacker",
    "build_color_map",
    "calculate_metrics",
    "pack_pieces",
    "piece_color",
]
