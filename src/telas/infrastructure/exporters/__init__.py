"""Exporter framework for packing results.

This package provides a unified exporter framework with:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Coordinates multi-format export operations

Registered exporters:
- dxf: DXF drawing of every sheet with its cut pieces
- json: Pieces, sheets, placements and metrics
- svg: SVG cut diagrams showing piece placements on sheets

Usage:
    from telas.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()

    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["dxf", "json", "svg"], packing_output, project_name="job")
"""

from telas.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
)

# Import exporters to trigger registration
from telas.infrastructure.exporters.dxf import DxfExporter
from telas.infrastructure.exporters.json_exporter import JsonExporter
from telas.infrastructure.exporters.svg import SvgExporter

__all__ = [
    # Framework
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    # Registered exporters
    "DxfExporter",
    "JsonExporter",
    "SvgExporter",
]
