"""SVG exporter for cut diagrams.

Wraps CutDiagramRenderer to write every sheet of a packing result into one
SVG file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from telas.infrastructure.cut_diagram_renderer import CutDiagramRenderer
from telas.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from telas.application.dtos import PackingOutput


@ExporterRegistry.register("svg")
class SvgExporter:
    """SVG exporter for cut layout diagrams.

    Files hold every sheet stacked vertically; no display cap applies.

    Attributes:
        format_name: Identifier for this export format.
        file_extension: File extension for SVG files.
    """

    format_name: ClassVar[str] = "svg"
    file_extension: ClassVar[str] = "svg"

    def __init__(self, scale: float = 100.0, show_labels: bool = True) -> None:
        """Initialize the SVG exporter.

        Args:
            scale: Pixels per meter (default 100.0).
            show_labels: Whether to label pieces with their dimensions.
        """
        self.renderer = CutDiagramRenderer(scale=scale, show_labels=show_labels)

    def export(self, output: PackingOutput, path: Path) -> None:
        path.write_text(self.export_string(output), encoding="utf-8")

    def export_string(self, output: PackingOutput) -> str:
        return self.renderer.render_combined_svg(output.packing_result, output.pieces)

    def export_individual_sheets(
        self, output: PackingOutput, base_path: Path
    ) -> list[Path]:
        """Export individual SVG files for each sheet.

        Args:
            output: The packing output.
            base_path: Base path for output files. With more than one sheet,
                files are named {stem}_1.svg, {stem}_2.svg, etc.

        Returns:
            List of paths to the created files.
        """
        svgs = self.renderer.render_all_svg(output.packing_result, output.pieces)
        created_files: list[Path] = []

        for i, svg_content in enumerate(svgs, start=1):
            if len(svgs) == 1:
                file_path = base_path
            else:
                suffix = base_path.suffix or ".svg"
                file_path = base_path.parent / f"{base_path.stem}_{i}{suffix}"

            file_path.write_text(svg_content, encoding="utf-8")
            created_files.append(file_path)

        return created_files
