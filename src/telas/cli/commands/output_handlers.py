"""Output format handling functions for the telas CLI.

This module contains the functions that turn a packing output into console
text and into exported files (SVG, JSON, DXF).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer

from telas.infrastructure import CutDiagramRenderer
from telas.infrastructure.exporters import ExporterRegistry, ExportManager, JsonExporter

if TYPE_CHECKING:
    from telas.application.dtos import PackingOutput

__all__ = [
    "CONSOLE_FORMATS",
    "handle_multi_format_export",
    "parse_export_formats",
    "render_output",
]

CONSOLE_FORMATS = ("summary", "ascii", "svg", "json")


def render_output(
    output: PackingOutput,
    output_format: str,
    max_sheets: int,
    svg_scale: float = 100.0,
    ascii_width: int = 40,
) -> str:
    """Render a packing output in one of the console formats.

    Args:
        output: The packing output to render.
        output_format: One of "summary", "ascii", "svg" or "json".
        max_sheets: Number of sheets drawn before the "N more" note.
        svg_scale: Pixels per meter for SVG output.
        ascii_width: Width in characters for ASCII diagrams.

    Returns:
        The rendered text.

    Raises:
        ValueError: If the format is unknown.
    """
    result = output.packing_result

    if output_format == "summary":
        return CutDiagramRenderer().render_summary(result, output.pieces)
    if output_format == "ascii":
        renderer = CutDiagramRenderer()
        return "\n\n".join(
            [
                renderer.render_summary(result, output.pieces),
                renderer.render_all_ascii(result, ascii_width, max_sheets),
            ]
        )
    if output_format == "svg":
        renderer = CutDiagramRenderer(scale=svg_scale)
        return renderer.render_combined_svg(result, output.pieces, max_sheets)
    if output_format == "json":
        return JsonExporter().export_string(output)

    raise ValueError(
        f"Unknown output format: {output_format}. "
        f"Available formats: {', '.join(CONSOLE_FORMATS)}"
    )


def parse_export_formats(output_formats_str: str) -> list[str]:
    """Parse a comma-separated export format list, or "all".

    Raises:
        typer.Exit: With code 1 if any format is unknown.
    """
    if output_formats_str.strip().lower() == "all":
        return ExporterRegistry.available_formats()

    formats = [f.strip().lower() for f in output_formats_str.split(",") if f.strip()]
    available = ExporterRegistry.available_formats()
    invalid = [f for f in formats if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    return formats


def handle_multi_format_export(
    formats: list[str],
    output_dir: Path | None,
    project_name: str,
    output: PackingOutput,
) -> dict[str, Path]:
    """Export a packing output to several formats at once.

    Args:
        formats: Registered format names to export.
        output_dir: Output directory for exported files (default: current).
        project_name: Project name for file naming.
        output: The packing output to export.

    Returns:
        Mapping of format name to the written file path.

    Raises:
        typer.Exit: With code 1 if nothing could be exported.
    """
    if not formats:
        typer.echo("No valid formats to export.", err=True)
        raise typer.Exit(code=1)

    out_dir = output_dir or Path(".")
    out_dir.mkdir(parents=True, exist_ok=True)

    manager = ExportManager(out_dir)
    try:
        files = manager.export_all(formats, output, project_name)
    except (OSError, ValueError) as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("\nExported files:")
    for fmt, path in files.items():
        typer.echo(f"  {fmt.upper()}: {path}")

    return files
