"""Typer CLI for sheet calculation."""

import logging
import re
from pathlib import Path
from typing import Annotated

import typer

from telas.application import PackPiecesCommand, PieceInput
from telas.application.config import (
    ConfigError,
    config_to_piece_inputs,
    load_config,
)
from telas.cli.commands import (
    handle_multi_format_export,
    parse_export_formats,
    render_output,
    validate_command,
)
from telas.cli.commands.output_handlers import CONSOLE_FORMATS
from telas.cli.logging_setup import setup_logging
from telas.infrastructure import DEFAULT_MAX_SHEETS

# WxL or WxLxN, with "." or "," as decimal separator
PIECE_PATTERN = re.compile(
    r"^\s*([0-9.,]+)\s*[xX*]\s*([0-9.,]+)\s*(?:[xX*]\s*([0-9]+))?\s*$"
)

# Exit code for a packing that could not place every piece
EXIT_INCOMPLETE = 2


app = typer.Typer(
    name="telas",
    help="Calculate how many 2.45m x 6m sheets a list of pieces needs.",
)

app.command(name="validate")(validate_command)


def parse_piece(value: str) -> PieceInput:
    """Parse a ``WxL`` or ``WxLxN`` piece option.

    Dimensions are passed on unconverted; range checks happen in the
    domain validation.

    Raises:
        typer.BadParameter: If the value does not have that shape.
    """
    match = PIECE_PATTERN.match(value)
    if match is None:
        raise typer.BadParameter(
            f"Invalid piece {value!r}. Expected WIDTHxLENGTH or WIDTHxLENGTHxCOUNT, "
            f"e.g. 1.2x2.5x3"
        )
    width, length, count = match.groups()
    return PieceInput(
        width=width.replace(",", "."),
        length=length.replace(",", "."),
        count=count if count is not None else 1,
    )


@app.command()
def pack(
    piece: Annotated[
        list[str] | None,
        typer.Option(
            "--piece",
            "-p",
            help="Piece as WIDTHxLENGTH[xCOUNT] in meters (repeatable)",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON job file"),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: summary, ascii, svg, json"),
    ] = None,
    max_sheets: Annotated[
        int | None,
        typer.Option("--max-sheets", min=0, help="Sheets drawn in diagrams (default: 3)"),
    ] = None,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the output to a file instead of stdout"),
    ] = None,
    output_formats: Annotated[
        str | None,
        typer.Option(
            "--output-formats",
            help="Comma-separated export formats: svg,json,dxf (or 'all')",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Output directory for multi-format export"),
    ] = None,
    project_name: Annotated[
        str | None,
        typer.Option("--project-name", help="Project name for output file naming"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log packing details to stderr"),
    ] = False,
) -> None:
    """Pack pieces onto sheets and report how many sheets are needed.

    Pieces come from --piece options, a job file, or both (job file pieces
    first). Exits with 2 when some pieces could not be placed; the partial
    result is still printed.

    Examples:
        telas pack --piece 1x2x3
        telas pack -p 2.45x6x2 -p 0.5x0.5 --format ascii
        telas pack --config job.json --output-formats all --output-dir ./out
    """
    if verbose:
        setup_logging(logging.DEBUG)

    inputs: list[PieceInput] = []
    svg_scale = 100.0
    ascii_width = 40
    export_formats: list[str] = []

    if config_file is not None:
        try:
            config = load_config(config_file)
        except ConfigError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

        inputs.extend(config_to_piece_inputs(config))
        if output_format is None:
            output_format = config.output.format
        if max_sheets is None:
            max_sheets = config.output.max_sheets
        if project_name is None and config.name:
            project_name = config.name
        svg_scale = config.output.svg_scale
        ascii_width = config.output.ascii_width
        export_formats = list(config.output.export_formats)

    for value in piece or []:
        try:
            inputs.append(parse_piece(value))
        except typer.BadParameter as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

    output_format = (output_format or "summary").lower()
    if output_format not in CONSOLE_FORMATS:
        typer.echo(
            f"Error: Unknown format '{output_format}'. "
            f"Available formats: {', '.join(CONSOLE_FORMATS)}",
            err=True,
        )
        raise typer.Exit(code=1)
    if max_sheets is None:
        max_sheets = DEFAULT_MAX_SHEETS

    if output_formats is not None:
        export_formats = parse_export_formats(output_formats)

    result = PackPiecesCommand().execute(inputs)

    if not result.is_valid:
        for error in result.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    rendered = render_output(result, output_format, max_sheets, svg_scale, ascii_width)

    if output_file is not None:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(rendered + "\n", encoding="utf-8")
        typer.echo(f"Output written to: {output_file}")
    else:
        typer.echo(rendered)

    if export_formats:
        handle_multi_format_export(
            export_formats, output_dir, project_name or "telas", result
        )

    if not result.is_complete:
        typer.echo(
            f"Warning: packing incomplete: {result.packing_result.failure}", err=True
        )
        raise typer.Exit(code=EXIT_INCOMPLETE)


if __name__ == "__main__":
    app()
