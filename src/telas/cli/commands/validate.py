"""The ``telas validate`` command."""

from pathlib import Path
from typing import Annotated

import typer

from telas.application.config import (
    ConfigError,
    ValidationResult,
    load_config,
    validate_config,
)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Check a job file without producing any output files.

    The file is loaded, every piece entry is checked and the pieces are
    packed, so a file that passes here will pack. Cutting advisories
    (empty list, duplicate entries, low utilization) are shown as warnings.

    Exit codes: 0 valid, 1 errors, 2 valid with warnings.

    Example:
        telas validate job.json
    """
    typer.echo(f"Validating {config_file}...\n")

    try:
        result = validate_config(load_config(config_file))
    except ConfigError as e:
        result = ValidationResult.from_config_error(e)

    _report(result)
    raise typer.Exit(code=result.exit_code)


def _report(result: ValidationResult) -> None:
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error.path}: {error.message}", err=True)
            if error.value is not None:
                typer.echo(f"    Value: {error.value!r}", err=True)
        typer.echo(err=True)

    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    counts = f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    if not result.is_valid:
        typer.echo(f"Validation failed: {counts}", err=True)
    elif result.has_warnings:
        typer.echo(f"Validation passed with {counts}")
    else:
        typer.echo("Validation passed. Job file is valid.")
