"""CLI command implementations for the telas application.

This package contains subcommands and helpers for the telas CLI:
- validate: Validate a job file
- output_handlers: Console rendering and multi-format export
"""

from telas.cli.commands.output_handlers import (
    handle_multi_format_export,
    parse_export_formats,
    render_output,
)
from telas.cli.commands.validate import validate_command

__all__ = [
    "handle_multi_format_export",
    "parse_export_formats",
    "render_output",
    "validate_command",
]
