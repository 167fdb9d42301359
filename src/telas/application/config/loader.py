"""Job file loading.

A job file goes through three stages (read, JSON decode, schema check) and
each failure is reported as a ConfigError whose ``error_type`` names the
stage. Schema failures carry one detail per offending value, addressed by
its JSON path (``pieces[0].width``).
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from telas.application.config.schema import JobConfiguration


class ConfigError(Exception):
    """A job file could not be loaded.

    Attributes:
        message: Human-readable summary.
        error_type: One of file_not_found, permission_denied, file_read_error,
            json_parse, validation.
        path: The job file, when loading from disk.
        details: ``{line, column, message}`` for json_parse;
            ``{path, message, value, error_type}`` per field for validation.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_schema_error(
        cls, error: PydanticValidationError, path: Path | None = None
    ) -> "ConfigError":
        details = [
            {
                "path": json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
            for err in error.errors()
        ]
        lines = ["Job file validation failed:"]
        for detail in details:
            line = f"  - {detail['path']}: {detail['message']}"
            if isinstance(detail["value"], (int, float, str)):
                line += f" (got: {detail['value']!r})"
            lines.append(line)
        return cls("\n".join(lines), "validation", path, details)


def json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location, e.g. ``("pieces", 0, "width")``,
    as ``pieces[0].width``."""
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else str(segment)
    return path


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"Job file not found: {path}", "file_not_found", path)

    try:
        text = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            f"Permission denied reading job file: {path}", "permission_denied", path
        ) from None
    except OSError as e:
        raise ConfigError(
            f"Error reading job file: {path}: {e}", "file_read_error", path
        ) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in job file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            "json_parse",
            path,
            [{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from None


def load_config_from_dict(
    data: dict[str, Any], path: Path | None = None
) -> JobConfiguration:
    """Validate already-decoded job data against the schema.

    Raises:
        ConfigError: With error_type "validation" and per-field details.
    """
    try:
        return JobConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError.from_schema_error(e, path) from None


def load_config(path: Path) -> JobConfiguration:
    """Read, decode and validate a job file.

    Raises:
        ConfigError: If any stage fails; see ``error_type``.
    """
    return load_config_from_dict(_read_json(path), path)
