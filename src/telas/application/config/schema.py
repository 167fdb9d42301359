"""Pydantic configuration schema models for sheet calculation job files.

This module defines the schema for JSON job files: a piece list plus output
preferences. It uses Pydantic v2 for validation and serialization.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from telas.domain.value_objects import MAX_COUNT, SHEET_LENGTH, SHEET_WIDTH

# Supported schema versions for job files
# Version 1.0: Initial schema with piece list and output preferences
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

OutputFormat = Literal["summary", "ascii", "svg", "json"]
ExportFormat = Literal["svg", "json", "dxf"]


class PieceConfig(BaseModel):
    """One piece entry of a job file.

    Attributes:
        width: Piece width in meters (up to the 2.45m sheet width)
        length: Piece length in meters (up to the 6m sheet length)
        count: Number of units to cut
    """

    model_config = ConfigDict(extra="forbid")

    width: float = Field(..., gt=0, le=SHEET_WIDTH, description="Width in meters")
    length: float = Field(..., gt=0, le=SHEET_LENGTH, description="Length in meters")
    count: int = Field(default=1, ge=1, le=MAX_COUNT, description="Number of units")


class OutputConfig(BaseModel):
    """Output preferences for a job.

    Attributes:
        format: Console output format
        max_sheets: Number of sheets drawn before the "N more" note
        svg_scale: Pixels per meter in SVG diagrams
        ascii_width: Width in characters of ASCII diagrams
        export_formats: File formats written by multi-format export
    """

    model_config = ConfigDict(extra="forbid")

    format: OutputFormat = "summary"
    max_sheets: int = Field(default=3, ge=0, le=1000)
    svg_scale: float = Field(default=100.0, gt=0, le=1000)
    ascii_width: int = Field(default=40, ge=10, le=200)
    export_formats: list[ExportFormat] = Field(default_factory=list)


class JobConfiguration(BaseModel):
    """Root configuration model for a job file.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        name: Optional job name, used to name exported files
        pieces: Pieces to cut, in submission order
        output: Output preferences

    Example:
        >>> config = JobConfiguration(
        ...     schema_version="1.0",
        ...     pieces=[PieceConfig(width=1.0, length=2.0, count=3)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    name: str | None = Field(default=None, min_length=1, max_length=100)
    pieces: list[PieceConfig] = Field(default_factory=list, max_length=1000)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minor versions of them."""
        if v in SUPPORTED_VERSIONS:
            return v

        major = v.split(".")[0]
        supported_majors = {version.split(".")[0] for version in SUPPORTED_VERSIONS}
        if major in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version: {v}. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )
