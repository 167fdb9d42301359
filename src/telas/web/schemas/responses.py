"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class PieceSchema(BaseModel):
    """Piece in the piece list."""

    id: int = Field(..., description="Piece id, unique within its list")
    width: float = Field(..., description="Width in meters")
    length: float = Field(..., description="Length in meters")
    count: int = Field(..., description="Number of units")
    label: str = Field(..., description="Diagram label (WxL)")


class PlacementSchema(BaseModel):
    """One piece instance placed on a sheet."""

    spec_id: int = Field(..., description="Id of the piece this instance belongs to")
    instance: int = Field(..., description="Instance number within its piece")
    width: float = Field(..., description="Width in meters")
    length: float = Field(..., description="Length in meters")
    x: float = Field(..., description="Offset from the sheet's left edge in meters")
    y: float = Field(..., description="Offset from the sheet's top edge in meters")


class SheetSchema(BaseModel):
    """One used sheet."""

    bin_index: int = Field(..., description="Zero-based sheet index")
    piece_count: int = Field(..., description="Pieces on this sheet")
    used_area: float = Field(..., description="Area covered by pieces in m2")
    utilization: float = Field(..., description="Fraction of the sheet used")
    placements: list[PlacementSchema] = Field(default_factory=list)


class MetricsSchema(BaseModel):
    """Packing metrics."""

    required_bins: int = Field(..., description="Number of sheets needed")
    total_area: float = Field(..., description="Total piece area in m2")
    utilization: float | None = Field(
        ..., description="Piece area over sheet area; null when packing failed"
    )
    lower_bound_bins: int = Field(..., description="Sheets required by area alone")


class FailureSchema(BaseModel):
    """Diagnostic for an incomplete packing."""

    reason: str = Field(..., description="stuck or safety_ceiling")
    message: str = Field(..., description="Human-readable diagnostic")
    bin_index: int = Field(..., description="Sheet being filled when packing stopped")
    unplaced: dict[int, int] = Field(
        default_factory=dict, description="Unplaced instances per piece id"
    )


class PackingResponseSchema(BaseModel):
    """Response for a packing: pieces, sheets and metrics."""

    pieces: list[PieceSchema] = Field(default_factory=list)
    sheets: list[SheetSchema] = Field(default_factory=list)
    metrics: MetricsSchema
    complete: bool = Field(..., description="Whether every instance was placed")
    failure: FailureSchema | None = Field(default=None)


class SessionCreatedSchema(BaseModel):
    """Response for session creation."""

    session_id: str = Field(..., description="Id of the new session")


class SessionSchema(BaseModel):
    """Current state of a session."""

    session_id: str = Field(..., description="Session id")
    packing: PackingResponseSchema


class ValidationResultSchema(BaseModel):
    """Response for job configuration validation."""

    is_valid: bool = Field(..., description="Whether the configuration is valid")
    errors: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation errors"
    )
    warnings: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation warnings"
    )


class ExportFormatsSchema(BaseModel):
    """Response for listing export formats."""

    formats: list[str] = Field(..., description="Available export formats")


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error category")
    details: Any = Field(default=None, description="Additional error details")
