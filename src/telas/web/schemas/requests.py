"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class PieceRequest(BaseModel):
    """One piece entry.

    Values are only loosely typed here; range checks are done by the domain
    validation so every rejection carries the same field/constraint details.
    """

    width: float | None = Field(default=None, description="Width in meters (max 2.45)")
    length: float | None = Field(default=None, description="Length in meters (max 6)")
    count: float = Field(default=1, description="Number of units (whole number)")


class PackRequest(BaseModel):
    """Request for packing a piece list in one call."""

    pieces: list[PieceRequest] = Field(
        default_factory=list, max_length=1000, description="Pieces in submission order"
    )


class ConfigValidateRequest(BaseModel):
    """Request for validating a job configuration."""

    config: dict[str, Any] = Field(..., description="Job configuration JSON")
