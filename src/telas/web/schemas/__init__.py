"""Pydantic schemas for the REST API."""

from telas.web.schemas.requests import (
    ConfigValidateRequest,
    PackRequest,
    PieceRequest,
)
from telas.web.schemas.responses import (
    ErrorResponseSchema,
    ExportFormatsSchema,
    FailureSchema,
    MetricsSchema,
    PackingResponseSchema,
    PieceSchema,
    PlacementSchema,
    SessionCreatedSchema,
    SessionSchema,
    SheetSchema,
    ValidationResultSchema,
)

__all__ = [
    # Requests
    "ConfigValidateRequest",
    "PackRequest",
    "PieceRequest",
    # Responses
    "ErrorResponseSchema",
    "ExportFormatsSchema",
    "FailureSchema",
    "MetricsSchema",
    "PackingResponseSchema",
    "PieceSchema",
    "PlacementSchema",
    "SessionCreatedSchema",
    "SessionSchema",
    "SheetSchema",
    "ValidationResultSchema",
]
