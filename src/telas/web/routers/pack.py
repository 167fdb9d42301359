"""Stateless packing endpoints."""

import math

from fastapi import APIRouter

from telas.application import PackingOutput, PieceInput
from telas.web.dependencies import PackCommandDep
from telas.web.exceptions import PackingRejectedError
from telas.web.schemas.requests import PackRequest
from telas.web.schemas.responses import (
    FailureSchema,
    MetricsSchema,
    PackingResponseSchema,
    PieceSchema,
    PlacementSchema,
    SheetSchema,
)

# Packing routes are plain functions so FastAPI runs them in its threadpool
# instead of on the event loop.
router = APIRouter(prefix="/pack", tags=["pack"])


def packing_output_to_schema(output: PackingOutput) -> PackingResponseSchema:
    """Convert PackingOutput to response schema."""
    result = output.packing_result
    metrics = result.metrics

    pieces = [
        PieceSchema(
            id=piece.id,
            width=piece.width,
            length=piece.length,
            count=piece.count,
            label=piece.label,
        )
        for piece in output.pieces
    ]

    sheets = [
        SheetSchema(
            bin_index=layout.bin_index,
            piece_count=layout.piece_count,
            used_area=layout.used_area,
            utilization=layout.utilization,
            placements=[
                PlacementSchema(
                    spec_id=p.spec_id,
                    instance=p.instance,
                    width=p.width,
                    length=p.length,
                    x=p.x,
                    y=p.y,
                )
                for p in layout.placements
            ],
        )
        for layout in result.layouts
    ]

    failure = None
    if result.failure is not None:
        failure = FailureSchema(
            reason=result.failure.reason,
            message=str(result.failure),
            bin_index=result.failure.bin_index,
            unplaced=dict(result.unplaced),
        )

    return PackingResponseSchema(
        pieces=pieces,
        sheets=sheets,
        metrics=MetricsSchema(
            required_bins=metrics.required_bins,
            total_area=metrics.total_area,
            utilization=None if math.isnan(metrics.utilization) else metrics.utilization,
            lower_bound_bins=metrics.lower_bound_bins,
        ),
        complete=result.is_complete,
        failure=failure,
    )


@router.post("", response_model=PackingResponseSchema)
def pack_pieces(
    request: PackRequest,
    command: PackCommandDep,
) -> PackingResponseSchema:
    """Pack a piece list onto sheets in a single call.

    Args:
        request: Pieces to pack, in submission order.
        command: Injected PackPiecesCommand.

    Returns:
        Pieces with their assigned ids, sheets with placements, and metrics.

    Raises:
        PackingRejectedError: If any piece fails validation.
    """
    inputs = [
        PieceInput(width=piece.width, length=piece.length, count=piece.count)
        for piece in request.pieces
    ]
    output = command.execute(inputs)

    if not output.is_valid:
        raise PackingRejectedError(output.errors)

    return packing_output_to_schema(output)
