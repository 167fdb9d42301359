"""Session endpoints: an editable piece list with an always-current packing."""

from fastapi import APIRouter, Query, Response, status

from telas.infrastructure import DEFAULT_MAX_SHEETS, CutDiagramRenderer
from telas.web.dependencies import SessionStoreDep
from telas.web.routers.pack import packing_output_to_schema
from telas.web.schemas.requests import PieceRequest
from telas.web.schemas.responses import (
    PieceSchema,
    SessionCreatedSchema,
    SessionSchema,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post(
    "",
    response_model=SessionCreatedSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_session(store: SessionStoreDep) -> SessionCreatedSchema:
    """Create an empty session."""
    return SessionCreatedSchema(session_id=store.create())


@router.get("/{session_id}", response_model=SessionSchema)
def get_session(session_id: str, store: SessionStoreDep) -> SessionSchema:
    """Get a session's pieces and current packing."""
    output = store.output(session_id)
    return SessionSchema(session_id=session_id, packing=packing_output_to_schema(output))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, store: SessionStoreDep) -> Response:
    store.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{session_id}/pieces",
    response_model=PieceSchema,
    status_code=status.HTTP_201_CREATED,
)
def add_piece(
    session_id: str,
    request: PieceRequest,
    store: SessionStoreDep,
) -> PieceSchema:
    """Add a piece to a session.

    The packing is recomputed right away. A rejected piece leaves the
    session unchanged and is reported as a 422 validation error.
    """
    piece = store.submit_piece(session_id, request.width, request.length, request.count)
    return PieceSchema(
        id=piece.id,
        width=piece.width,
        length=piece.length,
        count=piece.count,
        label=piece.label,
    )


@router.delete(
    "/{session_id}/pieces/{piece_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_piece(
    session_id: str,
    piece_id: int,
    store: SessionStoreDep,
) -> Response:
    """Remove a piece from a session. Removing an unknown id is a no-op."""
    store.remove_piece(session_id, piece_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{session_id}/diagram.svg")
def get_diagram(
    session_id: str,
    store: SessionStoreDep,
    max_sheets: int = Query(default=DEFAULT_MAX_SHEETS, ge=0, le=1000),
) -> Response:
    """Render the session's sheets as one SVG, up to ``max_sheets`` sheets."""
    output = store.output(session_id)
    svg = CutDiagramRenderer().render_combined_svg(
        output.packing_result, output.pieces, max_sheets
    )
    return Response(content=svg, media_type="image/svg+xml")
