"""Export format endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response

from telas.application import PieceInput
from telas.infrastructure.exporters import ExporterRegistry
from telas.web.dependencies import PackCommandDep
from telas.web.exceptions import PackingRejectedError, UnsupportedFormatError
from telas.web.schemas.requests import PackRequest
from telas.web.schemas.responses import ExportFormatsSchema

router = APIRouter(prefix="/export", tags=["export"])

MEDIA_TYPES = {
    "svg": "image/svg+xml",
    "json": "application/json",
    "dxf": "application/dxf",
}


@router.get("/formats", response_model=ExportFormatsSchema)
async def list_export_formats() -> ExportFormatsSchema:
    """List all available export formats."""
    return ExportFormatsSchema(formats=ExporterRegistry.available_formats())


@router.post("/{format_name}")
def export_packing(
    format_name: str,
    request: PackRequest,
    command: PackCommandDep,
) -> Response:
    """Pack a piece list and return it as a downloadable file.

    Args:
        format_name: Registered export format (svg, json, dxf).
        request: Pieces to pack.
        command: Injected PackPiecesCommand.

    Returns:
        The exported file content as an attachment.
    """
    if not ExporterRegistry.is_registered(format_name):
        raise UnsupportedFormatError(format_name, ExporterRegistry.available_formats())

    inputs = [
        PieceInput(width=piece.width, length=piece.length, count=piece.count)
        for piece in request.pieces
    ]
    output = command.execute(inputs)
    if not output.is_valid:
        raise PackingRejectedError(output.errors)

    exporter = ExporterRegistry.get(format_name)()
    filename = f"telas.{exporter.file_extension}"
    return Response(
        content=exporter.export_string(output),
        media_type=MEDIA_TYPES.get(format_name, "application/octet-stream"),
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
