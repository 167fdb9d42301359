"""Adapter from job file configuration to application DTOs."""

from telas.application.config.schema import JobConfiguration
from telas.application.dtos import PieceInput


def config_to_piece_inputs(config: JobConfiguration) -> list[PieceInput]:
    """Convert the configured pieces to raw piece entries, in file order."""
    return [
        PieceInput(width=piece.width, length=piece.length, count=piece.count)
        for piece in config.pieces
    ]
