"""Application layer - use cases and orchestration."""

from .commands import PackPiecesCommand, SheetPackerSession
from .dtos import PackingOutput, PieceInput
from .sessions import SessionNotFoundError, SessionStore

__all__ = [
    "PackPiecesCommand",
    "PackingOutput",
    "PieceInput",
    "SessionNotFoundError",
    "SessionStore",
    "SheetPackerSession",
]
