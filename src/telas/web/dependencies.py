"""FastAPI dependency injection for packing services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from telas.application import PackPiecesCommand, SessionStore


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    return SessionStore()


def get_pack_command() -> PackPiecesCommand:
    """Dependency for PackPiecesCommand."""
    return PackPiecesCommand()


# Type aliases for cleaner endpoint signatures
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
PackCommandDep = Annotated[PackPiecesCommand, Depends(get_pack_command)]
