"""In-memory store of sheet packer sessions.

Each session owns one piece list. Sessions live only in process memory and
are lost on restart. The store holds a bounded number of sessions; creating
one past the bound evicts the least recently used session.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Any

from telas.domain import PieceSpec

from .commands import SheetPackerSession
from .dtos import PackingOutput

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


class SessionNotFoundError(Exception):
    """Raised when a session id is not in the store."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionStore:
    """Thread-safe mapping of session ids to packer sessions.

    All reads and edits go through one lock, so concurrent edits to the same
    session are applied one after the other, each followed by a recompute.

    Attributes:
        max_sessions: Number of sessions kept before the least recently used
            one is evicted.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, SheetPackerSession] = OrderedDict()
        self._lock = threading.Lock()

    def create(self) -> str:
        """Create an empty session and return its id."""
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = SheetPackerSession()
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.warning("Session limit reached, evicted session %s", evicted)
        logger.info("Created session %s", session_id)
        return session_id

    def delete(self, session_id: str) -> None:
        """Delete a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
        logger.info("Deleted session %s", session_id)

    def output(self, session_id: str) -> PackingOutput:
        """Current packing output of a session."""
        with self._lock:
            return self._get(session_id).output

    def submit_piece(
        self, session_id: str, width: Any, length: Any, count: Any = 1
    ) -> PieceSpec:
        """Validate and add a piece to a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
            ValidationError: If the entry is rejected.
        """
        with self._lock:
            return self._get(session_id).submit_piece(width, length, count)

    def remove_piece(self, session_id: str, piece_id: int) -> bool:
        """Remove a piece from a session; False if it was not there."""
        with self._lock:
            return self._get(session_id).remove_piece(piece_id)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def _get(self, session_id: str) -> SheetPackerSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._sessions.move_to_end(session_id)
        return session
