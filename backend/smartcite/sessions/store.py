"""In-memory session store.

Sessions live for the lifetime of the process. There is no eviction: the
registry grows until restart.
"""

import asyncio
import uuid
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from backend.smartcite.models.session import Turn


class SessionNotFoundError(Exception):
    """No session is registered under the given id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of one session record."""

    session_id: str
    document_text: str
    history: tuple[Turn, ...]
    created_at: datetime


class InMemorySessionStore:
    """Process-wide registry of sessions with per-session write serialization.

    Records are replaced, never mutated in place, so readers always see a
    consistent snapshot. Callers that read-then-append must hold
    ``session_lock`` for the whole exchange.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def create(self, document_text: str, history: Iterable[Turn] = ()) -> Session:
        """Register a new session and return it."""
        session_id = str(uuid.uuid4())
        session = Session(
            session_id=session_id,
            document_text=document_text,
            history=tuple(history),
            created_at=datetime.now(timezone.utc),
        )
        self._locks[session_id] = asyncio.Lock()
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        """Get session by ID."""
        return self._sessions.get(session_id)

    def append_turns(self, session_id: str, turns: Iterable[Turn]) -> Session | None:
        """Append turns to a session's history.

        Returns:
            The updated session, or None if the id is unknown
        """
        record = self._sessions.get(session_id)
        if record is None:
            return None

        updated = replace(record, history=record.history + tuple(turns))
        self._sessions[session_id] = updated
        return updated

    @asynccontextmanager
    async def session_lock(self, session_id: str) -> AsyncIterator[Session]:
        """Hold the session's lock and yield its current snapshot.

        Raises:
            SessionNotFoundError: If the id is unknown
        """
        lock = self._locks.get(session_id)
        if lock is None:
            raise SessionNotFoundError(session_id)

        async with lock:
            yield self._sessions[session_id]

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
