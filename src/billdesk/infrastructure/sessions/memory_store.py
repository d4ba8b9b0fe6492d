"""In-process billing session store."""

from billdesk.config import get_logger
from billdesk.core.exceptions import SessionNotFoundError
from billdesk.core.interfaces.session_store import ISessionStore
from billdesk.core.services.billing_session import BillingSession

logger = get_logger(__name__)


class InMemorySessionStore(ISessionStore):
    """Sessions live in a dict for the lifetime of the process.

    Each session is owned by a single client, so no locking is done.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, BillingSession] = {}

    async def add(self, session: BillingSession) -> BillingSession:
        self._sessions[session.id] = session
        logger.info("billing_session_opened", session_id=session.id, kind=session.kind.value)
        return session

    async def get(self, session_id: str) -> BillingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("billing_session_closed", session_id=session_id)

    async def list_sessions(self) -> list[BillingSession]:
        return sorted(self._sessions.values(), key=lambda s: s.created_at)


_session_store: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get or create the process-wide session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


def reset_session_store() -> None:
    """Drop all sessions (for testing)."""
    global _session_store
    _session_store = None
