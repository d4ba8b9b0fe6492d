"""Abstract interface for billing session storage."""

from abc import ABC, abstractmethod

from billdesk.core.services.billing_session import BillingSession


class ISessionStore(ABC):
    """Interface for keeping interactive billing sessions between requests."""

    @abstractmethod
    async def add(self, session: BillingSession) -> BillingSession:
        """Store a new session."""
        pass

    @abstractmethod
    async def get(self, session_id: str) -> BillingSession:
        """Get a session by ID. Raises SessionNotFoundError if unknown."""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Discard a session. Raises SessionNotFoundError if unknown."""
        pass

    @abstractmethod
    async def list_sessions(self) -> list[BillingSession]:
        """List open sessions, oldest first."""
        pass
