"""Billing session storage."""

from billdesk.infrastructure.sessions.memory_store import (
    InMemorySessionStore,
    get_session_store,
    reset_session_store,
)

__all__ = ["InMemorySessionStore", "get_session_store", "reset_session_store"]
