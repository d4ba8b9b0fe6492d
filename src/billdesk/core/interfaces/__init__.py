"""Core interfaces (ports) for dependency injection."""

from billdesk.core.interfaces.backend import IBillGateway, IInventoryGateway, IOrderGateway
from billdesk.core.interfaces.session_store import ISessionStore

__all__ = [
    "IInventoryGateway",
    "IBillGateway",
    "IOrderGateway",
    "ISessionStore",
]
