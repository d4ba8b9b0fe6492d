"""API route modules."""

from billdesk.api.routes.health import root_router
from billdesk.api.routes.health import router as health_router
from billdesk.api.routes.orders import router as orders_router
from billdesk.api.routes.sessions import router as sessions_router

__all__ = [
    "root_router",
    "health_router",
    "sessions_router",
    "orders_router",
]
