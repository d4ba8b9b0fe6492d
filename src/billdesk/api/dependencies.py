"""
Dependency injection container for FastAPI.

Provides use cases and stores to route handlers; tests replace these with
``app.dependency_overrides``.
"""

from billdesk.application.use_cases import (
    LoadStockAvailabilityUseCase,
    SubmitBillUseCase,
    TransitionOrderUseCase,
)
from billdesk.core.interfaces import ISessionStore
from billdesk.infrastructure.sessions import get_session_store


# Store dependencies
def get_sess_store() -> ISessionStore:
    """Get billing session store."""
    return get_session_store()


# Use case dependencies
def get_load_stock_use_case() -> LoadStockAvailabilityUseCase:
    """Get stock availability use case."""
    return LoadStockAvailabilityUseCase()


def get_submit_bill_use_case() -> SubmitBillUseCase:
    """Get submit bill use case."""
    return SubmitBillUseCase()


def get_transition_order_use_case() -> TransitionOrderUseCase:
    """Get order transition use case."""
    return TransitionOrderUseCase()
