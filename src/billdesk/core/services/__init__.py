"""Core domain services."""

from billdesk.core.services.billing_session import BillingSession
from billdesk.core.services.line_items import (
    LineItemCollection,
    Rejection,
    RejectionReason,
)
from billdesk.core.services.order_workflow import (
    ALLOWED_TRANSITIONS,
    allowed_actions,
    can_transition,
    ensure_action_allowed,
    is_action_allowed,
)
from billdesk.core.services.stock_validator import (
    build_availability_table,
    is_already_committed,
    is_within_availability,
)
from billdesk.core.services.totals import aggregate

__all__ = [
    "BillingSession",
    "LineItemCollection",
    "Rejection",
    "RejectionReason",
    "ALLOWED_TRANSITIONS",
    "allowed_actions",
    "can_transition",
    "ensure_action_allowed",
    "is_action_allowed",
    "build_availability_table",
    "is_already_committed",
    "is_within_availability",
    "aggregate",
]
