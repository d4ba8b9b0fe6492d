"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from billdesk.application.dto.requests import (
    AddLineItemRequest,
    CreateSessionRequest,
    EditLineItemRequest,
    OrderTransitionRequest,
    RefreshStockRequest,
    UpdateSessionRequest,
)
from billdesk.application.dto.responses import (
    BillReceiptResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceTotalsResponse,
    LineItemResponse,
    OrderResponse,
    SessionListResponse,
    SessionResponse,
    StockAvailabilityResponse,
)

__all__ = [
    # Requests
    "AddLineItemRequest",
    "CreateSessionRequest",
    "EditLineItemRequest",
    "OrderTransitionRequest",
    "RefreshStockRequest",
    "UpdateSessionRequest",
    # Responses
    "BillReceiptResponse",
    "ErrorResponse",
    "HealthResponse",
    "InvoiceTotalsResponse",
    "LineItemResponse",
    "OrderResponse",
    "SessionListResponse",
    "SessionResponse",
    "StockAvailabilityResponse",
]
