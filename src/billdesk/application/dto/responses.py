"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from billdesk.core.entities.bill import InvoiceTotals
from billdesk.core.entities.line_item import LineItem
from billdesk.core.entities.order import Order
from billdesk.core.services.billing_session import BillingSession
from billdesk.core.services.order_workflow import allowed_actions


class LineItemResponse(BaseModel):
    """Committed line with its derived values."""

    id: int = Field(..., description="Line ID")
    item_code: str = Field(..., description="Item code")
    item_name: str = Field(..., description="Item name")
    unit: str = Field(default="", description="Unit of measure")
    category: str | None = Field(default=None, description="Item category")
    unit_price: float = Field(..., description="Price per unit")
    quantity: float = Field(..., description="Quantity")
    free_quantity: float = Field(default=0.0, description="Free quantity")
    discount_kind: str = Field(..., description="Which discount was entered: percent or amount")
    discount_percentage: float = Field(..., description="Discount as a percentage")
    discount_amount: float = Field(..., description="Discount as a currency amount")
    subtotal: float = Field(..., description="unit_price * quantity")
    amount: float = Field(..., description="Line amount after discount")
    selling_price: float | None = Field(default=None, description="Selling price")
    mrp: float | None = Field(default=None, description="MRP")

    @classmethod
    def from_entity(cls, item: LineItem) -> "LineItemResponse":
        return cls(
            id=item.id,
            item_code=item.item_code,
            item_name=item.item_name,
            unit=item.unit,
            category=item.category,
            unit_price=item.unit_price,
            quantity=item.quantity,
            free_quantity=item.free_quantity,
            discount_kind=item.discount.kind,
            discount_percentage=item.discount_percentage,
            discount_amount=item.discount_amount,
            subtotal=item.subtotal,
            amount=item.amount,
            selling_price=item.selling_price,
            mrp=item.mrp,
        )


class InvoiceTotalsResponse(BaseModel):
    """Invoice roll-up."""

    subtotal: float = Field(..., description="Sum of line amounts")
    extra_discount_percent: float = Field(..., description="Invoice-level discount %")
    extra_discount_amount: float = Field(..., description="Invoice-level discount amount")
    final_total: float = Field(..., description="Subtotal minus extra discount")
    total_quantity: float = Field(..., description="Sum of line quantities")
    line_count: int = Field(..., ge=0, description="Number of lines")

    @classmethod
    def from_entity(cls, totals: InvoiceTotals) -> "InvoiceTotalsResponse":
        return cls(**totals.model_dump())


class SessionResponse(BaseModel):
    """Billing session state."""

    id: str = Field(..., description="Session ID")
    kind: str = Field(..., description="Session kind")
    party_id: int | None = Field(default=None, description="Customer or supplier ID")
    bill_number: str | None = Field(default=None, description="Bill number")
    bill_date: date | None = Field(default=None, description="Billing or transfer date")
    received_date: date | None = Field(default=None, description="Goods received date")
    payment_method: str | None = Field(default=None, description="Payment method")
    source_location_id: int | None = Field(default=None, description="Transfer source")
    destination_location_id: int | None = Field(default=None, description="Transfer destination")
    stock_bounded: bool = Field(..., description="Whether adds are checked against stock")
    stock_conflicts: list[str] = Field(
        default=[], description="Item codes whose quantity exceeds current stock"
    )
    busy: bool = Field(default=False, description="Submission in progress")
    items: list[LineItemResponse] = Field(default=[], description="Committed lines")
    totals: InvoiceTotalsResponse = Field(..., description="Invoice roll-up")
    created_at: datetime = Field(..., description="Session creation time")

    @classmethod
    def from_session(cls, session: BillingSession) -> "SessionResponse":
        return cls(
            id=session.id,
            kind=session.kind.value,
            party_id=session.party_id,
            bill_number=session.bill_number,
            bill_date=session.bill_date,
            received_date=session.received_date,
            payment_method=session.payment_method.value if session.payment_method else None,
            source_location_id=session.source_location_id,
            destination_location_id=session.destination_location_id,
            stock_bounded=session.items.availability is not None,
            stock_conflicts=[item.item_code for item in session.items.stock_conflicts()],
            busy=session.busy,
            items=[LineItemResponse.from_entity(item) for item in session.items],
            totals=InvoiceTotalsResponse.from_entity(session.totals()),
            created_at=session.created_at,
        )


class SessionListResponse(BaseModel):
    """List of open sessions."""

    sessions: list[SessionResponse] = Field(default=[], description="Sessions")
    total: int = Field(..., ge=0, description="Number of sessions")


class StockAvailabilityResponse(BaseModel):
    """Availability table loaded into a session."""

    session_id: str = Field(..., description="Session ID")
    location_ids: list[int] | None = Field(default=None, description="Locations counted")
    availability: dict[str, float] = Field(default={}, description="item_code -> quantity")


class BillReceiptResponse(BaseModel):
    """Result of a successful submission."""

    kind: str = Field(..., description="What was submitted")
    reference: str | None = Field(default=None, description="Bill number")
    bill_id: int | None = Field(default=None, description="Backend bill ID")
    message: str | None = Field(default=None, description="Backend message")
    final_total: float = Field(default=0.0, description="Submitted final total")
    submitted_at: datetime = Field(..., description="Submission time")
    session: SessionResponse = Field(..., description="Session after reset")


class OrderResponse(BaseModel):
    """Order with the actions currently available for it."""

    id: int = Field(..., description="Order ID")
    order_number: str | None = Field(default=None, description="Order number")
    order_status: str = Field(..., description="Lifecycle stage")
    status: str = Field(..., description="Billing status")
    customer_id: int | None = Field(default=None, description="Customer ID")
    confirmed_by: str | None = Field(default=None, description="Who confirmed")
    confirmed_at: datetime | None = Field(default=None, description="When confirmed")
    total_amount: float = Field(default=0.0, description="Order total")
    allowed_actions: list[str] = Field(default=[], description="Actions that may be requested")

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            order_status=order.order_status.value,
            status=order.status.value,
            customer_id=order.customer_id,
            confirmed_by=order.confirmed_by,
            confirmed_at=order.confirmed_at,
            total_amount=order.total_amount,
            allowed_actions=[action.value for action in allowed_actions(order)],
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    environment: str | None = None
    open_sessions: int = 0


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. SESSION_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict[str, Any] = Field(default={}, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
