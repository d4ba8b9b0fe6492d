"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from billdesk.core.entities.bill import BillKind, PaymentMethod
from billdesk.core.entities.order import OrderAction


class CreateSessionRequest(BaseModel):
    """Request to open a billing session."""

    kind: BillKind = Field(
        default=BillKind.CUSTOMER_BILL,
        description="Which data-entry flow the session drives",
        examples=["customer_bill", "supplier_bill", "stock_transfer"],
    )
    load_stock: bool = Field(
        default=False,
        description="Load stock availability from the backend right away",
    )


class UpdateSessionRequest(BaseModel):
    """Partial update of a session's header fields.

    Only fields present in the request body are applied.
    """

    party_id: int | None = Field(default=None, description="Customer or supplier ID")
    bill_number: str | None = Field(default=None, max_length=100, description="Bill number")
    bill_date: date | None = Field(default=None, description="Billing or transfer date")
    received_date: date | None = Field(default=None, description="Goods received date")
    payment_method: PaymentMethod | None = Field(default=None, description="Payment method")
    source_location_id: int | None = Field(default=None, description="Transfer source")
    destination_location_id: int | None = Field(default=None, description="Transfer destination")
    extra_discount_percent: float | None = Field(
        default=None, description="Invoice-level discount percentage"
    )


class AddLineItemRequest(BaseModel):
    """Draft row as typed by the user.

    Numbers may arrive as strings; blank or unparsable numeric input counts
    as zero once the row is committed.
    """

    item_code: str = Field(default="", description="Item code")
    item_name: str = Field(default="", description="Item name")
    unit: str = Field(default="", description="Unit of measure")
    category: str | None = Field(default=None, description="Item category")
    unit_price: str | float = Field(default="", description="Price per unit")
    quantity: str | float = Field(default="", description="Quantity")
    free_quantity: str | float = Field(default="", description="Free quantity")
    discount_percentage: str | float = Field(default="", description="Discount percentage")
    discount_amount: str | float = Field(
        default="",
        description="Fixed discount amount; takes precedence over the percentage when positive",
    )
    selling_price: str | float = Field(default="", description="Selling price (supplier bills)")
    mrp: str | float = Field(default="", description="MRP (supplier bills)")


class EditLineItemRequest(BaseModel):
    """Change one field of a committed line."""

    field: str = Field(
        ...,
        description="Field to change",
        examples=["quantity", "unit_price", "discount_percentage", "discount_amount"],
    )
    value: Any = Field(default=None, description="New value")


class RefreshStockRequest(BaseModel):
    """Reload stock availability for a session."""

    location_ids: list[int] | None = Field(
        default=None,
        description="Restrict availability to these locations (transfers default to the source)",
    )


class OrderTransitionRequest(BaseModel):
    """Request an order lifecycle action."""

    action: OrderAction = Field(..., description="Action to apply")
    actor: str | None = Field(
        default=None,
        max_length=100,
        description="Who performs the action (recorded on confirmation)",
    )

    @field_validator("actor")
    @classmethod
    def strip_actor(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None
