"""Bill, totals and submission payload entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BillKind(str, Enum):
    """The data-entry flows that share the line-item engine."""

    CUSTOMER_BILL = "customer_bill"
    SUPPLIER_BILL = "supplier_bill"
    STOCK_TRANSFER = "stock_transfer"


class PaymentMethod(str, Enum):
    """Payment methods offered on customer bills."""

    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank-transfer"
    CREDIT_CARD = "credit-card"


class InvoiceTotals(BaseModel):
    """Roll-up of a line-item collection."""

    model_config = ConfigDict(frozen=True)

    subtotal: float = 0.0
    extra_discount_percent: float = 0.0
    extra_discount_amount: float = 0.0
    final_total: float = 0.0
    total_quantity: float = 0.0
    line_count: int = 0


class WireModel(BaseModel):
    """Base for payloads sent to the backend (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BillLine(WireModel):
    """One line of a submitted bill."""

    item_code: str
    item_name: str
    unit: str | None = None
    category: str | None = None
    unit_price: float = Field(..., alias="price")
    quantity: float
    discount: float = 0.0  # percentage
    discount_amount: float = 0.0
    amount: float
    free_item_quantity: float = 0.0
    selling_price: float | None = None
    mrp: float | None = None


class BillPayload(WireModel):
    """Customer or supplier bill as posted to the backend."""

    kind: BillKind = Field(..., exclude=True)
    customer_id: int | None = None
    supplier_id: int | None = None
    bill_no: str | None = None
    billing_date: date | None = None
    received_date: date | None = None
    payment_method: PaymentMethod | None = None
    items: list[BillLine] = Field(default_factory=list)
    subtotal: float = 0.0
    extra_discount: float = 0.0
    extra_discount_amount: float = 0.0
    final_total: float = 0.0
    total_items: float = 0.0


class TransferLine(WireModel):
    """One line of a stock transfer."""

    item_code: str
    item_name: str
    unit: str | None = None
    quantity: float


class StockTransferPayload(WireModel):
    """Stock transfer between two locations as posted to the backend."""

    kind: BillKind = Field(default=BillKind.STOCK_TRANSFER, exclude=True)
    source_location_id: int
    destination_location_id: int
    transfer_date: date
    items: list[TransferLine] = Field(default_factory=list)
    total_quantity: float = 0.0


class BillReceipt(BaseModel):
    """Backend acknowledgement of a submitted bill or transfer."""

    kind: BillKind
    reference: str | None = None
    bill_id: int | None = None
    message: str | None = None
    final_total: float = 0.0
    submitted_at: datetime = Field(default_factory=datetime.utcnow)
