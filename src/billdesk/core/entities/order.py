"""Customer order entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """Lifecycle stage of a customer order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    CHECKING = "checking"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class BillStatus(str, Enum):
    """Billing status of an order, independent of its order status."""

    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"
    CANCELLED = "cancelled"


class OrderAction(str, Enum):
    """Actions a user can request against an order."""

    MOVE_TO_PROCESSING = "move_to_processing"
    MOVE_TO_CHECKING = "move_to_checking"
    MOVE_TO_DELIVERED = "move_to_delivered"
    CONFIRM_ORDER = "confirm_order"
    CANCEL_ORDER = "cancel_order"


class OrderItem(BaseModel):
    """A product line on an order as reported by the backend."""

    item_code: str
    item_name: str = ""
    quantity: float = 0.0
    unit_price: float = 0.0
    amount: float = 0.0


class Order(BaseModel):
    """Read model of an externally persisted order."""

    id: int
    order_number: str | None = None
    order_status: OrderStatus = OrderStatus.PENDING
    status: BillStatus = BillStatus.PENDING
    customer_id: int | None = None
    confirmed_by: str | None = None
    confirmed_at: datetime | None = None
    total_amount: float = 0.0
    items: list[OrderItem] = Field(default_factory=list)

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed_at is not None
