"""Core domain entities."""

from billdesk.core.entities.bill import (
    BillKind,
    BillLine,
    BillPayload,
    BillReceipt,
    InvoiceTotals,
    PaymentMethod,
    StockTransferPayload,
    TransferLine,
)
from billdesk.core.entities.line_item import (
    AmountDiscount,
    Discount,
    DraftLineItem,
    LineItem,
    PercentDiscount,
)
from billdesk.core.entities.order import (
    BillStatus,
    Order,
    OrderAction,
    OrderItem,
    OrderStatus,
)
from billdesk.core.entities.stock import (
    AvailabilityTable,
    StockAvailability,
    StockLocationLevel,
)

__all__ = [
    # Line item entities
    "LineItem",
    "DraftLineItem",
    "Discount",
    "PercentDiscount",
    "AmountDiscount",
    # Bill entities
    "BillKind",
    "BillLine",
    "BillPayload",
    "BillReceipt",
    "InvoiceTotals",
    "PaymentMethod",
    "StockTransferPayload",
    "TransferLine",
    # Order entities
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderAction",
    "BillStatus",
    # Stock entities
    "StockAvailability",
    "StockLocationLevel",
    "AvailabilityTable",
]
