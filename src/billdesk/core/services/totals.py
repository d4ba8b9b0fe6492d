"""Invoice totals aggregation."""

from collections.abc import Iterable

from billdesk.core.entities.bill import InvoiceTotals
from billdesk.core.entities.line_item import LineItem


def aggregate(items: Iterable[LineItem], extra_discount_percent: float = 0.0) -> InvoiceTotals:
    """Roll up line amounts and quantities, then apply the invoice-level discount.

    The extra discount is not clamped here.
    """
    lines = list(items)
    subtotal = sum(item.amount for item in lines)
    extra_discount_amount = subtotal * extra_discount_percent / 100
    return InvoiceTotals(
        subtotal=subtotal,
        extra_discount_percent=extra_discount_percent,
        extra_discount_amount=extra_discount_amount,
        final_total=subtotal - extra_discount_amount,
        total_quantity=sum(item.quantity for item in lines),
        line_count=len(lines),
    )
