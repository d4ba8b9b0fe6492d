"""Unit tests for invoice totals aggregation."""

from billdesk.core.entities.line_item import LineItem
from billdesk.core.services.totals import aggregate


def _line(item_id, code, price, qty, pct=0.0):
    return LineItem(
        id=item_id,
        item_code=code,
        item_name=code,
        unit_price=price,
        quantity=qty,
        discount={"kind": "percent", "value": pct},
    )


class TestAggregate:
    def test_empty(self):
        totals = aggregate([])
        assert totals.subtotal == 0
        assert totals.final_total == 0
        assert totals.total_quantity == 0
        assert totals.line_count == 0

    def test_two_line_invoice_with_extra_discount(self):
        items = [_line(1, "A", 100, 2, 10), _line(2, "B", 50, 1)]

        totals = aggregate(items, extra_discount_percent=5)

        assert totals.subtotal == 230.0
        assert totals.extra_discount_amount == 11.5
        assert totals.final_total == 218.5
        assert totals.total_quantity == 3
        assert totals.line_count == 2

    def test_idempotent(self):
        items = [_line(1, "A", 12.34, 3, 7), _line(2, "B", 0.99, 10)]
        assert aggregate(items, 2.5) == aggregate(items, 2.5)

    def test_extra_discount_not_clamped(self):
        totals = aggregate([_line(1, "A", 10, 1)], extra_discount_percent=150)
        assert totals.final_total == -5
