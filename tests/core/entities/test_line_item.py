"""Unit tests for line item entities."""

import pytest
from pydantic import ValidationError

from billdesk.core.entities.line_item import (
    AmountDiscount,
    DraftLineItem,
    LineItem,
    PercentDiscount,
)


class TestDiscounts:
    def test_percent_discount(self):
        discount = PercentDiscount(value=10)
        assert discount.apply(100, 2) == 180
        assert discount.amount_for(100, 2) == 20
        assert discount.percent_for(100, 2) == 10

    def test_amount_discount(self):
        discount = AmountDiscount(value=30)
        assert discount.apply(100, 2) == 170
        assert discount.percent_for(100, 2) == 15
        assert discount.percent_for(0, 2) == 0

    def test_percent_bounds(self):
        with pytest.raises(ValidationError):
            PercentDiscount(value=101)
        with pytest.raises(ValidationError):
            PercentDiscount(value=-1)


class TestLineItem:
    def test_computed_fields_serialized(self):
        item = LineItem(id=1, item_code="A", item_name="Alpha", unit_price=100, quantity=2,
                        discount={"kind": "percent", "value": 10})

        data = item.model_dump()

        assert data["subtotal"] == 200
        assert data["discount_percentage"] == 10
        assert data["discount_amount"] == 20
        assert data["amount"] == 180
        assert data["discount"] == {"kind": "percent", "value": 10}

    def test_default_discount_is_zero_percent(self):
        item = LineItem(id=1, item_code="A", item_name="Alpha", unit_price=5, quantity=3)
        assert isinstance(item.discount, PercentDiscount)
        assert item.amount == 15

    def test_text_is_stripped(self):
        item = LineItem(id=1, item_code="  A ", item_name=" Alpha ", unit_price=1, quantity=1)
        assert item.item_code == "A"
        assert item.item_name == "Alpha"

    @pytest.mark.parametrize(
        "overrides",
        [{"quantity": 0}, {"unit_price": -1}, {"item_code": ""}, {"free_quantity": -2}],
    )
    def test_invalid_values(self, overrides):
        data = {"id": 1, "item_code": "A", "item_name": "Alpha", "unit_price": 1, "quantity": 1}
        data.update(overrides)
        with pytest.raises(ValidationError):
            LineItem(**data)

    def test_amount_discount_cannot_exceed_subtotal(self):
        with pytest.raises(ValidationError):
            LineItem(id=1, item_code="A", item_name="Alpha", unit_price=10, quantity=1,
                     discount={"kind": "amount", "value": 11})

    def test_with_changes_revalidates(self):
        item = LineItem(id=1, item_code="A", item_name="Alpha", unit_price=100, quantity=2,
                        discount={"kind": "amount", "value": 50})

        updated = item.with_changes(quantity=3)

        assert updated.amount == 250
        assert item.quantity == 2
        with pytest.raises(ValidationError):
            item.with_changes(quantity=-1)


class TestDraftLineItem:
    def test_numbers_become_strings(self):
        draft = DraftLineItem(unit_price=12.5, quantity=3, mrp=None)
        assert draft.unit_price == "12.5"
        assert draft.quantity == "3"
        assert draft.mrp == ""

    def test_missing_fields(self):
        draft = DraftLineItem(item_code="A", quantity="  ")
        assert draft.missing_fields(("item_code", "item_name", "quantity")) == [
            "item_name",
            "quantity",
        ]
