"""
Line-item collection manager.

Owns the ordered set of committed lines for one bill or transfer session.
Adds and edits that break a rule are answered with a ``Rejection`` and leave
the collection untouched; only lookups of unknown ids raise.
"""

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from billdesk.config import get_logger, get_settings
from billdesk.core.entities.line_item import DraftLineItem, LineItem
from billdesk.core.entities.stock import AvailabilityTable
from billdesk.core.exceptions import LineItemNotFoundError, LineItemRejectedError
from billdesk.core.pricing import coerce_number
from billdesk.core.services.stock_validator import is_already_committed, is_within_availability

logger = get_logger(__name__)


class RejectionReason(str, Enum):
    """Why an add or edit was refused."""

    MISSING_FIELDS = "missing_fields"
    DUPLICATE_ITEM = "duplicate_item"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_VALUE = "invalid_value"


@dataclass(frozen=True)
class Rejection:
    """A refused mutation, to be surfaced to the user."""

    reason: RejectionReason
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_exception(self) -> LineItemRejectedError:
        return LineItemRejectedError(self.reason.value, self.message, self.details)


DEFAULT_REQUIRED_FIELDS: tuple[str, ...] = ("item_code", "item_name", "unit_price", "quantity", "unit")

TEXT_FIELDS = frozenset({"item_code", "item_name", "unit", "category"})
NUMERIC_FIELDS = frozenset({"unit_price", "quantity", "free_quantity"})
OPTIONAL_NUMERIC_FIELDS = frozenset({"selling_price", "mrp"})
DISCOUNT_FIELDS = {"discount_percentage": "percent", "discount_amount": "amount"}
EDITABLE_FIELDS = TEXT_FIELDS | NUMERIC_FIELDS | OPTIONAL_NUMERIC_FIELDS | frozenset(DISCOUNT_FIELDS)


class TimeBasedIds:
    """Millisecond-clock ids that never repeat or go backwards."""

    def __init__(self) -> None:
        self._last = 0

    def __call__(self) -> int:
        now = time.time_ns() // 1_000_000
        self._last = max(now, self._last + 1)
        return self._last


def _validation_message(error: PydanticValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class LineItemCollection:
    """Ordered, item-code-unique collection of line items.

    When ``availability`` is set the collection is stock-bounded: every line's
    quantity must fit within the available quantity for its item code.
    """

    def __init__(
        self,
        availability: AvailabilityTable | None = None,
        required_fields: tuple[str, ...] = DEFAULT_REQUIRED_FIELDS,
        max_discount_percent: float | None = None,
        id_factory: Callable[[], int] | None = None,
    ):
        self._items: list[LineItem] = []
        self.availability = availability
        self.required_fields = tuple(required_fields)
        self.max_discount_percent = (
            max_discount_percent
            if max_discount_percent is not None
            else get_settings().pricing.max_discount_percent
        )
        self._next_id = id_factory or TimeBasedIds()

    # Read access

    @property
    def items(self) -> list[LineItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(list(self._items))

    def get(self, item_id: int) -> LineItem:
        return self._locate(item_id)[1]

    # Mutations

    def add(self, draft: DraftLineItem) -> LineItem | Rejection:
        """Commit a draft row as a new line."""
        missing = draft.missing_fields(self.required_fields)
        if missing:
            return self._reject(
                RejectionReason.MISSING_FIELDS,
                f"Missing required fields: {', '.join(missing)}",
                fields=missing,
            )

        code = draft.item_code.strip()
        if is_already_committed(code, self._items):
            return self._reject(
                RejectionReason.DUPLICATE_ITEM,
                f"Item {code} is already on this bill",
                item_code=code,
            )

        quantity = coerce_number(draft.quantity) or 0.0
        if quantity <= 0:
            return self._reject(
                RejectionReason.INVALID_VALUE,
                "Quantity must be greater than zero",
                field="quantity",
            )

        rejection = self._check_stock(code, quantity)
        if rejection is not None:
            return rejection

        discount_amount = coerce_number(draft.discount_amount) or 0.0
        if discount_amount > 0:
            discount = {"kind": "amount", "value": discount_amount}
        else:
            discount = {"kind": "percent", "value": coerce_number(draft.discount_percentage) or 0.0}

        try:
            item = LineItem(
                id=self._next_id(),
                item_code=code,
                item_name=draft.item_name,
                unit=draft.unit.strip(),
                category=draft.category,
                unit_price=coerce_number(draft.unit_price) or 0.0,
                quantity=quantity,
                free_quantity=coerce_number(draft.free_quantity) or 0.0,
                discount=discount,
                selling_price=coerce_number(draft.selling_price),
                mrp=coerce_number(draft.mrp),
            )
        except PydanticValidationError as e:
            return self._reject(RejectionReason.INVALID_VALUE, _validation_message(e))

        rejection = self._check_discount(item)
        if rejection is not None:
            return rejection

        self._items.append(item)
        logger.info(
            "line_item_added",
            item_id=item.id,
            item_code=item.item_code,
            quantity=item.quantity,
            amount=item.amount,
        )
        return item

    def edit(self, item_id: int, field_name: str, value: Any) -> LineItem | Rejection:
        """Change one field of a committed line and recompute its derived values."""
        index, current = self._locate(item_id)

        if field_name not in EDITABLE_FIELDS:
            return self._reject(
                RejectionReason.INVALID_VALUE,
                f"Field '{field_name}' cannot be edited",
                field=field_name,
            )

        changes = self._changes_for(field_name, value)

        if field_name == "item_code" and is_already_committed(
            changes["item_code"], self._items, exclude_id=item_id
        ):
            return self._reject(
                RejectionReason.DUPLICATE_ITEM,
                f"Item {changes['item_code']} is already on this bill",
                item_code=changes["item_code"],
            )

        try:
            updated = current.with_changes(**changes)
        except PydanticValidationError as e:
            return self._reject(RejectionReason.INVALID_VALUE, _validation_message(e), field=field_name)

        rejection = self._check_discount(updated)
        if rejection is not None:
            return rejection

        if field_name in ("item_code", "quantity"):
            rejection = self._check_stock(updated.item_code, updated.quantity)
            if rejection is not None:
                return rejection

        self._items[index] = updated
        logger.info(
            "line_item_edited",
            item_id=item_id,
            field=field_name,
            amount=updated.amount,
        )
        return updated

    def remove(self, item_id: int) -> LineItem:
        """Delete a line."""
        index, item = self._locate(item_id)
        del self._items[index]
        logger.info("line_item_removed", item_id=item_id, item_code=item.item_code)
        return item

    def clear(self) -> None:
        self._items.clear()

    def stock_conflicts(self) -> list[LineItem]:
        """Committed lines whose quantity exceeds the current availability table."""
        if self.availability is None:
            return []
        return [
            item
            for item in self._items
            if not is_within_availability(item.quantity, self.availability.get(item.item_code, 0.0))
        ]

    # Helpers

    def _locate(self, item_id: int) -> tuple[int, LineItem]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index, item
        raise LineItemNotFoundError(item_id)

    def _changes_for(self, field_name: str, value: Any) -> dict[str, Any]:
        if field_name in DISCOUNT_FIELDS:
            return {
                "discount": {
                    "kind": DISCOUNT_FIELDS[field_name],
                    "value": coerce_number(value) or 0.0,
                }
            }
        if field_name in NUMERIC_FIELDS:
            return {field_name: coerce_number(value) or 0.0}
        if field_name in OPTIONAL_NUMERIC_FIELDS:
            return {field_name: coerce_number(value)}
        if field_name == "category":
            return {field_name: str(value).strip() if value is not None else None}
        return {field_name: "" if value is None else str(value).strip()}

    def _check_stock(self, item_code: str, quantity: float) -> Rejection | None:
        if self.availability is None:
            return None
        available = self.availability.get(item_code, 0.0)
        if is_within_availability(quantity, available):
            return None
        return self._reject(
            RejectionReason.INSUFFICIENT_STOCK,
            f"Requested {quantity:g} of {item_code} but only {available:g} available",
            item_code=item_code,
            requested=quantity,
            available=available,
        )

    def _check_discount(self, item: LineItem) -> Rejection | None:
        if item.discount_percentage <= self.max_discount_percent:
            return None
        return self._reject(
            RejectionReason.INVALID_VALUE,
            f"Discount of {item.discount_percentage:g}% exceeds the "
            f"{self.max_discount_percent:g}% limit",
            field="discount",
        )

    def _reject(self, reason: RejectionReason, message: str, **details: Any) -> Rejection:
        logger.info("line_item_rejected", reason=reason.value, message=message)
        return Rejection(reason=reason, message=message, details=details)
