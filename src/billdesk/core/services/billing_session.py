"""
Billing session aggregate.

One interactive data-entry session for a customer bill, a supplier bill or a
stock transfer: the header fields, the line-item collection and the
invoice-level discount, plus the busy flag that blocks double submission.
"""

import time
import uuid
from datetime import date, datetime
from typing import Any

from billdesk.config import get_logger, get_settings
from billdesk.core.entities.bill import (
    BillKind,
    BillLine,
    BillPayload,
    InvoiceTotals,
    PaymentMethod,
    StockTransferPayload,
    TransferLine,
)
from billdesk.core.entities.stock import AvailabilityTable
from billdesk.core.exceptions import BillValidationError, DiscountOutOfRangeError
from billdesk.core.pricing import round_money
from billdesk.core.services.line_items import DEFAULT_REQUIRED_FIELDS, LineItemCollection
from billdesk.core.services.totals import aggregate

logger = get_logger(__name__)

HEADER_FIELDS = frozenset(
    {
        "party_id",
        "bill_number",
        "bill_date",
        "received_date",
        "payment_method",
        "source_location_id",
        "destination_location_id",
        "extra_discount_percent",
    }
)

REQUIRED_FIELDS_BY_KIND: dict[BillKind, tuple[str, ...]] = {
    BillKind.CUSTOMER_BILL: DEFAULT_REQUIRED_FIELDS,
    BillKind.SUPPLIER_BILL: ("item_code", "item_name", "unit_price", "quantity"),
    BillKind.STOCK_TRANSFER: ("item_code", "item_name", "quantity"),
}


def new_invoice_number() -> str:
    """Customer invoice number from the last six digits of the millisecond clock."""
    return f"INV-{str(time.time_ns() // 1_000_000)[-6:]}"


class BillingSession:
    """Explicit, passed-in state for one bill or transfer being entered."""

    def __init__(
        self,
        kind: BillKind,
        session_id: str | None = None,
        availability: AvailabilityTable | None = None,
        max_discount_percent: float | None = None,
    ):
        self.id = session_id or uuid.uuid4().hex
        self.kind = kind
        self.max_discount_percent = (
            max_discount_percent
            if max_discount_percent is not None
            else get_settings().pricing.max_discount_percent
        )
        if availability is None and kind is BillKind.STOCK_TRANSFER:
            # nothing can be transferred until the source location's stock is loaded
            availability = {}
        self.items = LineItemCollection(
            availability=availability,
            required_fields=REQUIRED_FIELDS_BY_KIND[kind],
            max_discount_percent=self.max_discount_percent,
        )
        self.created_at = datetime.utcnow()
        self.busy = False
        self._reset_header()

    def _reset_header(self) -> None:
        self.party_id: int | None = None
        self.bill_number: str | None = (
            new_invoice_number() if self.kind is BillKind.CUSTOMER_BILL else None
        )
        self.bill_date: date | None = date.today()
        self.received_date: date | None = None
        self.payment_method: PaymentMethod | None = None
        self.source_location_id: int | None = None
        self.destination_location_id: int | None = None
        self.extra_discount_percent = 0.0

    # Header fields

    def _check_extra_discount(self, percent: float) -> None:
        if not 0 <= percent <= self.max_discount_percent:
            raise DiscountOutOfRangeError("extra_discount", percent, self.max_discount_percent)

    @staticmethod
    def _check_locations(source_location_id: int | None, destination_location_id: int | None) -> None:
        if source_location_id is not None and source_location_id == destination_location_id:
            raise BillValidationError(
                "destination_location_id",
                "Destination location must differ from the source location",
                destination_location_id,
            )

    def set_extra_discount(self, percent: float) -> None:
        """Set the invoice-level discount; values outside [0, max] are refused."""
        self._check_extra_discount(percent)
        self.extra_discount_percent = float(percent)

    def set_locations(self, source_location_id: int | None, destination_location_id: int | None) -> None:
        """Set transfer endpoints; source and destination must differ."""
        self._check_locations(source_location_id, destination_location_id)
        if source_location_id != self.source_location_id and self.kind is BillKind.STOCK_TRANSFER:
            # availability belongs to the previous source
            self.set_availability({})
        self.source_location_id = source_location_id
        self.destination_location_id = destination_location_id

    def update_header(self, **changes: Any) -> None:
        """Apply several header changes at once.

        Every value is checked before any is applied, so a refused update
        leaves the session as it was.
        """
        unknown = set(changes) - HEADER_FIELDS
        if unknown:
            raise ValueError(f"Unknown header fields: {', '.join(sorted(unknown))}")

        extra_discount = changes.pop("extra_discount_percent", None)
        source = changes.pop("source_location_id", self.source_location_id)
        destination = changes.pop("destination_location_id", self.destination_location_id)

        if extra_discount is not None:
            self._check_extra_discount(extra_discount)
        self._check_locations(source, destination)

        if extra_discount is not None:
            self.set_extra_discount(extra_discount)
        self.set_locations(source, destination)
        for name, value in changes.items():
            setattr(self, name, value)

    def set_availability(self, availability: AvailabilityTable | None) -> None:
        """Swap the stock table; lines that no longer fit are reported, not dropped."""
        self.items.availability = availability
        conflicts = self.items.stock_conflicts()
        if conflicts:
            logger.warning(
                "stock_conflicts_detected",
                session_id=self.id,
                item_codes=[item.item_code for item in conflicts],
            )

    # Derived state

    def totals(self) -> InvoiceTotals:
        return aggregate(self.items, self.extra_discount_percent)

    def validate_for_submission(self) -> None:
        """Raise ``BillValidationError`` for the first missing piece."""
        if self.kind is BillKind.STOCK_TRANSFER:
            if self.source_location_id is None:
                raise BillValidationError("source_location_id", "Select a source location")
            if self.destination_location_id is None:
                raise BillValidationError("destination_location_id", "Select a destination location")
            if self.source_location_id == self.destination_location_id:
                raise BillValidationError(
                    "destination_location_id",
                    "Destination location must differ from the source location",
                )
            if self.bill_date is None:
                raise BillValidationError("bill_date", "Select a transfer date")
        elif self.kind is BillKind.SUPPLIER_BILL:
            if self.party_id is None:
                raise BillValidationError("party_id", "Select a supplier")
            if not (self.bill_number or "").strip():
                raise BillValidationError("bill_number", "Enter a bill number")
            if self.bill_date is None or self.received_date is None:
                raise BillValidationError("bill_date", "Select billing and received dates")
        else:
            if self.party_id is None:
                raise BillValidationError("party_id", "Select a customer")
            if self.payment_method is None:
                raise BillValidationError("payment_method", "Select a payment method")

        if len(self.items) == 0:
            raise BillValidationError("items", "Add at least one item")

        conflicts = self.items.stock_conflicts()
        if conflicts:
            codes = [item.item_code for item in conflicts]
            raise BillValidationError(
                "items",
                f"Not enough stock for {', '.join(codes)}; reduce or remove these lines",
                codes,
            )

    def to_payload(self) -> BillPayload | StockTransferPayload:
        """Serialize the session for the backend."""
        places = get_settings().pricing.money_places
        totals = self.totals()

        if self.kind is BillKind.STOCK_TRANSFER:
            return StockTransferPayload(
                source_location_id=self.source_location_id,
                destination_location_id=self.destination_location_id,
                transfer_date=self.bill_date,
                items=[
                    TransferLine(
                        item_code=item.item_code,
                        item_name=item.item_name,
                        unit=item.unit or None,
                        quantity=item.quantity,
                    )
                    for item in self.items
                ],
                total_quantity=totals.total_quantity,
            )

        is_customer = self.kind is BillKind.CUSTOMER_BILL
        return BillPayload(
            kind=self.kind,
            customer_id=self.party_id if is_customer else None,
            supplier_id=None if is_customer else self.party_id,
            bill_no=self.bill_number,
            billing_date=self.bill_date,
            received_date=None if is_customer else self.received_date,
            payment_method=self.payment_method if is_customer else None,
            items=[
                BillLine(
                    item_code=item.item_code,
                    item_name=item.item_name,
                    unit=item.unit or None,
                    category=item.category,
                    unit_price=round_money(item.unit_price, places),
                    quantity=item.quantity,
                    discount=round_money(item.discount_percentage, places),
                    discount_amount=round_money(item.discount_amount, places),
                    amount=round_money(item.amount, places),
                    free_item_quantity=item.free_quantity,
                    selling_price=item.selling_price,
                    mrp=item.mrp,
                )
                for item in self.items
            ],
            subtotal=round_money(totals.subtotal, places),
            extra_discount=totals.extra_discount_percent,
            extra_discount_amount=round_money(totals.extra_discount_amount, places),
            final_total=round_money(totals.final_total, places),
            total_items=totals.total_quantity,
        )

    def reset(self) -> None:
        """Start a fresh bill of the same kind."""
        self.items.clear()
        self._reset_header()
        logger.info("billing_session_reset", session_id=self.id, kind=self.kind.value)
