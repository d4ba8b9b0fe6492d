"""Unit tests for the billing session aggregate."""

from datetime import date

import pytest

from billdesk.core.entities.bill import BillKind, BillPayload, PaymentMethod, StockTransferPayload
from billdesk.core.exceptions import BillValidationError, DiscountOutOfRangeError
from billdesk.core.services.billing_session import BillingSession, new_invoice_number
from billdesk.core.services.line_items import Rejection, RejectionReason


@pytest.fixture
def customer_session(draft) -> BillingSession:
    session = BillingSession(BillKind.CUSTOMER_BILL)
    session.party_id = 12
    session.payment_method = PaymentMethod.CASH
    session.items.add(draft())
    session.items.add(
        draft(item_code="ITM-002", item_name="Gadget", unit_price="50", quantity="1",
              discount_percentage="")
    )
    return session


@pytest.fixture
def transfer_session() -> BillingSession:
    return BillingSession(BillKind.STOCK_TRANSFER)


class TestNewSession:
    def test_customer_bill_gets_invoice_number(self):
        session = BillingSession(BillKind.CUSTOMER_BILL)

        assert session.bill_number.startswith("INV-")
        assert session.bill_date == date.today()
        assert not session.busy

    def test_supplier_bill_number_entered_by_user(self):
        assert BillingSession(BillKind.SUPPLIER_BILL).bill_number is None

    def test_invoice_number_format(self):
        number = new_invoice_number()
        assert len(number) == 10
        assert number[4:].isdigit()

    def test_customer_bill_not_stock_bounded(self):
        assert BillingSession(BillKind.CUSTOMER_BILL).items.availability is None

    def test_transfer_starts_with_no_stock(self, transfer_session, draft):
        result = transfer_session.items.add(draft())

        assert isinstance(result, Rejection)
        assert result.reason is RejectionReason.INSUFFICIENT_STOCK


class TestExtraDiscount:
    def test_totals_include_extra_discount(self, customer_session):
        customer_session.set_extra_discount(5)

        totals = customer_session.totals()

        assert totals.subtotal == 230.0
        assert totals.extra_discount_amount == 11.5
        assert totals.final_total == 218.5
        assert totals.total_quantity == 3

    @pytest.mark.parametrize("value", [-1, 100.5, 250])
    def test_out_of_range_refused(self, customer_session, value):
        customer_session.set_extra_discount(5)

        with pytest.raises(DiscountOutOfRangeError):
            customer_session.set_extra_discount(value)

        assert customer_session.extra_discount_percent == 5


class TestLocations:
    def test_same_location_refused(self, transfer_session):
        with pytest.raises(BillValidationError):
            transfer_session.set_locations(1, 1)

    def test_changing_source_drops_availability(self, transfer_session, draft):
        transfer_session.set_locations(1, 2)
        transfer_session.set_availability({"ITM-001": 5})
        assert not isinstance(transfer_session.items.add(draft(quantity="5")), Rejection)

        transfer_session.set_locations(3, 2)

        assert transfer_session.items.availability == {}

    def test_lines_over_new_source_stock_block_submission(self, transfer_session, draft):
        transfer_session.set_locations(1, 2)
        transfer_session.set_availability({"ITM-001": 5})
        transfer_session.items.add(draft(quantity="5"))

        transfer_session.set_locations(3, 2)
        transfer_session.set_availability({"ITM-001": 0})

        assert [item.item_code for item in transfer_session.items.stock_conflicts()] == ["ITM-001"]
        with pytest.raises(BillValidationError) as exc_info:
            transfer_session.validate_for_submission()
        assert exc_info.value.details["field"] == "items"

    def test_reloaded_stock_that_still_fits_passes(self, transfer_session, draft):
        transfer_session.set_locations(1, 2)
        transfer_session.set_availability({"ITM-001": 5})
        transfer_session.items.add(draft(quantity="5"))

        transfer_session.set_locations(3, 2)
        transfer_session.set_availability({"ITM-001": 8})

        assert transfer_session.items.stock_conflicts() == []
        transfer_session.validate_for_submission()

    def test_update_header_is_all_or_nothing(self, transfer_session):
        transfer_session.set_locations(1, 2)

        with pytest.raises(BillValidationError):
            transfer_session.update_header(extra_discount_percent=7, destination_location_id=1)

        assert transfer_session.extra_discount_percent == 0.0
        assert transfer_session.destination_location_id == 2

    def test_update_header_applies_all_fields(self, transfer_session):
        transfer_session.update_header(
            source_location_id=1, destination_location_id=2, extra_discount_percent=3
        )

        assert (transfer_session.source_location_id, transfer_session.destination_location_id) == (1, 2)
        assert transfer_session.extra_discount_percent == 3.0

    def test_update_header_rejects_unknown_field(self, transfer_session):
        with pytest.raises(ValueError):
            transfer_session.update_header(kind="customer_bill")

    def test_changing_destination_keeps_availability(self, transfer_session):
        transfer_session.set_locations(1, 2)
        transfer_session.set_availability({"ITM-001": 5})

        transfer_session.set_locations(1, 4)

        assert transfer_session.items.availability == {"ITM-001": 5}


class TestValidateForSubmission:
    def test_complete_customer_bill(self, customer_session):
        customer_session.validate_for_submission()

    def test_customer_requires_party(self, customer_session):
        customer_session.party_id = None
        with pytest.raises(BillValidationError) as exc_info:
            customer_session.validate_for_submission()
        assert exc_info.value.details["field"] == "party_id"

    def test_customer_requires_payment_method(self, customer_session):
        customer_session.payment_method = None
        with pytest.raises(BillValidationError) as exc_info:
            customer_session.validate_for_submission()
        assert exc_info.value.details["field"] == "payment_method"

    def test_requires_items(self):
        session = BillingSession(BillKind.CUSTOMER_BILL)
        session.party_id = 1
        session.payment_method = PaymentMethod.CHECK

        with pytest.raises(BillValidationError) as exc_info:
            session.validate_for_submission()

        assert exc_info.value.details["field"] == "items"
        assert exc_info.value.code == "BILL_INCOMPLETE"

    def test_supplier_requires_bill_number_and_dates(self, draft):
        session = BillingSession(BillKind.SUPPLIER_BILL)
        session.party_id = 3
        session.items.add(draft(unit=""))

        with pytest.raises(BillValidationError) as exc_info:
            session.validate_for_submission()
        assert exc_info.value.details["field"] == "bill_number"

        session.bill_number = "SUP-77"
        with pytest.raises(BillValidationError):
            session.validate_for_submission()

        session.received_date = date(2024, 3, 2)
        session.validate_for_submission()

    def test_transfer_requires_locations(self, transfer_session):
        with pytest.raises(BillValidationError) as exc_info:
            transfer_session.validate_for_submission()
        assert exc_info.value.details["field"] == "source_location_id"


class TestPayload:
    def test_customer_payload_wire_format(self, customer_session):
        customer_session.set_extra_discount(5)

        payload = customer_session.to_payload()
        wire = payload.to_wire()

        assert isinstance(payload, BillPayload)
        assert "kind" not in wire
        assert "supplierId" not in wire
        assert wire["customerId"] == 12
        assert wire["paymentMethod"] == "cash"
        assert wire["billNo"] == customer_session.bill_number
        assert wire["subtotal"] == 230.0
        assert wire["extraDiscount"] == 5
        assert wire["extraDiscountAmount"] == 11.5
        assert wire["finalTotal"] == 218.5
        assert wire["totalItems"] == 3

        line = wire["items"][0]
        assert line["itemCode"] == "ITM-001"
        assert line["price"] == 100
        assert line["discount"] == 10
        assert line["discountAmount"] == 20
        assert line["amount"] == 180

    def test_supplier_payload(self, draft):
        session = BillingSession(BillKind.SUPPLIER_BILL)
        session.party_id = 3
        session.bill_number = "SUP-77"
        session.received_date = date(2024, 3, 2)
        session.items.add(draft(unit="", selling_price="130", mrp="150"))

        wire = session.to_payload().to_wire()

        assert wire["supplierId"] == 3
        assert wire["receivedDate"] == "2024-03-02"
        assert "customerId" not in wire
        assert "paymentMethod" not in wire
        assert wire["items"][0]["sellingPrice"] == 130
        assert wire["items"][0]["mrp"] == 150

    def test_transfer_payload(self, transfer_session, draft):
        transfer_session.set_locations(1, 2)
        transfer_session.set_availability({"ITM-001": 5})
        transfer_session.items.add(draft(quantity="4"))

        payload = transfer_session.to_payload()
        wire = payload.to_wire()

        assert isinstance(payload, StockTransferPayload)
        assert wire["sourceLocationId"] == 1
        assert wire["destinationLocationId"] == 2
        assert wire["totalQuantity"] == 4
        assert wire["items"] == [
            {"itemCode": "ITM-001", "itemName": "Widget", "unit": "pcs", "quantity": 4.0}
        ]


class TestReset:
    def test_reset_clears_bill_but_keeps_kind(self, customer_session):
        customer_session.set_extra_discount(5)
        customer_session.bill_number = "INV-000001"

        customer_session.reset()

        assert customer_session.kind is BillKind.CUSTOMER_BILL
        assert len(customer_session.items) == 0
        assert customer_session.extra_discount_percent == 0
        assert customer_session.party_id is None
        assert customer_session.payment_method is None
        assert customer_session.bill_number.startswith("INV-")
