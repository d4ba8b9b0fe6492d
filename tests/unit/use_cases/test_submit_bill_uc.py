"""Unit tests for SubmitBillUseCase."""

from unittest.mock import AsyncMock

import pytest

from billdesk.application.use_cases.submit_bill import SubmitBillUseCase
from billdesk.core.entities.bill import (
    BillKind,
    BillPayload,
    BillReceipt,
    PaymentMethod,
    StockTransferPayload,
)
from billdesk.core.exceptions import (
    BackendUnavailableError,
    BillValidationError,
    SubmissionInProgressError,
)
from billdesk.core.services.billing_session import BillingSession


@pytest.fixture
def mock_bill_gateway():
    gateway = AsyncMock()
    gateway.submit_bill.return_value = BillReceipt(
        kind=BillKind.CUSTOMER_BILL, reference="INV-123456", bill_id=41, final_total=180
    )
    gateway.submit_transfer.return_value = BillReceipt(kind=BillKind.STOCK_TRANSFER, bill_id=5)
    return gateway


@pytest.fixture
def session(draft) -> BillingSession:
    session = BillingSession(BillKind.CUSTOMER_BILL)
    session.party_id = 1
    session.payment_method = PaymentMethod.BANK_TRANSFER
    session.items.add(draft())
    return session


class TestSubmitBillUseCase:
    async def test_submits_and_resets(self, session, mock_bill_gateway):
        use_case = SubmitBillUseCase(bill_gateway=mock_bill_gateway)

        receipt = await use_case.execute(session)

        assert receipt.bill_id == 41
        payload = mock_bill_gateway.submit_bill.await_args.args[0]
        assert isinstance(payload, BillPayload)
        assert payload.final_total == 180
        assert len(session.items) == 0
        assert session.party_id is None
        assert not session.busy

    async def test_refuses_while_busy(self, session, mock_bill_gateway):
        session.busy = True

        with pytest.raises(SubmissionInProgressError):
            await SubmitBillUseCase(bill_gateway=mock_bill_gateway).execute(session)

        mock_bill_gateway.submit_bill.assert_not_called()
        assert len(session.items) == 1

    async def test_validation_failure_never_calls_backend(self, mock_bill_gateway):
        session = BillingSession(BillKind.CUSTOMER_BILL)

        with pytest.raises(BillValidationError):
            await SubmitBillUseCase(bill_gateway=mock_bill_gateway).execute(session)

        mock_bill_gateway.submit_bill.assert_not_called()
        assert not session.busy

    async def test_backend_failure_keeps_items(self, session, mock_bill_gateway):
        mock_bill_gateway.submit_bill.side_effect = BackendUnavailableError("http://backend")
        before = session.items.items

        with pytest.raises(BackendUnavailableError):
            await SubmitBillUseCase(bill_gateway=mock_bill_gateway).execute(session)

        assert session.items.items == before
        assert session.party_id == 1
        assert not session.busy

    async def test_busy_while_in_flight(self, session, mock_bill_gateway):
        seen = {}

        async def submit(payload):
            seen["busy"] = session.busy
            return BillReceipt(kind=BillKind.CUSTOMER_BILL)

        mock_bill_gateway.submit_bill.side_effect = submit

        await SubmitBillUseCase(bill_gateway=mock_bill_gateway).execute(session)

        assert seen["busy"] is True
        assert not session.busy

    async def test_transfer_uses_transfer_endpoint(self, draft, mock_bill_gateway):
        session = BillingSession(BillKind.STOCK_TRANSFER)
        session.set_locations(1, 2)
        session.set_availability({"ITM-001": 10})
        session.items.add(draft(quantity="3"))

        receipt = await SubmitBillUseCase(bill_gateway=mock_bill_gateway).execute(session)

        assert receipt.kind is BillKind.STOCK_TRANSFER
        payload = mock_bill_gateway.submit_transfer.await_args.args[0]
        assert isinstance(payload, StockTransferPayload)
        assert payload.total_quantity == 3
        mock_bill_gateway.submit_bill.assert_not_called()
