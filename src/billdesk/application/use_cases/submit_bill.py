"""Submit Bill Use Case."""

from billdesk.config import get_logger
from billdesk.core.entities.bill import BillReceipt, StockTransferPayload
from billdesk.core.exceptions import SubmissionInProgressError
from billdesk.core.interfaces.backend import IBillGateway
from billdesk.core.services.billing_session import BillingSession

logger = get_logger(__name__)


class SubmitBillUseCase:
    """Validate a session, post it to the backend and start a fresh bill.

    Steps:
    1. Refuse while a submission for the session is already running
    2. Validate header fields and items
    3. Post the payload with the busy flag set
    4. Reset the session on success; keep everything on failure
    """

    def __init__(self, bill_gateway: IBillGateway | None = None):
        self._bill_gateway = bill_gateway

    def _get_bill_gateway(self) -> IBillGateway:
        if self._bill_gateway is None:
            from billdesk.infrastructure.backend import get_bill_gateway

            self._bill_gateway = get_bill_gateway()
        return self._bill_gateway

    async def execute(self, session: BillingSession) -> BillReceipt:
        if session.busy:
            raise SubmissionInProgressError(session.id)

        session.validate_for_submission()
        payload = session.to_payload()
        gateway = self._get_bill_gateway()

        logger.info(
            "bill_submit_started",
            session_id=session.id,
            kind=session.kind.value,
            lines=len(session.items),
        )

        session.busy = True
        try:
            if isinstance(payload, StockTransferPayload):
                receipt = await gateway.submit_transfer(payload)
            else:
                receipt = await gateway.submit_bill(payload)
        except Exception as e:
            logger.error(
                "bill_submit_failed",
                session_id=session.id,
                kind=session.kind.value,
                error=str(e),
            )
            raise
        finally:
            session.busy = False

        logger.info(
            "bill_submitted",
            session_id=session.id,
            kind=receipt.kind.value,
            reference=receipt.reference,
            bill_id=receipt.bill_id,
            final_total=receipt.final_total,
        )
        session.reset()
        return receipt
