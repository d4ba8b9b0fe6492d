"""Load Stock Availability Use Case."""

from collections.abc import Iterable

from billdesk.config import get_logger
from billdesk.core.entities.bill import BillKind
from billdesk.core.entities.stock import AvailabilityTable
from billdesk.core.interfaces.backend import IInventoryGateway
from billdesk.core.services.billing_session import BillingSession
from billdesk.core.services.stock_validator import build_availability_table

logger = get_logger(__name__)


class LoadStockAvailabilityUseCase:
    """Fetch current stock and turn it into an availability table."""

    def __init__(self, inventory_gateway: IInventoryGateway | None = None):
        self._inventory_gateway = inventory_gateway

    def _get_inventory_gateway(self) -> IInventoryGateway:
        if self._inventory_gateway is None:
            from billdesk.infrastructure.backend import get_inventory_gateway

            self._inventory_gateway = get_inventory_gateway()
        return self._inventory_gateway

    async def execute(self, location_ids: Iterable[int] | None = None) -> AvailabilityTable:
        """Return ``item_code -> available quantity``.

        Args:
            location_ids: Only count stock held at these locations (all when None)
        """
        gateway = self._get_inventory_gateway()
        stocks = await gateway.list_stock()
        locations = list(location_ids) if location_ids is not None else None
        table = build_availability_table(stocks, locations)

        logger.info(
            "stock_availability_loaded",
            items=len(table),
            location_ids=locations,
        )
        return table

    async def load_into(
        self, session: BillingSession, location_ids: Iterable[int] | None = None
    ) -> AvailabilityTable:
        """Load availability and make ``session`` stock-bounded.

        Transfers count only the source location unless told otherwise.
        """
        if location_ids is None and session.kind is BillKind.STOCK_TRANSFER:
            if session.source_location_id is None:
                session.set_availability({})
                return {}
            location_ids = [session.source_location_id]

        table = await self.execute(location_ids)
        session.set_availability(table)
        return table
