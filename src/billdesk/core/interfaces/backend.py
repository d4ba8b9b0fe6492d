"""Abstract interfaces for the external backend collaborators."""

from abc import ABC, abstractmethod

from billdesk.core.entities.bill import BillPayload, BillReceipt, StockTransferPayload
from billdesk.core.entities.order import Order, OrderAction
from billdesk.core.entities.stock import StockAvailability


class IInventoryGateway(ABC):
    """Source of per-item, per-location stock."""

    @abstractmethod
    async def list_stock(self) -> list[StockAvailability]:
        """Fetch stock for every item, grouped by item code."""
        pass


class IBillGateway(ABC):
    """Receiver of submitted bills and transfers."""

    @abstractmethod
    async def submit_bill(self, payload: BillPayload) -> BillReceipt:
        """Post a customer or supplier bill."""
        pass

    @abstractmethod
    async def submit_transfer(self, payload: StockTransferPayload) -> BillReceipt:
        """Post a stock transfer."""
        pass


class IOrderGateway(ABC):
    """Authority over order state."""

    @abstractmethod
    async def get_order(self, order_id: int) -> Order:
        """Get an order by ID. Raises OrderNotFoundError if unknown."""
        pass

    @abstractmethod
    async def apply_action(
        self, order_id: int, action: OrderAction, actor: str | None = None
    ) -> Order:
        """Request a transition and return the order as the backend now sees it."""
        pass
