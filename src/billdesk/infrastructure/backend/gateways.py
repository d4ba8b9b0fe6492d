"""REST implementations of the backend gateway interfaces."""

from typing import Any

from pydantic import BaseModel

from billdesk.config import get_logger, get_settings
from billdesk.core.entities.bill import BillKind, BillPayload, BillReceipt, StockTransferPayload
from billdesk.core.entities.order import Order, OrderAction
from billdesk.core.entities.stock import StockAvailability, StockLocationLevel
from billdesk.core.exceptions import BackendResponseError, ConfigurationError, OrderNotFoundError
from billdesk.core.interfaces.backend import IBillGateway, IInventoryGateway, IOrderGateway
from billdesk.infrastructure.backend.client import BackendClient, BackendResponse

logger = get_logger(__name__)


class _StockItem(BaseModel):
    item_code: str
    item_name: str = ""
    unit_type: str | None = None
    selling_price: float | None = None


class _StockLocation(BaseModel):
    location_id: int
    location_name: str = ""


class _StockRow(BaseModel):
    """One ``/stocks`` row: an item's quantity at one location."""

    quantity: float = 0.0
    item: _StockItem
    location: _StockLocation


def group_stock_rows(rows: list[dict[str, Any]]) -> list[StockAvailability]:
    """Group per-location stock rows by item code, keeping first-seen order."""
    grouped: dict[str, StockAvailability] = {}
    for raw in rows:
        row = _StockRow.model_validate(raw)
        stock = grouped.get(row.item.item_code)
        if stock is None:
            stock = StockAvailability(
                item_code=row.item.item_code,
                item_name=row.item.item_name,
                unit_price=row.item.selling_price or 0.0,
                unit=row.item.unit_type or "",
            )
            grouped[row.item.item_code] = stock
        stock.locations.append(
            StockLocationLevel(
                location_id=row.location.location_id,
                location_name=row.location.location_name,
                quantity=row.quantity,
            )
        )
    return list(grouped.values())


class HttpInventoryGateway(IInventoryGateway):
    """Reads stock from ``GET /stocks``."""

    def __init__(self, client: BackendClient | None = None):
        self._client = client or BackendClient()
        self._path = get_settings().backend.stocks_path

    async def list_stock(self) -> list[StockAvailability]:
        response = await self._client.get(self._path)
        rows = response.data or []
        stocks = group_stock_rows(rows)
        logger.info("stock_loaded", rows=len(rows), items=len(stocks))
        return stocks


class HttpBillGateway(IBillGateway):
    """Posts bills and transfers."""

    def __init__(self, client: BackendClient | None = None):
        self._client = client or BackendClient()
        settings = get_settings().backend
        self._paths = {
            BillKind.CUSTOMER_BILL: settings.customer_bills_path,
            BillKind.SUPPLIER_BILL: settings.supplier_bills_path,
            BillKind.STOCK_TRANSFER: settings.stock_transfers_path,
        }

    async def submit_bill(self, payload: BillPayload) -> BillReceipt:
        response = await self._client.post(self._paths[payload.kind], payload.to_wire())
        return self._receipt(payload.kind, response, payload.bill_no, payload.final_total)

    async def submit_transfer(self, payload: StockTransferPayload) -> BillReceipt:
        response = await self._client.post(
            self._paths[BillKind.STOCK_TRANSFER], payload.to_wire()
        )
        return self._receipt(BillKind.STOCK_TRANSFER, response, None, 0.0)

    @staticmethod
    def _receipt(
        kind: BillKind,
        response: BackendResponse,
        reference: str | None,
        final_total: float,
    ) -> BillReceipt:
        data = response.data if isinstance(response.data, dict) else {}
        bill_id = data.get("id", data.get("bill_id"))
        return BillReceipt(
            kind=kind,
            reference=data.get("bill_no", reference),
            bill_id=bill_id,
            message=response.message,
            final_total=final_total,
        )


class HttpOrderGateway(IOrderGateway):
    """Reads orders and requests transitions, one endpoint per action.

    Each action's HTTP method comes from ``BACKEND_ORDER_ACTION_METHODS``;
    confirm and cancel are POSTs, the progression steps PATCHes.
    """

    ACTION_PATHS: dict[OrderAction, str] = {
        OrderAction.MOVE_TO_PROCESSING: "processing",
        OrderAction.MOVE_TO_CHECKING: "checking",
        OrderAction.MOVE_TO_DELIVERED: "delivered",
        OrderAction.CONFIRM_ORDER: "confirm",
        OrderAction.CANCEL_ORDER: "cancel",
    }

    ACTION_METHODS = frozenset({"POST", "PATCH", "PUT"})

    def __init__(
        self,
        client: BackendClient | None = None,
        action_methods: dict[str, str] | None = None,
    ):
        self._client = client or BackendClient()
        settings = get_settings().backend
        self._base = settings.orders_path
        self._methods = self._resolve_methods(
            {**settings.order_action_methods, **(action_methods or {})}
        )

    def _resolve_methods(self, configured: dict[str, str]) -> dict[OrderAction, str]:
        methods = {}
        for action in OrderAction:
            method = configured.get(action.value, "PATCH").upper()
            if method not in self.ACTION_METHODS:
                raise ConfigurationError(
                    "BACKEND_ORDER_ACTION_METHODS",
                    f"{action.value} must use one of {sorted(self.ACTION_METHODS)}",
                    method,
                )
            methods[action] = method
        return methods

    async def get_order(self, order_id: int) -> Order:
        try:
            response = await self._client.get(f"{self._base}/{order_id}")
        except BackendResponseError as e:
            if e.details.get("status_code") == 404:
                raise OrderNotFoundError(order_id) from e
            raise
        return self._to_order(order_id, response.data)

    async def apply_action(
        self, order_id: int, action: OrderAction, actor: str | None = None
    ) -> Order:
        path = f"{self._base}/{order_id}/{self.ACTION_PATHS[action]}"
        body = {"confirmedBy": actor} if action is OrderAction.CONFIRM_ORDER and actor else None
        try:
            response = await self._client.request(self._methods[action], path, body)
        except BackendResponseError as e:
            if e.details.get("status_code") == 404:
                raise OrderNotFoundError(order_id) from e
            raise
        if response.data is None:
            # some endpoints reply without a body; read back the authoritative state
            return await self.get_order(order_id)
        return self._to_order(order_id, response.data)

    @staticmethod
    def _to_order(order_id: int, data: Any) -> Order:
        if not isinstance(data, dict):
            raise BackendResponseError(f"order {order_id}", 200, "Order payload is not an object")
        data = dict(data)
        data.setdefault("id", data.get("order_id", order_id))
        return Order.model_validate(data)
