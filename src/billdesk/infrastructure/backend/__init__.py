"""External backend gateways."""

from billdesk.infrastructure.backend.client import BackendClient, BackendResponse
from billdesk.infrastructure.backend.gateways import (
    HttpBillGateway,
    HttpInventoryGateway,
    HttpOrderGateway,
    group_stock_rows,
)

_client: BackendClient | None = None


def get_backend_client() -> BackendClient:
    """Get or create the shared backend client."""
    global _client
    if _client is None:
        _client = BackendClient()
    return _client


def get_inventory_gateway() -> HttpInventoryGateway:
    return HttpInventoryGateway(get_backend_client())


def get_bill_gateway() -> HttpBillGateway:
    return HttpBillGateway(get_backend_client())


def get_order_gateway() -> HttpOrderGateway:
    return HttpOrderGateway(get_backend_client())


__all__ = [
    "BackendClient",
    "BackendResponse",
    "HttpInventoryGateway",
    "HttpBillGateway",
    "HttpOrderGateway",
    "group_stock_rows",
    "get_backend_client",
    "get_inventory_gateway",
    "get_bill_gateway",
    "get_order_gateway",
]
