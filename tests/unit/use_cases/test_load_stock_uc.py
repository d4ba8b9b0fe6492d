"""Unit tests for LoadStockAvailabilityUseCase."""

from unittest.mock import AsyncMock

import pytest

from billdesk.application.use_cases.load_stock import LoadStockAvailabilityUseCase
from billdesk.core.entities.bill import BillKind
from billdesk.core.entities.stock import StockAvailability, StockLocationLevel
from billdesk.core.services.billing_session import BillingSession


@pytest.fixture
def mock_inventory_gateway():
    """Gateway holding A at two locations and B at one."""
    gateway = AsyncMock()
    gateway.list_stock.return_value = [
        StockAvailability(
            item_code="A",
            locations=[
                StockLocationLevel(location_id=1, quantity=4),
                StockLocationLevel(location_id=2, quantity=6),
            ],
        ),
        StockAvailability(item_code="B", locations=[StockLocationLevel(location_id=2, quantity=3)]),
    ]
    return gateway


@pytest.fixture
def use_case(mock_inventory_gateway):
    return LoadStockAvailabilityUseCase(inventory_gateway=mock_inventory_gateway)


class TestLoadStockAvailabilityUseCase:
    async def test_all_locations(self, use_case, mock_inventory_gateway):
        table = await use_case.execute()

        assert table == {"A": 10, "B": 3}
        mock_inventory_gateway.list_stock.assert_awaited_once()

    async def test_selected_locations(self, use_case):
        assert await use_case.execute([2]) == {"A": 6, "B": 3}

    async def test_load_into_customer_session(self, use_case):
        session = BillingSession(BillKind.CUSTOMER_BILL)

        await use_case.load_into(session)

        assert session.items.availability == {"A": 10, "B": 3}

    async def test_transfer_uses_source_location(self, use_case):
        session = BillingSession(BillKind.STOCK_TRANSFER)
        session.set_locations(1, 2)

        table = await use_case.load_into(session)

        assert table == {"A": 4, "B": 0}
        assert session.items.availability == table

    async def test_transfer_without_source_stays_empty(self, use_case, mock_inventory_gateway):
        session = BillingSession(BillKind.STOCK_TRANSFER)

        table = await use_case.load_into(session)

        assert table == {}
        mock_inventory_gateway.list_stock.assert_not_called()
