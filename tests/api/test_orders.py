"""API tests for order lifecycle endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from billdesk.api.dependencies import get_transition_order_use_case
from billdesk.api.main import app
from billdesk.application.use_cases import TransitionOrderUseCase
from billdesk.core.entities.order import Order, OrderStatus
from billdesk.core.exceptions import OrderNotFoundError


@pytest.fixture
def mock_order_gateway():
    gateway = AsyncMock()
    gateway.get_order.return_value = Order(id=3, order_number="ORD-3", order_status=OrderStatus.PENDING)
    gateway.apply_action.return_value = Order(id=3, order_status=OrderStatus.PROCESSING)
    return gateway


@pytest.fixture
async def client(mock_order_gateway):
    app.dependency_overrides[get_transition_order_use_case] = lambda: TransitionOrderUseCase(
        order_gateway=mock_order_gateway
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_transition_order_use_case, None)


class TestOrdersAPI:
    async def test_get_order_lists_allowed_actions(self, client: AsyncClient):
        response = await client.get("/api/orders/3")

        assert response.status_code == 200
        data = response.json()
        assert data["order_number"] == "ORD-3"
        assert data["allowed_actions"] == ["move_to_processing", "confirm_order", "cancel_order"]

    async def test_transition(self, client: AsyncClient, mock_order_gateway):
        response = await client.post(
            "/api/orders/3/transitions", json={"action": "move_to_processing", "actor": " ana "}
        )

        assert response.status_code == 200
        assert response.json()["order_status"] == "processing"
        assert mock_order_gateway.apply_action.await_args.args[2] == "ana"

    async def test_delivered_order_rejects_move_to_processing(
        self, client: AsyncClient, mock_order_gateway
    ):
        mock_order_gateway.get_order.return_value = Order(id=3, order_status=OrderStatus.DELIVERED)

        response = await client.post(
            "/api/orders/3/transitions", json={"action": "move_to_processing"}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "ILLEGAL_TRANSITION"
        mock_order_gateway.apply_action.assert_not_called()

    async def test_unknown_order(self, client: AsyncClient, mock_order_gateway):
        mock_order_gateway.get_order.side_effect = OrderNotFoundError(99)

        response = await client.get("/api/orders/99")

        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"

    async def test_unknown_action(self, client: AsyncClient):
        response = await client.post("/api/orders/3/transitions", json={"action": "ship"})
        assert response.status_code == 422
