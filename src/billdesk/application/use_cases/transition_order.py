"""Transition Order Use Case."""

from billdesk.config import get_logger
from billdesk.core.entities.order import Order, OrderAction
from billdesk.core.interfaces.backend import IOrderGateway
from billdesk.core.services.order_workflow import ensure_action_allowed

logger = get_logger(__name__)


class TransitionOrderUseCase:
    """Move an order through its lifecycle.

    The transition is checked against the current state before anything is
    sent; the returned order is the backend's view after the change.
    """

    def __init__(self, order_gateway: IOrderGateway | None = None):
        self._order_gateway = order_gateway

    def _get_order_gateway(self) -> IOrderGateway:
        if self._order_gateway is None:
            from billdesk.infrastructure.backend import get_order_gateway

            self._order_gateway = get_order_gateway()
        return self._order_gateway

    async def get_order(self, order_id: int) -> Order:
        return await self._get_order_gateway().get_order(order_id)

    async def execute(
        self, order_id: int, action: OrderAction, actor: str | None = None
    ) -> Order:
        gateway = self._get_order_gateway()
        order = await gateway.get_order(order_id)

        ensure_action_allowed(order, action)

        logger.info(
            "order_transition_requested",
            order_id=order_id,
            action=action.value,
            from_status=order.order_status.value,
            actor=actor,
        )
        updated = await gateway.apply_action(order_id, action, actor)
        logger.info(
            "order_transitioned",
            order_id=order_id,
            action=action.value,
            order_status=updated.order_status.value,
        )
        return updated
