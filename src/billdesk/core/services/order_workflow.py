"""
Order status transition table.

The happy path is strictly linear (pending -> processing -> checking ->
delivered); cancellation is reachable from every non-terminal state.
Confirmation is an acknowledgement recorded once against a pending order and
does not move it along the main progression by itself.
"""

from billdesk.core.entities.order import Order, OrderAction, OrderStatus
from billdesk.core.exceptions import IllegalTransitionError

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.CHECKING, OrderStatus.CANCELLED}),
    OrderStatus.CHECKING: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Status each progression action moves the order to
ACTION_TARGETS: dict[OrderAction, OrderStatus] = {
    OrderAction.MOVE_TO_PROCESSING: OrderStatus.PROCESSING,
    OrderAction.MOVE_TO_CHECKING: OrderStatus.CHECKING,
    OrderAction.MOVE_TO_DELIVERED: OrderStatus.DELIVERED,
    OrderAction.CANCEL_ORDER: OrderStatus.CANCELLED,
}

TERMINAL_STATES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Whether ``current -> target`` is in the transition table."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def is_action_allowed(order: Order, action: OrderAction) -> bool:
    """Whether ``action`` may be offered for ``order`` in its current state."""
    if action is OrderAction.CONFIRM_ORDER:
        return order.order_status is OrderStatus.PENDING and not order.is_confirmed
    return can_transition(order.order_status, ACTION_TARGETS[action])


def allowed_actions(order: Order) -> list[OrderAction]:
    """Actions to enable for ``order``, in declaration order."""
    return [action for action in OrderAction if is_action_allowed(order, action)]


def ensure_action_allowed(order: Order, action: OrderAction) -> None:
    """Raise ``IllegalTransitionError`` unless ``action`` is legal for ``order``."""
    if not is_action_allowed(order, action):
        raise IllegalTransitionError(order.id, order.order_status.value, action.value)
