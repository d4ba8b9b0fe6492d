"""
Order lifecycle endpoints.

Orders live in the backend; these endpoints read them and request status
changes, refusing actions the current status does not allow.
"""

from fastapi import APIRouter, Depends

from billdesk.api.dependencies import get_transition_order_use_case
from billdesk.application.dto.requests import OrderTransitionRequest
from billdesk.application.dto.responses import ErrorResponse, OrderResponse
from billdesk.application.use_cases import TransitionOrderUseCase

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def get_order(
    order_id: int,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """Get an order with the actions currently allowed for it."""
    order = await use_case.get_order(order_id)
    return OrderResponse.from_entity(order)


@router.post(
    "/{order_id}/transitions",
    response_model=OrderResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Action not allowed"},
        502: {"model": ErrorResponse},
    },
)
async def transition_order(
    order_id: int,
    request: OrderTransitionRequest,
    use_case: TransitionOrderUseCase = Depends(get_transition_order_use_case),
) -> OrderResponse:
    """Apply a lifecycle action and return the backend-confirmed order."""
    order = await use_case.execute(order_id, request.action, request.actor)
    return OrderResponse.from_entity(order)
