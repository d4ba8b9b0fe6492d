"""
Billing session endpoints.

A session holds one bill or stock transfer while it is being entered: its
header fields, committed line items and invoice-level discount.
"""

from fastapi import APIRouter, Depends, status

from billdesk.api.dependencies import (
    get_load_stock_use_case,
    get_sess_store,
    get_submit_bill_use_case,
)
from billdesk.application.dto.requests import (
    AddLineItemRequest,
    CreateSessionRequest,
    EditLineItemRequest,
    RefreshStockRequest,
    UpdateSessionRequest,
)
from billdesk.application.dto.responses import (
    BillReceiptResponse,
    ErrorResponse,
    InvoiceTotalsResponse,
    LineItemResponse,
    SessionListResponse,
    SessionResponse,
    StockAvailabilityResponse,
)
from billdesk.application.use_cases import LoadStockAvailabilityUseCase, SubmitBillUseCase
from billdesk.core.entities.bill import BillKind
from billdesk.core.entities.line_item import DraftLineItem
from billdesk.core.interfaces import ISessionStore
from billdesk.core.services.billing_session import BillingSession
from billdesk.core.services.line_items import Rejection

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_session(
    request: CreateSessionRequest,
    store: ISessionStore = Depends(get_sess_store),
    stock_use_case: LoadStockAvailabilityUseCase = Depends(get_load_stock_use_case),
) -> SessionResponse:
    """Open a billing session for a customer bill, supplier bill or transfer."""
    session = BillingSession(request.kind)
    if request.load_stock:
        await stock_use_case.load_into(session)
    await store.add(session)
    return SessionResponse.from_session(session)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    store: ISessionStore = Depends(get_sess_store),
) -> SessionListResponse:
    """List open billing sessions."""
    sessions = await store.list_sessions()
    return SessionListResponse(
        sessions=[SessionResponse.from_session(s) for s in sessions],
        total=len(sessions),
    )


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse, "description": "Session not found"}},
)
async def get_session(
    session_id: str,
    store: ISessionStore = Depends(get_sess_store),
) -> SessionResponse:
    """Get session by ID."""
    session = await store.get(session_id)
    return SessionResponse.from_session(session)


@router.patch(
    "/{session_id}",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_session(
    session_id: str,
    request: UpdateSessionRequest,
    store: ISessionStore = Depends(get_sess_store),
) -> SessionResponse:
    """Update header fields. Only fields present in the body change."""
    session = await store.get(session_id)
    changes = {name: getattr(request, name) for name in request.model_fields_set}
    if "extra_discount_percent" in changes and changes["extra_discount_percent"] is None:
        changes["extra_discount_percent"] = 0.0

    session.update_header(**changes)

    return SessionResponse.from_session(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_session(
    session_id: str,
    store: ISessionStore = Depends(get_sess_store),
) -> None:
    """Discard a billing session."""
    await store.delete(session_id)


@router.post(
    "/{session_id}/items",
    response_model=LineItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def add_line_item(
    session_id: str,
    request: AddLineItemRequest,
    store: ISessionStore = Depends(get_sess_store),
) -> LineItemResponse:
    """Commit a draft row as a new line item."""
    session = await store.get(session_id)
    result = session.items.add(DraftLineItem.model_validate(request.model_dump()))
    if isinstance(result, Rejection):
        raise result.to_exception()
    return LineItemResponse.from_entity(result)


@router.patch(
    "/{session_id}/items/{item_id}",
    response_model=LineItemResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def edit_line_item(
    session_id: str,
    item_id: int,
    request: EditLineItemRequest,
    store: ISessionStore = Depends(get_sess_store),
) -> LineItemResponse:
    """Change one field of a line; derived values are recomputed."""
    session = await store.get(session_id)
    result = session.items.edit(item_id, request.field, request.value)
    if isinstance(result, Rejection):
        raise result.to_exception()
    return LineItemResponse.from_entity(result)


@router.delete(
    "/{session_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def remove_line_item(
    session_id: str,
    item_id: int,
    store: ISessionStore = Depends(get_sess_store),
) -> None:
    """Remove a line item."""
    session = await store.get(session_id)
    session.items.remove(item_id)


@router.get(
    "/{session_id}/totals",
    response_model=InvoiceTotalsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_totals(
    session_id: str,
    store: ISessionStore = Depends(get_sess_store),
) -> InvoiceTotalsResponse:
    """Current invoice totals."""
    session = await store.get(session_id)
    return InvoiceTotalsResponse.from_entity(session.totals())


@router.post(
    "/{session_id}/stock",
    response_model=StockAvailabilityResponse,
    responses={
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def refresh_stock(
    session_id: str,
    request: RefreshStockRequest | None = None,
    store: ISessionStore = Depends(get_sess_store),
    use_case: LoadStockAvailabilityUseCase = Depends(get_load_stock_use_case),
) -> StockAvailabilityResponse:
    """Reload stock availability and bound further adds by it."""
    session = await store.get(session_id)
    location_ids = request.location_ids if request else None
    if location_ids is None and session.kind is BillKind.STOCK_TRANSFER:
        if session.source_location_id is not None:
            location_ids = [session.source_location_id]
    table = await use_case.load_into(session, location_ids)
    return StockAvailabilityResponse(
        session_id=session.id,
        location_ids=location_ids,
        availability=table,
    )


@router.post(
    "/{session_id}/submit",
    response_model=BillReceiptResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def submit_session(
    session_id: str,
    store: ISessionStore = Depends(get_sess_store),
    use_case: SubmitBillUseCase = Depends(get_submit_bill_use_case),
) -> BillReceiptResponse:
    """Submit the bill or transfer to the backend and start a fresh one."""
    session = await store.get(session_id)
    receipt = await use_case.execute(session)
    return BillReceiptResponse(
        kind=receipt.kind.value,
        reference=receipt.reference,
        bill_id=receipt.bill_id,
        message=receipt.message,
        final_total=receipt.final_total,
        submitted_at=receipt.submitted_at,
        session=SessionResponse.from_session(session),
    )
