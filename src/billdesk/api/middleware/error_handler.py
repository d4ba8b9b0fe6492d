"""
Exception to HTTP response mapping.

Every failure leaves the API as an ``ErrorResponse`` body carrying a
machine-readable ``error_code``, the message and a recovery ``hint``.
Domain errors raised by routes go through the registered exception handlers;
anything that escapes them is caught by ``ErrorHandlerMiddleware``.
"""

import traceback
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from billdesk.application.dto.responses import ErrorResponse
from billdesk.config import get_logger
from billdesk.core.exceptions import (
    BackendError,
    BackendUnavailableError,
    BilldeskError,
    ConfigurationError,
    LineItemRejectedError,
    NotFoundError,
    StateError,
    ValidationError,
)

logger = get_logger(__name__)

# Looked up along the exception's MRO, so the most specific class wins
STATUS_BY_EXCEPTION: dict[type[BaseException], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    LineItemRejectedError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StateError: status.HTTP_409_CONFLICT,
    BackendUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    BackendError: status.HTTP_502_BAD_GATEWAY,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

HINTS_BY_CODE: dict[str, str] = {
    "SESSION_NOT_FOUND": "List open sessions with GET /api/sessions.",
    "LINE_ITEM_NOT_FOUND": "Item ids are listed by GET /api/sessions/{id}.",
    "ORDER_NOT_FOUND": "No order with this id exists in the backend.",
    "LINE_ITEM_REJECTED": "Correct the row and send it again; the bill is unchanged.",
    "DISCOUNT_OUT_OF_RANGE": "Use a discount between 0 and the allowed maximum.",
    "BILL_INCOMPLETE": "Fill in the named field before submitting.",
    "ILLEGAL_TRANSITION": "GET /api/orders/{id} lists the actions allowed right now.",
    "SUBMISSION_IN_PROGRESS": "A submission for this session is still running.",
    "BACKEND_UNAVAILABLE": "The business backend cannot be reached. Retry later.",
    "BACKEND_RESPONSE_ERROR": "See the backend message in details.",
    "VALIDATION_ERROR": "Compare the request body with the API schema.",
}

HINTS_BY_STATUS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "Nothing exists at this path or id.",
    405: "This path does not accept that method.",
    409: "The resource is not in a state that allows this request.",
    422: "The request could not be processed as sent.",
    500: "Unexpected server error. See the server log.",
    502: "The backend answered with an error.",
    503: "A dependency is unavailable. Retry later.",
}

CODES_BY_STATUS: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "UNPROCESSABLE_ENTITY",
}


def status_for(exc: BaseException) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_EXCEPTION:
            return STATUS_BY_EXCEPTION[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def hint_for(error_code: str, status_code: int) -> str:
    return HINTS_BY_CODE.get(error_code) or HINTS_BY_STATUS.get(status_code, "")


def _error_json(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    *,
    detail: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=hint_for(error_code, status_code),
        detail=detail,
        details=details or {},
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log ``exc`` and turn it into an ``ErrorResponse``."""
    status_code = status_for(exc)
    if isinstance(exc, BilldeskError):
        error_code, details = exc.code, exc.details
    else:
        error_code, details = type(exc).__name__, {}

    server_side = status_code >= 500
    (logger.error if server_side else logger.warning)(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        error_code=error_code,
        status=status_code,
        error=str(exc),
        traceback=traceback.format_exc() if server_side else None,
    )
    return _error_json(request, status_code, error_code, str(exc), details=details)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


async def _on_domain_error(request: Request, exc: BilldeskError) -> JSONResponse:
    return build_error_response(request, exc)


async def _on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return _error_json(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        detail="; ".join(problems),
    )


async def _on_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_json(
        request,
        exc.status_code,
        CODES_BY_STATUS.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail or "An error occurred"),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on ``app``."""
    app.add_exception_handler(BilldeskError, _on_domain_error)
    app.add_exception_handler(RequestValidationError, _on_request_validation)
    app.add_exception_handler(HTTPException, _on_http_exception)
