"""
Domain exceptions for billdesk.

Line-item validation inside the core is reported through ``Rejection`` values,
never exceptions. The types below cover the boundaries: session handling,
order transitions, bill submission, and calls to the external backend.
"""

from typing import Any


class BilldeskError(Exception):
    """Base exception for all billdesk errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(BilldeskError):
    """Base exception for missing resources."""

    pass


class SessionNotFoundError(NotFoundError):
    """Billing session not found."""

    def __init__(self, session_id: str):
        super().__init__(
            f"Billing session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )


class LineItemNotFoundError(NotFoundError):
    """Line item not present in the collection."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Line item not found: {item_id}",
            code="LINE_ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class OrderNotFoundError(NotFoundError):
    """Order not known to the backend."""

    def __init__(self, order_id: int):
        super().__init__(
            f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
            details={"order_id": order_id},
        )


# Validation Exceptions
class ValidationError(BilldeskError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class DiscountOutOfRangeError(ValidationError):
    """Discount percentage outside the accepted range."""

    def __init__(self, field: str, value: float, maximum: float = 100.0):
        super().__init__(
            field=field,
            message=f"Discount must be between 0 and {maximum:g} percent",
            value=value,
        )
        self.code = "DISCOUNT_OUT_OF_RANGE"
        self.details.update({"minimum": 0.0, "maximum": maximum})


class BillValidationError(ValidationError):
    """A bill or transfer is not ready to be submitted."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(field=field, message=message, value=value)
        self.code = "BILL_INCOMPLETE"


class LineItemRejectedError(ValidationError):
    """A line-item add or edit was refused by the collection."""

    def __init__(self, reason: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(field="item", message=message)
        self.code = "LINE_ITEM_REJECTED"
        self.details.update({"reason": reason, **(details or {})})


# State Exceptions
class StateError(BilldeskError):
    """Operation not permitted in the current state."""

    pass


class IllegalTransitionError(StateError):
    """Order action is not legal from the order's current status."""

    def __init__(self, order_id: int, current: str, action: str):
        super().__init__(
            f"Cannot {action.replace('_', ' ')} order {order_id} while it is {current}",
            code="ILLEGAL_TRANSITION",
            details={"order_id": order_id, "current": current, "action": action},
        )


class SubmissionInProgressError(StateError):
    """A submission for this session is already in flight."""

    def __init__(self, session_id: str):
        super().__init__(
            f"Submission already in progress for session {session_id}",
            code="SUBMISSION_IN_PROGRESS",
            details={"session_id": session_id},
        )


# Backend Exceptions
class BackendError(BilldeskError):
    """Base exception for calls to the external backend."""

    pass


class BackendUnavailableError(BackendError):
    """Backend could not be reached."""

    def __init__(self, url: str, reason: str | None = None):
        super().__init__(
            f"Backend unavailable: {url}" + (f" - {reason}" if reason else ""),
            code="BACKEND_UNAVAILABLE",
            details={"url": url, "reason": reason},
        )


class BackendResponseError(BackendError):
    """Backend answered with an error status or an unusable body."""

    def __init__(self, url: str, status_code: int, message: str | None = None):
        super().__init__(
            f"Backend returned {status_code} for {url}" + (f": {message}" if message else ""),
            code="BACKEND_RESPONSE_ERROR",
            details={
                "url": url,
                "status_code": status_code,
                "backend_message": (message or "")[:200],
            },
        )


class ConfigurationError(BilldeskError):
    """A setting holds a value the service cannot run with."""

    def __init__(self, setting: str, message: str, value: Any = None):
        super().__init__(
            f"Invalid {setting}: {message}",
            code="CONFIGURATION_ERROR",
            details={"setting": setting, "value": value},
        )
