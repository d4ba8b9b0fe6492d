"""API middleware."""

from billdesk.api.middleware.error_handler import ErrorHandlerMiddleware
from billdesk.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
