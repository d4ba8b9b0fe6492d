"""
HTTP client for the external business backend.

Wraps httpx with retry on transport failures and unwraps the backend's
``{statusCode, message, data}`` response envelope.
"""

from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from billdesk.config import get_logger, get_settings
from billdesk.core.exceptions import (
    BackendResponseError,
    BackendUnavailableError,
    ConfigurationError,
)

logger = get_logger(__name__)


@dataclass
class BackendResponse:
    """Unwrapped backend reply."""

    status_code: int
    data: Any
    message: str | None = None


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        return message
    return None


def _check_base_url(base_url: str) -> None:
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ConfigurationError("BACKEND_BASE_URL", str(e), base_url) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError("BACKEND_BASE_URL", "expected an absolute http(s) URL", base_url)


class BackendClient:
    """Thin async REST client with retry."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings().backend
        self.base_url = (base_url or settings.base_url).rstrip("/")
        _check_base_url(self.base_url)
        self.timeout = timeout if timeout is not None else settings.timeout
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.retry_delay
        self.retry_multiplier = settings.retry_multiplier
        self._transport = transport

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator with current settings."""
        return retry(
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(
                multiplier=self.retry_delay,
                min=self.retry_delay,
                max=self.retry_delay * (self.retry_multiplier**3),
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        """Log retry attempts."""
        logger.warning(
            "backend_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _send(self, method: str, url: str, payload: Any | None) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.request(method, url, json=payload)

    async def request(self, method: str, path: str, payload: Any | None = None) -> BackendResponse:
        """Send a request and return the unwrapped body.

        Raises:
            BackendUnavailableError: the backend could not be reached
            BackendResponseError: non-2xx status or a body that is not JSON
        """
        url = f"{self.base_url}{path}"

        try:
            response = await self._get_retry_decorator()(self._send)(method, url, payload)
        except httpx.TransportError as e:
            logger.error("backend_unreachable", method=method, url=url, error=str(e))
            raise BackendUnavailableError(url, str(e)) from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "backend_error_response",
                method=method,
                url=url,
                status=response.status_code,
                message=message,
            )
            raise BackendResponseError(url, response.status_code, message)

        if not response.content:
            return BackendResponse(status_code=response.status_code, data=None)

        try:
            body = response.json()
        except ValueError as e:
            raise BackendResponseError(url, response.status_code, "Response body is not JSON") from e

        logger.debug("backend_response", method=method, url=url, status=response.status_code)

        if isinstance(body, dict) and "data" in body:
            return BackendResponse(
                status_code=response.status_code,
                data=body["data"],
                message=body.get("message"),
            )
        return BackendResponse(status_code=response.status_code, data=body)

    async def get(self, path: str) -> BackendResponse:
        return await self.request("GET", path)

    async def post(self, path: str, payload: Any) -> BackendResponse:
        return await self.request("POST", path, payload)

    async def patch(self, path: str, payload: Any | None = None) -> BackendResponse:
        return await self.request("PATCH", path, payload)
