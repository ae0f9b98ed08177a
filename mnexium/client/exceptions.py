"""Client exception hierarchy.

All errors raised by MnexiumClient inherit from MnexiumClientError. Any
response with status >= 400 becomes a MnexiumAPIError subclass chosen by
`raise_for_status`, carrying the status code, the service's error code
and the decoded body.
"""

from typing import Any

import httpx
from pydantic import ValidationError

from mnexium.models.errors import ServiceError


class MnexiumClientError(Exception):
    """Base exception for client errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details


class MnexiumConnectionError(MnexiumClientError):
    """Raised when the service could not be reached or timed out."""


class MnexiumResponseError(MnexiumClientError):
    """Raised when a successful response body is not JSON or not the expected shape."""


class MnexiumAPIError(MnexiumClientError):
    """Raised for any response with status >= 400."""


class BadRequestError(MnexiumAPIError):
    """400: missing or invalid parameters."""


class AuthenticationError(MnexiumAPIError):
    """401: missing or invalid service key."""


class NotFoundError(MnexiumAPIError):
    """404: unknown memory, prompt, chat or state key."""


class UsageLimitExceededError(MnexiumAPIError):
    """429: the monthly metered quota is exhausted."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        error_code: str | None = None,
        details: Any = None,
        current: int | None = None,
        limit: int | None = None,
    ) -> None:
        super().__init__(message, status_code, error_code, details)
        self.current = current
        self.limit = limit


class ServerError(MnexiumAPIError):
    """5xx from the service or a relayed provider failure."""


_STATUS_ERRORS: dict[int, type[MnexiumAPIError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    404: NotFoundError,
    429: UsageLimitExceededError,
}


def error_for_response(status_code: int, body: Any, text: str = "") -> MnexiumAPIError:
    """Build the exception for an error status and its decoded body."""
    parsed: ServiceError | None = None
    if isinstance(body, dict):
        try:
            parsed = ServiceError.model_validate(body)
        except ValidationError:
            parsed = None

    error_code = parsed.code if parsed else None
    message = (parsed.description if parsed else None) or error_code or text
    message = message or f"HTTP {status_code}"

    if status_code >= 500:
        return ServerError(message, status_code, error_code, body)

    cls = _STATUS_ERRORS.get(status_code, MnexiumAPIError)
    if cls is UsageLimitExceededError:
        return UsageLimitExceededError(
            message,
            status_code,
            error_code,
            body,
            current=parsed.current if parsed else None,
            limit=parsed.limit if parsed else None,
        )
    return cls(message, status_code, error_code, body)


def raise_for_status(response: httpx.Response) -> None:
    """Raise the matching MnexiumAPIError if the response is an error.

    The response body must already be read.
    """
    if response.status_code < 400:
        return
    try:
        body: Any = response.json()
    except ValueError:
        body = None
    raise error_for_response(response.status_code, body, response.text)
