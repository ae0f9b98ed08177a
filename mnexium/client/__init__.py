"""Async client for the Mnexium memory API."""

from mnexium.client.client import MnexiumClient
from mnexium.client.exceptions import (
    AuthenticationError,
    BadRequestError,
    MnexiumAPIError,
    MnexiumClientError,
    MnexiumConnectionError,
    MnexiumResponseError,
    NotFoundError,
    ServerError,
    UsageLimitExceededError,
    raise_for_status,
)
from mnexium.client.providers import Provider, completion_text, resolve_provider

__all__ = [
    "AuthenticationError",
    "BadRequestError",
    "MnexiumAPIError",
    "MnexiumClient",
    "MnexiumClientError",
    "MnexiumConnectionError",
    "MnexiumResponseError",
    "NotFoundError",
    "Provider",
    "ServerError",
    "UsageLimitExceededError",
    "completion_text",
    "raise_for_status",
    "resolve_provider",
]
