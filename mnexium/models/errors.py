"""Error bodies returned by the Memory Service."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ServiceErrorCode(str, Enum):
    """Machine-readable error codes the service is known to return.

    The service may add codes at any time; unknown codes are kept as
    plain strings on the client exceptions.
    """

    SUBJECT_ID_REQUIRED = "subject_id_required"
    """POST /memories without a subject_id."""

    TEXT_REQUIRED = "text_required"
    """POST /memories without text."""

    CHAT_ID_REQUIRED = "chat_id_required"
    """History delete without a chat_id."""

    MISSING_PARAMETER = "missing_parameter"
    """Recall query with neither chat_id nor memory_id."""

    MISSING_SUBJECT_ID = "missing_subject_id"
    """State call without the x-subject-id header."""

    OPENAI_KEY_REQUIRED = "openai_key_required"
    """OpenAI model requested without x-openai-key."""

    ANTHROPIC_KEY_REQUIRED = "anthropic_key_required"
    """Claude model requested without x-anthropic-key."""

    GOOGLE_KEY_REQUIRED = "google_key_required"
    """Gemini model requested without x-google-key."""

    NOT_FOUND = "not_found"
    """Unknown memory, prompt or state key."""

    UNAUTHORIZED = "unauthorized"
    """Missing or invalid bearer token."""

    USAGE_LIMIT_EXCEEDED = "usage_limit_exceeded"
    """Monthly metered action quota exhausted."""


class ServiceError(BaseModel):
    """Error body as sent by the service.

    `error` is usually a code string. Errors relayed from an LLM provider
    arrive OpenAI-shaped, with `error` an object carrying message/type/code.
    """

    model_config = ConfigDict(extra="allow")

    error: str | dict[str, Any] | None = None
    message: str | None = None
    current: int | None = None
    limit: int | None = None

    @property
    def code(self) -> str | None:
        """The error code, wherever the body put it."""
        if isinstance(self.error, str):
            return self.error
        if isinstance(self.error, dict):
            code = self.error.get("code") or self.error.get("type")
            return str(code) if code is not None else None
        return None

    @property
    def description(self) -> str | None:
        """Human-readable message, wherever the body put it."""
        if self.message:
            return self.message
        if isinstance(self.error, dict) and self.error.get("message"):
            return str(self.error["message"])
        return None
