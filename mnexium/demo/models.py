"""Request and event models for the demo chat routes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DemoMessage(BaseModel):
    """A message as the browser UI keeps it."""

    model_config = ConfigDict(extra="ignore")

    role: str = "user"
    content: str


class ChatRequest(BaseModel):
    """Body of POST /chat and POST /chat/stream.

    Field names follow the browser UI (camelCase).
    """

    model_config = ConfigDict(extra="ignore")

    messages: list[DemoMessage] = Field(..., min_length=1)
    subject_id: str = Field(..., alias="subjectId", min_length=1)
    chat_id: str = Field(..., alias="chatId", min_length=1)

    @field_validator("messages")
    @classmethod
    def _last_message_has_text(cls, messages: list[DemoMessage]) -> list[DemoMessage]:
        if not messages[-1].content.strip():
            raise ValueError("last message must have content")
        return messages

    @property
    def input(self) -> str:
        """Only the newest message is sent; the service rebuilds the rest."""
        return self.messages[-1].content


class ChatReply(BaseModel):
    content: str


class TokenEvent(BaseModel):
    """SSE `token` event: one text delta."""

    content: str


class DoneEvent(BaseModel):
    """SSE `done` event: the full reply."""

    content: str
    usage: dict[str, Any] | None = None


class ErrorEvent(BaseModel):
    """SSE `error` event."""

    code: str
    message: str
