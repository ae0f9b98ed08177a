"""Chat history as logged by the service."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ChatSummary(BaseModel):
    """One entry of GET /chat/history/list."""

    model_config = ConfigDict(extra="allow")

    chat_id: str
    subject_id: str | None = None
    title: str | None = None
    message_count: int | None = None
    last_message_at: datetime | None = None


class HistoryMessage(BaseModel):
    """One logged turn of GET /chat/history/read."""

    model_config = ConfigDict(extra="allow")

    role: str
    content: str | list[dict[str, Any]] | None = None
    chat_id: str | None = None
    created_at: datetime | None = None
