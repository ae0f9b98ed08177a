"""Agent state: short-term, key-scoped working memory."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AgentState(BaseModel):
    """A stored state value for (subject, key).

    `value` is arbitrary JSON and round-trips exactly, including nulls,
    nested objects and arrays.
    """

    model_config = ConfigDict(extra="allow")

    key: str
    value: Any = None
    ttl: int | None = Field(default=None, description="Remaining lifetime in seconds")
    updated_at: datetime | None = None
