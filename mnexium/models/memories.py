"""Memory (fact) models and recall events."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MemoryStatus(str, Enum):
    """Lifecycle state of a stored fact."""

    ACTIVE = "active"
    SUPERSEDED = "superseded"
    DELETED = "deleted"


class Memory(BaseModel):
    """A durable statement about a subject."""

    model_config = ConfigDict(extra="allow")

    id: str
    subject_id: str | None = None
    text: str
    kind: str | None = None
    importance: int | None = None
    status: MemoryStatus | str = MemoryStatus.ACTIVE
    superseded_by: str | None = None
    score: float | None = Field(default=None, description="Relevance score, search results only")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == MemoryStatus.ACTIVE


class MemoryCreate(BaseModel):
    """Request body for POST /memories."""

    subject_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    kind: str = Field(default="fact", description="fact, preference, ...")
    importance: int = Field(default=50, ge=0, le=100)
    supersedes: str | None = Field(
        default=None,
        description="Id of the memory this one replaces",
    )
    metadata: dict[str, Any] | None = None


class MemoryUpdate(BaseModel):
    """Request body for PATCH /memories/{id}."""

    text: str | None = None
    kind: str | None = None
    importance: int | None = Field(default=None, ge=0, le=100)


class MemoryCreateResult(BaseModel):
    """Result of a create call.

    The service may skip a create it considers a duplicate, in which case
    `id` is absent and `skipped`/`reason` explain why.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    skipped: bool = False
    reason: str | None = None

    @property
    def created(self) -> bool:
        return self.id is not None and not self.skipped


class MemoryList(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: list[Memory] = Field(default_factory=list)
    count: int | None = None


class RestoreResult(BaseModel):
    """Result of POST /memories/{id}/restore; restored is False for an active memory."""

    model_config = ConfigDict(extra="allow")

    ok: bool
    restored: bool
    message: str | None = None


class RecallEvent(BaseModel):
    """One injection of a memory into a chat's context."""

    model_config = ConfigDict(extra="allow")

    memory_id: str | None = None
    chat_id: str | None = None
    score: float | None = None
    created_at: datetime | None = None


class RecallStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_recalls: int = 0
    unique_chats: int = 0


class RecallQueryResult(BaseModel):
    """Response of GET /memories/recalls."""

    model_config = ConfigDict(extra="allow")

    data: list[RecallEvent] = Field(default_factory=list)
    count: int = 0
    chat_id: str | None = None
    memory_id: str | None = None
    stats: RecallStats | None = None
