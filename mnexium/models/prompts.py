"""Managed system prompts."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PromptScope(str, Enum):
    """Level a prompt applies at; narrower scopes win at resolve time."""

    PROJECT = "project"
    SUBJECT = "subject"
    CHAT = "chat"


class Prompt(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str | None = None
    prompt_text: str | None = None
    scope: PromptScope | str = PromptScope.PROJECT
    scope_id: str | None = None
    is_active: bool = True
    is_default: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PromptCreate(BaseModel):
    """Request body for POST /prompts."""

    name: str = Field(..., min_length=1)
    prompt_text: str = Field(..., min_length=1)
    scope: PromptScope = PromptScope.PROJECT
    scope_id: str | None = Field(
        default=None,
        description="subject_id or chat_id for the narrower scopes",
    )
    is_active: bool = True
    is_default: bool = False
    metadata: dict[str, Any] | None = None


class PromptUpdate(BaseModel):
    name: str | None = None
    prompt_text: str | None = None
    is_active: bool | None = None
    is_default: bool | None = None


class ResolvedPrompt(BaseModel):
    """Result of GET /prompts/resolve.

    With `combined=true` the service returns the concatenated text that
    would be injected as `prompt_text`.
    """

    model_config = ConfigDict(extra="allow")

    prompts: list[Prompt] = Field(default_factory=list)
    prompt_text: str | None = None
