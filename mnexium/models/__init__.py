"""Wire models for the Memory Service API."""

from mnexium.models.chat import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatMessage,
    ResponseObject,
    Usage,
    completion_text,
)
from mnexium.models.errors import ServiceError, ServiceErrorCode
from mnexium.models.history import ChatSummary, HistoryMessage
from mnexium.models.memories import (
    Memory,
    MemoryCreate,
    MemoryCreateResult,
    MemoryList,
    MemoryStatus,
    MemoryUpdate,
    RecallEvent,
    RecallQueryResult,
    RecallStats,
    RestoreResult,
)
from mnexium.models.mnx import MnxOptions, StateOptions, SummarizeConfig, coerce_mnx
from mnexium.models.profiles import Profile, ProfileFieldUpdate
from mnexium.models.prompts import (
    Prompt,
    PromptCreate,
    PromptScope,
    PromptUpdate,
    ResolvedPrompt,
)
from mnexium.models.state import AgentState

__all__ = [
    "AgentState",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatMessage",
    "ChatSummary",
    "HistoryMessage",
    "Memory",
    "MemoryCreate",
    "MemoryCreateResult",
    "MemoryList",
    "MemoryStatus",
    "MemoryUpdate",
    "MnxOptions",
    "Profile",
    "ProfileFieldUpdate",
    "Prompt",
    "PromptCreate",
    "PromptScope",
    "PromptUpdate",
    "RecallEvent",
    "RecallQueryResult",
    "RecallStats",
    "ResolvedPrompt",
    "ResponseObject",
    "ServiceError",
    "ServiceErrorCode",
    "StateOptions",
    "SummarizeConfig",
    "Usage",
    "coerce_mnx",
    "completion_text",
]
