"""Chat completion and responses payloads.

Requests follow the OpenAI wire format. Responses keep unknown fields so
provider-specific extras (Anthropic content blocks, Gemini candidates)
survive validation.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "developer", "user", "assistant", "tool"]


class ChatMessage(BaseModel):
    """A single message in an OpenAI-compatible messages array."""

    model_config = ConfigDict(extra="allow")

    role: Role
    content: str | list[dict[str, Any]] | None = None
    name: str | None = None
    tool_calls: list[dict[str, Any]] | None = None
    tool_call_id: str | None = None


class Usage(BaseModel):
    """Token accounting reported for a completion."""

    model_config = ConfigDict(extra="allow")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatChoice(BaseModel):
    model_config = ConfigDict(extra="allow")

    index: int = 0
    message: ChatMessage | None = None
    finish_reason: str | None = None


class ChatCompletion(BaseModel):
    """Non-streaming chat completion."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    object: str | None = None
    model: str | None = None
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: Usage | None = None

    @property
    def text(self) -> str:
        """Assistant text of the first choice, empty if there is none."""
        return completion_text(self.model_dump())


class ChunkDelta(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str | None = None
    content: str | None = None
    tool_calls: list[dict[str, Any]] | None = None


class ChunkChoice(BaseModel):
    model_config = ConfigDict(extra="allow")

    index: int = 0
    delta: ChunkDelta = Field(default_factory=ChunkDelta)
    finish_reason: str | None = None


class ChatCompletionChunk(BaseModel):
    """One OpenAI delta-shaped streaming chunk."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    model: str | None = None
    choices: list[ChunkChoice] = Field(default_factory=list)
    usage: Usage | None = None

    @property
    def content(self) -> str:
        """Text carried by the first choice's delta.

        Falls back to an Anthropic-style `delta.text` for Claude streams.
        """
        if self.choices:
            return self.choices[0].delta.content or ""
        delta = (self.model_extra or {}).get("delta")
        if isinstance(delta, dict):
            return delta.get("text") or ""
        return ""


class ResponseObject(BaseModel):
    """Result of POST /responses."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    model: str | None = None
    output: list[dict[str, Any]] = Field(default_factory=list)
    usage: dict[str, Any] | None = None

    @property
    def output_text(self) -> str:
        """Concatenated text of every output_text part."""
        parts: list[str] = []
        for item in self.output:
            for part in item.get("content") or []:
                if isinstance(part, dict) and part.get("type") in ("output_text", "text"):
                    parts.append(part.get("text", ""))
        return "".join(parts)


def completion_text(payload: dict[str, Any]) -> str:
    """Pull the assistant text out of any provider's response shape.

    Recognizes OpenAI `choices[].message.content`, Anthropic `content`
    blocks and Gemini `candidates[].content.parts[]`, in that order.
    """
    choices = payload.get("choices") or []
    if choices:
        message = choices[0].get("message") or {}
        content = message.get("content")
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(
                block.get("text", "") for block in content if isinstance(block, dict)
            )

    blocks = payload.get("content")
    if isinstance(blocks, list):
        return "".join(
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )

    candidates = payload.get("candidates") or []
    if candidates:
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    return ""
