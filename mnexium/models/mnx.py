"""The memory-control object sent as `mnx` alongside chat requests."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SummarizePreset = Literal["off", "light", "balanced", "aggressive"]


class SummarizeConfig(BaseModel):
    """Custom history summarization thresholds."""

    start_at_tokens: int = Field(..., gt=0, description="History size that triggers summarizing")
    chunk_size: int = Field(..., gt=0, description="Tokens folded into each summary pass")
    keep_recent_messages: int = Field(..., ge=0, description="Messages kept verbatim")
    summary_target: int = Field(..., gt=0, description="Target summary length in tokens")


class StateOptions(BaseModel):
    """Agent state injection for a chat turn."""

    load: bool = True
    key: str = Field(..., min_length=1)


class MnxOptions(BaseModel):
    """Memory features for a single chat or responses call.

    Every flag is optional; unset flags are omitted from the wire so the
    service applies its own defaults. Unknown fields are passed through.
    """

    model_config = ConfigDict(extra="allow")

    subject_id: str | None = Field(default=None, description="End user the memories belong to")
    chat_id: str | None = Field(default=None, description="Conversation identifier")
    log: bool | None = Field(default=None, description="Persist the turn to chat history")
    learn: bool | Literal["force"] | None = Field(
        default=None,
        description="Extract durable facts; 'force' always runs extraction",
    )
    recall: bool | None = Field(default=None, description="Inject stored facts into context")
    history: bool | None = Field(
        default=None,
        description="Rebuild prior turns of chat_id instead of resending them",
    )
    system_prompt: bool | str | None = Field(
        default=None,
        description="False skips prompt injection, a string selects a prompt id",
    )
    summarize: SummarizePreset | None = None
    summarize_config: SummarizeConfig | None = None
    state: StateOptions | None = None
    metadata: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_identifiers(self) -> "MnxOptions":
        needs_subject = (
            self.learn == "force"
            or self.recall
            or self.history
            or (self.state is not None and self.state.load)
        )
        if needs_subject and not self.subject_id:
            raise ValueError("subject_id is required for learn='force', recall, history and state")
        if self.history and not self.chat_id:
            raise ValueError("chat_id is required when history is enabled")
        return self

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the request body."""
        return self.model_dump(mode="json", exclude_none=True)


def coerce_mnx(mnx: "MnxOptions | dict[str, Any] | None") -> dict[str, Any] | None:
    """Accept MnxOptions or a plain dict and return the wire form."""
    if mnx is None:
        return None
    if isinstance(mnx, MnxOptions):
        return mnx.to_wire()
    return MnxOptions.model_validate(mnx).to_wire()
