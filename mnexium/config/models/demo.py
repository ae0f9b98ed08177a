"""Demo chat server configuration."""

from pydantic import BaseModel, Field


class DemoConfig(BaseModel):
    """Settings for the local demo chat server."""

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Bind port")
    model: str = Field(default="gpt-4o-mini", description="Model used by /chat")
    static_dir: str | None = Field(
        default=None,
        description="Directory with index.html, memories.html and assets "
        "(defaults to the packaged static files)",
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    history_limit: int = Field(default=50, gt=0, description="Chats per history list")
    messages_limit: int = Field(default=200, gt=0, description="Messages per history read")
    memories_limit: int = Field(default=50, gt=0, description="Memories per list")
    search_limit: int = Field(default=10, gt=0, description="Results per memory search")
    search_min_score: int = Field(
        default=35,
        ge=0,
        le=100,
        description="Minimum relevance score for memory search",
    )
