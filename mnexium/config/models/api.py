"""Memory Service API connection configuration."""

from pydantic import BaseModel, Field, SecretStr

DEFAULT_BASE_URL = "https://www.mnexium.com/api/v1"


class APIConfig(BaseModel):
    """Connection settings for the hosted Memory Service."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Service base URL including the /api/v1 prefix",
    )
    key: SecretStr | None = Field(
        default=None,
        description="Service key sent as a bearer token (prefer env var)",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )
