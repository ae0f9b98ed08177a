"""LLM provider key configuration."""

from pydantic import BaseModel, Field, SecretStr


class ProvidersConfig(BaseModel):
    """Provider keys forwarded to the service so it can proxy the chosen LLM."""

    openai_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key, sent as x-openai-key",
    )
    anthropic_key: SecretStr | None = Field(
        default=None,
        description="Anthropic API key, sent as x-anthropic-key",
    )
    google_key: SecretStr | None = Field(
        default=None,
        description="Google Gemini API key, sent as x-google-key",
    )
    default_model: str = Field(
        default="gpt-4o-mini",
        description="Model used when a call does not name one",
    )
