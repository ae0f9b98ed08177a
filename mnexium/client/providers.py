"""LLM provider routing.

The service picks the upstream provider from the model name. The client
mirrors that choice to decide which provider key header to send.
"""

from enum import Enum

from mnexium.models.chat import completion_text


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


KEY_HEADERS: dict[Provider, str] = {
    Provider.OPENAI: "x-openai-key",
    Provider.ANTHROPIC: "x-anthropic-key",
    Provider.GOOGLE: "x-google-key",
}

# Key headers the provider-native SDK routes also accept
NATIVE_KEY_HEADERS: dict[Provider, str] = {
    Provider.ANTHROPIC: "x-api-key",
    Provider.GOOGLE: "x-goog-api-key",
}


def resolve_provider(model: str | None) -> Provider:
    """Map a model name to the provider that serves it.

    `claude*` goes to Anthropic, `gemini*` (optionally prefixed with
    `models/`) to Google, everything else to OpenAI.
    """
    name = (model or "").strip().lower()
    if name.startswith("models/"):
        name = name[len("models/") :]
    if name.startswith("claude"):
        return Provider.ANTHROPIC
    if name.startswith("gemini"):
        return Provider.GOOGLE
    return Provider.OPENAI


__all__ = ["KEY_HEADERS", "NATIVE_KEY_HEADERS", "Provider", "completion_text", "resolve_provider"]
