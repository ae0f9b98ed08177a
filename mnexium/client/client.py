"""Mnexium API client.

Provides an async Python client for the hosted Mnexium memory service.

Usage:
    from mnexium.client import MnexiumClient

    async with MnexiumClient(api_key="mnx_...", openai_key="sk-...") as client:
        completion = await client.chat_completion(
            [{"role": "user", "content": "My favorite fruit is blueberry"}],
            mnx={"subject_id": "user_123", "log": True, "learn": "force"},
        )
        print(completion.text)

    # From configuration (config/*.toml, MNEXIUM_* and MNX_KEY style env vars)
    async with MnexiumClient.from_settings() as client:
        memories = await client.search_memories("user_123", "favorite fruit")
"""

import time
from collections.abc import AsyncIterator, Sequence
from typing import Any, TypeVar
from urllib.parse import quote, urlsplit

import httpx
from pydantic import BaseModel, SecretStr, ValidationError

from mnexium.client.exceptions import (
    MnexiumConnectionError,
    MnexiumResponseError,
    NotFoundError,
    raise_for_status,
)
from mnexium.client.providers import (
    KEY_HEADERS,
    NATIVE_KEY_HEADERS,
    Provider,
    resolve_provider,
)
from mnexium.client.streaming import iter_json_events
from mnexium.config import Settings, get_settings
from mnexium.config.models.api import DEFAULT_BASE_URL
from mnexium.models.chat import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatMessage,
    ResponseObject,
)
from mnexium.models.history import ChatSummary, HistoryMessage
from mnexium.models.memories import (
    Memory,
    MemoryCreate,
    MemoryCreateResult,
    MemoryList,
    MemoryUpdate,
    RecallQueryResult,
    RestoreResult,
)
from mnexium.models.mnx import MnxOptions, coerce_mnx
from mnexium.models.profiles import Profile, ProfileFieldUpdate
from mnexium.models.prompts import (
    Prompt,
    PromptCreate,
    PromptScope,
    PromptUpdate,
    ResolvedPrompt,
)
from mnexium.models.state import AgentState
from mnexium.observability.logging import get_logger
from mnexium.observability.metrics import (
    CLIENT_LATENCY,
    CLIENT_REQUESTS,
    LLM_TOKENS,
    USAGE_LIMIT_HITS,
)

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

MessageLike = ChatMessage | dict[str, Any]
MnxLike = MnxOptions | dict[str, Any] | None
ModelT = TypeVar("ModelT", bound=BaseModel)


def _secret(value: SecretStr | str | None) -> str | None:
    if isinstance(value, SecretStr):
        return value.get_secret_value() or None
    return value or None


def _require(value: str | None, name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{name} is required")
    return value


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if params is None:
        return None
    return {k: v for k, v in params.items() if v is not None}


def _dump_message(message: MessageLike) -> dict[str, Any]:
    if isinstance(message, ChatMessage):
        return message.model_dump(exclude_none=True)
    return dict(message)


def _unwrap(data: Any, key: str) -> Any:
    """Return data[key] when the service wraps the object, else data."""
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        return data[key]
    return data


def _parse(model: type[ModelT], data: Any, endpoint: str) -> ModelT:
    """Validate a response body; a shape mismatch raises MnexiumResponseError."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "mnexium_response_invalid",
            endpoint=endpoint,
            model=model.__name__,
            errors=exc.error_count(),
        )
        raise MnexiumResponseError(
            f"{endpoint} returned an unexpected {model.__name__} body",
            details=str(exc)[:500],
        ) from exc


def _token_counts(data: dict[str, Any]) -> tuple[int, int]:
    """Input and output token counts from any provider's usage block."""
    usage = data.get("usage")
    if isinstance(usage, dict):
        prompt = usage.get("prompt_tokens", usage.get("input_tokens", 0))
        completion = usage.get("completion_tokens", usage.get("output_tokens", 0))
        return int(prompt or 0), int(completion or 0)
    metadata = data.get("usageMetadata")
    if isinstance(metadata, dict):
        return (
            int(metadata.get("promptTokenCount") or 0),
            int(metadata.get("candidatesTokenCount") or 0),
        )
    return 0, 0


class MnexiumClient:
    """Async client for the Mnexium API.

    Attributes:
        base_url: Base URL of the API, including the /api/v1 prefix
        default_model: Model used when a chat call does not name one
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        *,
        openai_key: str | None = None,
        anthropic_key: str | None = None,
        google_key: str | None = None,
        default_model: str = "gpt-4o-mini",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Mnexium service key, sent as a bearer token
            base_url: Base URL of the API
            openai_key: Key forwarded as x-openai-key for OpenAI models
            anthropic_key: Key forwarded as x-anthropic-key for Claude models
            google_key: Key forwarded as x-google-key for Gemini models
            default_model: Model for chat calls that do not pass one
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self._api_key = api_key
        self._provider_keys: dict[Provider, str | None] = {
            Provider.OPENAI: openai_key,
            Provider.ANTHROPIC: anthropic_key,
            Provider.GOOGLE: google_key,
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MnexiumClient":
        """Create a client from application settings.

        Args:
            settings: Settings to use, defaults to get_settings()
            transport: Optional httpx transport

        Returns:
            Configured MnexiumClient
        """
        settings = settings or get_settings()
        return cls(
            api_key=_secret(settings.api.key),
            base_url=settings.api.base_url,
            openai_key=_secret(settings.providers.openai_key),
            anthropic_key=_secret(settings.providers.anthropic_key),
            google_key=_secret(settings.providers.google_key),
            default_model=settings.providers.default_model,
            timeout=settings.api.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "MnexiumClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    @property
    def origin(self) -> str:
        """Scheme and host of base_url, root of the Gemini-native routes."""
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"

    def has_provider_key(self, provider: Provider | str) -> bool:
        return bool(self._provider_keys.get(Provider(provider)))

    def _headers(
        self,
        provider: Provider | None = None,
        *,
        subject_id: str | None = None,
        native: bool = False,
    ) -> dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json"}

        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        # Only the resolved provider's key leaves the process
        if provider is not None:
            key = self._provider_keys.get(provider)
            if key:
                headers[KEY_HEADERS[provider]] = key
                if native and provider in NATIVE_KEY_HEADERS:
                    headers[NATIVE_KEY_HEADERS[provider]] = key

        if subject_id:
            headers["x-subject-id"] = subject_id

        return headers

    def _observe(self, method: str, endpoint: str, status: int, started: float) -> None:
        CLIENT_REQUESTS.labels(method=method, endpoint=endpoint, status=str(status)).inc()
        CLIENT_LATENCY.labels(method=method, endpoint=endpoint).observe(
            time.perf_counter() - started
        )
        logger.debug("mnexium_request", method=method, endpoint=endpoint, status=status)
        if status == 429:
            USAGE_LIMIT_HITS.labels(endpoint=endpoint).inc()
            logger.warning("usage_limit_exceeded", method=method, endpoint=endpoint)

    def _connection_error(
        self, method: str, endpoint: str, exc: httpx.TransportError
    ) -> MnexiumConnectionError:
        CLIENT_REQUESTS.labels(method=method, endpoint=endpoint, status="error").inc()
        reason = str(exc) or type(exc).__name__
        logger.warning("mnexium_request_failed", method=method, endpoint=endpoint, error=reason)
        return MnexiumConnectionError(f"Request to {endpoint} failed: {reason}", details=reason)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        endpoint: str | None = None,
        headers: dict[str, str] | None = None,
        json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url, or an absolute URL
            endpoint: Route template used for metrics and logs
            headers: Headers, defaults to the bearer-only set
            json: Request body
            params: Query parameters, None values are dropped
        """
        endpoint = endpoint or path
        started = time.perf_counter()
        try:
            response = await self._client.request(
                method=method,
                url=path,
                headers=headers if headers is not None else self._headers(),
                json=json,
                params=_clean_params(params),
            )
        except httpx.TransportError as exc:
            raise self._connection_error(method, endpoint, exc) from exc

        self._observe(method, endpoint, response.status_code, started)
        raise_for_status(response)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as exc:
            raise MnexiumResponseError(
                f"{endpoint} returned a body that is not JSON",
                status_code=response.status_code,
                details=response.text[:500],
            ) from exc

    async def _stream(
        self,
        method: str,
        path: str,
        *,
        endpoint: str,
        headers: dict[str, str],
        json: dict | None = None,
        params: dict | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Make a streaming request and yield decoded SSE payloads."""
        started = time.perf_counter()
        try:
            async with self._client.stream(
                method,
                path,
                headers={**headers, "Accept": "text/event-stream"},
                json=json,
                params=_clean_params(params),
            ) as response:
                self._observe(method, endpoint, response.status_code, started)
                if response.status_code >= 400:
                    await response.aread()
                    raise_for_status(response)

                async for payload in iter_json_events(response.aiter_lines()):
                    yield payload
        except httpx.TransportError as exc:
            raise self._connection_error(method, endpoint, exc) from exc

    def _record_usage(self, provider: Provider, model: str, data: dict[str, Any]) -> None:
        prompt_tokens, completion_tokens = _token_counts(data)
        if prompt_tokens:
            LLM_TOKENS.labels(provider=provider.value, model=model, direction="input").inc(
                prompt_tokens
            )
        if completion_tokens:
            LLM_TOKENS.labels(provider=provider.value, model=model, direction="output").inc(
                completion_tokens
            )

    def _route(self, model: str, provider: Provider | str | None) -> Provider:
        return Provider(provider) if provider else resolve_provider(model)

    # Chat

    def _chat_payload(
        self,
        messages: Sequence[MessageLike],
        model: str | None,
        mnx: MnxLike,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        if not messages:
            raise ValueError("messages must contain at least one message")
        payload: dict[str, Any] = {
            "model": model or self.default_model,
            "messages": [_dump_message(m) for m in messages],
            **params,
        }
        wire_mnx = coerce_mnx(mnx)
        if wire_mnx is not None:
            payload["mnx"] = wire_mnx
        return payload

    async def chat_completion(
        self,
        messages: Sequence[MessageLike],
        model: str | None = None,
        mnx: MnxLike = None,
        *,
        provider: Provider | str | None = None,
        **params: Any,
    ) -> ChatCompletion:
        """Send an OpenAI-shaped chat completion through the memory layer.

        Args:
            messages: Conversation messages, at least one
            model: Model name; the provider is inferred from it
            mnx: Memory controls (subject_id, log, learn, recall, ...)
            provider: Override the inferred provider
            **params: Extra request fields (max_tokens, temperature, tools, ...)

        Returns:
            The completion; Claude replies may carry `content` blocks instead
            of choices, `ChatCompletion.text` handles both.
        """
        payload = self._chat_payload(messages, model, mnx, params)
        routed = self._route(payload["model"], provider)
        data = await self._request(
            "POST",
            "/chat/completions",
            headers=self._headers(routed),
            json=payload,
        )
        self._record_usage(routed, payload["model"], data)
        return _parse(ChatCompletion, data, "/chat/completions")

    async def stream_chat_completion(
        self,
        messages: Sequence[MessageLike],
        model: str | None = None,
        mnx: MnxLike = None,
        *,
        provider: Provider | str | None = None,
        **params: Any,
    ) -> AsyncIterator[ChatCompletionChunk]:
        """Stream a chat completion as OpenAI delta chunks.

        Yields:
            Chunks until `[DONE]` or the stream closes
        """
        payload = self._chat_payload(messages, model, mnx, params)
        payload["stream"] = True
        routed = self._route(payload["model"], provider)
        async for event in self._stream(
            "POST",
            "/chat/completions",
            endpoint="/chat/completions",
            headers=self._headers(routed),
            json=payload,
        ):
            if event.get("usage"):
                self._record_usage(routed, payload["model"], event)
            yield _parse(ChatCompletionChunk, event, "/chat/completions")

    def _response_payload(
        self,
        input: str | Sequence[dict[str, Any]],
        model: str | None,
        mnx: MnxLike,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        if isinstance(input, str):
            if not input.strip():
                raise ValueError("input must not be empty")
        elif not input:
            raise ValueError("input must not be empty")
        payload: dict[str, Any] = {
            "model": model or self.default_model,
            "input": input if isinstance(input, str) else list(input),
            **params,
        }
        wire_mnx = coerce_mnx(mnx)
        if wire_mnx is not None:
            payload["mnx"] = wire_mnx
        return payload

    async def create_response(
        self,
        input: str | Sequence[dict[str, Any]],
        model: str | None = None,
        mnx: MnxLike = None,
        *,
        provider: Provider | str | None = None,
        **params: Any,
    ) -> ResponseObject:
        """Call the Responses API.

        Args:
            input: A string, or role-based items with input_text parts
            model: Model name
            mnx: Memory controls
            provider: Override the inferred provider
            **params: Extra request fields, passed through unchanged
        """
        payload = self._response_payload(input, model, mnx, params)
        routed = self._route(payload["model"], provider)
        data = await self._request(
            "POST",
            "/responses",
            headers=self._headers(routed),
            json=payload,
        )
        self._record_usage(routed, payload["model"], data)
        return _parse(ResponseObject, data, "/responses")

    async def stream_response(
        self,
        input: str | Sequence[dict[str, Any]],
        model: str | None = None,
        mnx: MnxLike = None,
        *,
        provider: Provider | str | None = None,
        **params: Any,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream the Responses API.

        Yields:
            Event dicts; text arrives in `response.output_text.delta` events
        """
        payload = self._response_payload(input, model, mnx, params)
        payload["stream"] = True
        routed = self._route(payload["model"], provider)
        async for event in self._stream(
            "POST",
            "/responses",
            endpoint="/responses",
            headers=self._headers(routed),
            json=payload,
        ):
            yield event

    def _anthropic_payload(
        self,
        model: str,
        messages: Sequence[MessageLike],
        max_tokens: int,
        mnx: MnxLike,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        if not messages:
            raise ValueError("messages must contain at least one message")
        payload: dict[str, Any] = {
            "model": model,
            "messages": [_dump_message(m) for m in messages],
            "max_tokens": max_tokens,
            **params,
        }
        wire_mnx = coerce_mnx(mnx)
        if wire_mnx is not None:
            payload["mnx"] = wire_mnx
        return payload

    def _anthropic_headers(self) -> dict[str, str]:
        headers = self._headers(Provider.ANTHROPIC, native=True)
        headers["anthropic-version"] = ANTHROPIC_VERSION
        return headers

    async def anthropic_messages(
        self,
        model: str,
        messages: Sequence[MessageLike],
        max_tokens: int = 1024,
        mnx: MnxLike = None,
        **params: Any,
    ) -> dict[str, Any]:
        """Call the Anthropic-native Messages route.

        Returns:
            The Anthropic-shaped message, with `content` blocks
        """
        payload = self._anthropic_payload(model, messages, max_tokens, mnx, params)
        data = await self._request(
            "POST",
            "/messages",
            headers=self._anthropic_headers(),
            json=payload,
        )
        self._record_usage(Provider.ANTHROPIC, model, data)
        return data

    async def stream_anthropic_messages(
        self,
        model: str,
        messages: Sequence[MessageLike],
        max_tokens: int = 1024,
        mnx: MnxLike = None,
        **params: Any,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream the Anthropic-native Messages route.

        Yields:
            Anthropic events (message_start, content_block_delta, ...)
        """
        payload = self._anthropic_payload(model, messages, max_tokens, mnx, params)
        payload["stream"] = True
        async for event in self._stream(
            "POST",
            "/messages",
            endpoint="/messages",
            headers=self._anthropic_headers(),
            json=payload,
        ):
            yield event

    def _gemini_request(
        self,
        model: str,
        contents: str | Sequence[dict[str, Any]],
        mnx: MnxLike,
        params: dict[str, Any],
        action: str,
    ) -> tuple[str, str, dict[str, Any]]:
        _require(model, "model")
        name = model[len("models/") :] if model.startswith("models/") else model
        if isinstance(contents, str):
            if not contents.strip():
                raise ValueError("contents must not be empty")
            contents = [{"role": "user", "parts": [{"text": contents}]}]
        elif not contents:
            raise ValueError("contents must not be empty")

        payload: dict[str, Any] = {"contents": list(contents), **params}
        wire_mnx = coerce_mnx(mnx)
        if wire_mnx is not None:
            payload["mnx"] = wire_mnx

        url = f"{self.origin}/v1beta/models/{quote(name, safe='')}:{action}"
        endpoint = f"/v1beta/models/{{model}}:{action}"
        return url, endpoint, payload

    async def gemini_generate_content(
        self,
        model: str,
        contents: str | Sequence[dict[str, Any]],
        mnx: MnxLike = None,
        **params: Any,
    ) -> dict[str, Any]:
        """Call the Gemini-native generateContent route.

        The Google route lives at the service origin, outside /api/v1.

        Returns:
            The Gemini-shaped response, with `candidates`
        """
        url, endpoint, payload = self._gemini_request(
            model, contents, mnx, params, "generateContent"
        )
        data = await self._request(
            "POST",
            url,
            endpoint=endpoint,
            headers=self._headers(Provider.GOOGLE, native=True),
            json=payload,
        )
        self._record_usage(Provider.GOOGLE, model, data)
        return data

    async def stream_gemini_generate_content(
        self,
        model: str,
        contents: str | Sequence[dict[str, Any]],
        mnx: MnxLike = None,
        **params: Any,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream the Gemini-native route.

        Yields:
            Partial Gemini responses, each with `candidates`
        """
        url, endpoint, payload = self._gemini_request(
            model, contents, mnx, params, "streamGenerateContent"
        )
        async for event in self._stream(
            "POST",
            url,
            endpoint=endpoint,
            headers=self._headers(Provider.GOOGLE, native=True),
            json=payload,
            params={"alt": "sse"},
        ):
            yield event

    # Memories

    async def list_memories(
        self,
        subject_id: str,
        limit: int = 50,
        include_superseded: bool = False,
    ) -> MemoryList:
        """List a subject's memories, active ones only unless asked."""
        _require(subject_id, "subject_id")
        data = await self._request(
            "GET",
            "/memories",
            params={
                "subject_id": subject_id,
                "limit": limit,
                "include_superseded": "true" if include_superseded else None,
            },
        )
        return _parse(MemoryList, data, "/memories")

    async def search_memories(
        self,
        subject_id: str,
        query: str,
        limit: int = 10,
        min_score: int | float = 35,
        include_superseded: bool = False,
    ) -> MemoryList:
        """Semantic search over a subject's memories, ordered by relevance."""
        _require(subject_id, "subject_id")
        _require(query, "query")
        data = await self._request(
            "GET",
            "/memories/search",
            params={
                "subject_id": subject_id,
                "q": query,
                "limit": limit,
                "min_score": min_score,
                "include_superseded": "true" if include_superseded else None,
            },
        )
        return _parse(MemoryList, data, "/memories/search")

    async def get_memory(self, memory_id: str) -> Memory:
        """Get a memory by ID.

        Raises:
            NotFoundError: Unknown ID
        """
        _require(memory_id, "memory_id")
        data = await self._request(
            "GET",
            f"/memories/{quote(memory_id, safe='')}",
            endpoint="/memories/{id}",
        )
        return _parse(Memory, _unwrap(data, "data"), "/memories/{id}")

    async def create_memory(
        self,
        subject_id: str,
        text: str,
        kind: str = "fact",
        importance: int = 50,
        supersedes: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> MemoryCreateResult:
        """Store a fact for a subject.

        Args:
            subject_id: Owner of the fact
            text: The fact
            kind: fact, preference, ...
            importance: 0 to 100
            supersedes: ID of a memory this one replaces
            metadata: Arbitrary extra data

        Returns:
            The new ID, or `skipped` with a reason for a duplicate
        """
        payload = MemoryCreate(
            subject_id=subject_id,
            text=text,
            kind=kind,
            importance=importance,
            supersedes=supersedes,
            metadata=metadata,
        )
        data = await self._request(
            "POST",
            "/memories",
            json=payload.model_dump(exclude_none=True),
        )
        result = _parse(MemoryCreateResult, data, "/memories")
        if result.skipped:
            logger.info("memory_create_skipped", subject_id=subject_id, reason=result.reason)
        else:
            logger.info(
                "memory_created",
                subject_id=subject_id,
                memory_id=result.id,
                supersedes=supersedes,
            )
        return result

    async def update_memory(
        self,
        memory_id: str,
        *,
        text: str | None = None,
        kind: str | None = None,
        importance: int | None = None,
    ) -> dict[str, Any]:
        """Update fields of a memory in place."""
        _require(memory_id, "memory_id")
        payload = MemoryUpdate(text=text, kind=kind, importance=importance)
        body = payload.model_dump(exclude_none=True)
        if not body:
            raise ValueError("update_memory needs at least one field")
        return await self._request(
            "PATCH",
            f"/memories/{quote(memory_id, safe='')}",
            endpoint="/memories/{id}",
            json=body,
        )

    async def delete_memory(self, memory_id: str) -> bool:
        """Delete a memory. Idempotent.

        Returns:
            False if the service reported the memory as unknown
        """
        _require(memory_id, "memory_id")
        try:
            await self._request(
                "DELETE",
                f"/memories/{quote(memory_id, safe='')}",
                endpoint="/memories/{id}",
            )
        except NotFoundError:
            logger.debug("memory_already_deleted", memory_id=memory_id)
            return False
        logger.info("memory_deleted", memory_id=memory_id)
        return True

    async def list_superseded_memories(self, subject_id: str) -> MemoryList:
        """List facts that were replaced by newer ones."""
        _require(subject_id, "subject_id")
        data = await self._request(
            "GET",
            "/memories/superseded",
            params={"subject_id": subject_id},
        )
        return _parse(MemoryList, data, "/memories/superseded")

    async def restore_memory(self, memory_id: str) -> RestoreResult:
        """Reactivate a superseded memory; a no-op for an active one."""
        _require(memory_id, "memory_id")
        data = await self._request(
            "POST",
            f"/memories/{quote(memory_id, safe='')}/restore",
            endpoint="/memories/{id}/restore",
        )
        return _parse(RestoreResult, data, "/memories/{id}/restore")

    async def query_recalls(
        self,
        chat_id: str | None = None,
        memory_id: str | None = None,
        stats: bool = False,
    ) -> RecallQueryResult:
        """Query recall events by chat or by memory.

        Raises:
            ValueError: Neither chat_id nor memory_id given
        """
        if not chat_id and not memory_id:
            raise ValueError("query_recalls needs chat_id or memory_id")
        data = await self._request(
            "GET",
            "/memories/recalls",
            params={
                "chat_id": chat_id,
                "memory_id": memory_id,
                "stats": "true" if stats else None,
            },
        )
        return _parse(RecallQueryResult, data, "/memories/recalls")

    # Agent state

    def _state_path(self, key: str) -> str:
        _require(key, "key")
        return f"/state/{quote(key, safe=':')}"

    async def put_state(
        self,
        key: str,
        value: Any,
        subject_id: str,
        ttl_seconds: int | None = None,
    ) -> None:
        """Create or replace the state value for (subject, key)."""
        _require(subject_id, "subject_id")
        body: dict[str, Any] = {"value": value}
        if ttl_seconds is not None:
            body["ttl_seconds"] = ttl_seconds
        await self._request(
            "PUT",
            self._state_path(key),
            endpoint="/state/{key}",
            headers=self._headers(subject_id=subject_id),
            json=body,
        )

    async def get_state(self, key: str, subject_id: str) -> AgentState:
        """Get the state value for (subject, key).

        Raises:
            NotFoundError: No value stored, or it expired or was deleted
        """
        _require(subject_id, "subject_id")
        data = await self._request(
            "GET",
            self._state_path(key),
            endpoint="/state/{key}",
            headers=self._headers(subject_id=subject_id),
        )
        return _parse(AgentState, {"key": key, **data}, "/state/{key}")

    async def delete_state(self, key: str, subject_id: str) -> None:
        _require(subject_id, "subject_id")
        await self._request(
            "DELETE",
            self._state_path(key),
            endpoint="/state/{key}",
            headers=self._headers(subject_id=subject_id),
        )

    # Profiles

    async def get_profile(self, subject_id: str) -> Profile:
        """Get a subject's profile; empty for a new subject."""
        _require(subject_id, "subject_id")
        data = await self._request("GET", "/profiles", params={"subject_id": subject_id})
        return Profile(subject_id=subject_id, data=data.get("data") or {})

    async def update_profile(
        self,
        subject_id: str,
        updates: Sequence[ProfileFieldUpdate | dict[str, Any]],
    ) -> dict[str, Any]:
        """Write profile fields, each with an optional confidence."""
        _require(subject_id, "subject_id")
        fields = [
            u if isinstance(u, ProfileFieldUpdate) else ProfileFieldUpdate.model_validate(u)
            for u in updates
        ]
        return await self._request(
            "PATCH",
            "/profiles",
            json={
                "subject_id": subject_id,
                "updates": [f.model_dump(exclude_none=True) for f in fields],
            },
        )

    # Prompts

    async def create_prompt(
        self,
        name: str,
        prompt_text: str,
        scope: PromptScope | str = PromptScope.PROJECT,
        scope_id: str | None = None,
        is_active: bool = True,
        is_default: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> Prompt:
        """Create a managed system prompt."""
        payload = PromptCreate(
            name=name,
            prompt_text=prompt_text,
            scope=scope,
            scope_id=scope_id,
            is_active=is_active,
            is_default=is_default,
            metadata=metadata,
        )
        data = await self._request(
            "POST",
            "/prompts",
            json=payload.model_dump(mode="json", exclude_none=True),
        )
        prompt = _parse(Prompt, _unwrap(data, "prompt"), "/prompts")
        logger.info("prompt_created", prompt_id=prompt.id, scope=payload.scope.value)
        return prompt

    async def list_prompts(self) -> list[Prompt]:
        data = await self._request("GET", "/prompts")
        return [_parse(Prompt, p, "/prompts") for p in data.get("prompts", [])]

    async def get_prompt(self, prompt_id: str) -> Prompt:
        """Get a prompt by ID.

        Raises:
            NotFoundError: Unknown ID
        """
        _require(prompt_id, "prompt_id")
        data = await self._request(
            "GET",
            f"/prompts/{quote(prompt_id, safe='')}",
            endpoint="/prompts/{id}",
        )
        return _parse(Prompt, _unwrap(data, "prompt"), "/prompts/{id}")

    async def update_prompt(
        self,
        prompt_id: str,
        *,
        name: str | None = None,
        prompt_text: str | None = None,
        is_active: bool | None = None,
        is_default: bool | None = None,
    ) -> dict[str, Any]:
        """Partially update a prompt."""
        _require(prompt_id, "prompt_id")
        payload = PromptUpdate(
            name=name,
            prompt_text=prompt_text,
            is_active=is_active,
            is_default=is_default,
        )
        body = payload.model_dump(exclude_none=True)
        if not body:
            raise ValueError("update_prompt needs at least one field")
        return await self._request(
            "PATCH",
            f"/prompts/{quote(prompt_id, safe='')}",
            endpoint="/prompts/{id}",
            json=body,
        )

    async def delete_prompt(self, prompt_id: str) -> None:
        _require(prompt_id, "prompt_id")
        await self._request(
            "DELETE",
            f"/prompts/{quote(prompt_id, safe='')}",
            endpoint="/prompts/{id}",
        )

    async def resolve_prompt(
        self,
        subject_id: str | None = None,
        chat_id: str | None = None,
        combined: bool = False,
    ) -> ResolvedPrompt:
        """Resolve the prompts that would apply to a subject or chat."""
        data = await self._request(
            "GET",
            "/prompts/resolve",
            params={
                "subject_id": subject_id,
                "chat_id": chat_id,
                "combined": "true" if combined else None,
            },
        )
        return _parse(ResolvedPrompt, data, "/prompts/resolve")

    # Chat history

    async def list_chats(self, subject_id: str, limit: int = 50) -> list[ChatSummary]:
        """List a subject's logged chats; empty for an unknown subject."""
        _require(subject_id, "subject_id")
        data = await self._request(
            "GET",
            "/chat/history/list",
            params={"subject_id": subject_id, "limit": limit},
        )
        chats = data.get("chats") or []
        return [_parse(ChatSummary, c, "/chat/history/list") for c in chats]

    async def read_chat(
        self,
        chat_id: str,
        subject_id: str | None = None,
        limit: int = 200,
    ) -> list[HistoryMessage]:
        """Read a chat's logged messages, oldest first; empty for an unknown chat."""
        _require(chat_id, "chat_id")
        data = await self._request(
            "GET",
            "/chat/history/read",
            params={"chat_id": chat_id, "subject_id": subject_id, "limit": limit},
        )
        messages = data.get("messages") or []
        return [_parse(HistoryMessage, m, "/chat/history/read") for m in messages]

    async def delete_chat(self, chat_id: str, subject_id: str | None = None) -> bool:
        """Delete a chat's history. Idempotent."""
        _require(chat_id, "chat_id")
        data = await self._request(
            "DELETE",
            "/chat/history/delete",
            params={"chat_id": chat_id, "subject_id": subject_id},
        )
        logger.info("chat_deleted", chat_id=chat_id, subject_id=subject_id)
        return bool(data.get("success", True))
