"""Server-sent events parsing for streamed responses."""

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from mnexium.client.exceptions import error_for_response

DONE_SENTINEL = "[DONE]"


@dataclass
class ServerSentEvent:
    """One dispatched SSE event."""

    event: str | None
    data: str

    def json(self) -> Any:
        return json.loads(self.data)


async def iter_sse(lines: AsyncIterator[str]) -> AsyncIterator[ServerSentEvent]:
    """Group raw lines into events.

    A blank line dispatches the pending event. Multiple `data:` lines are
    joined with newlines. Comment lines (leading `:`) and unknown fields are
    ignored. A trailing event without a final blank line is still emitted
    when the stream closes.
    """
    event: str | None = None
    data: list[str] = []

    async for raw in lines:
        line = raw.rstrip("\r")
        if not line:
            if data:
                yield ServerSentEvent(event=event, data="\n".join(data))
            event, data = None, []
            continue
        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)

    if data:
        yield ServerSentEvent(event=event, data="\n".join(data))


async def iter_json_events(lines: AsyncIterator[str]) -> AsyncIterator[dict[str, Any]]:
    """Decode SSE events as JSON objects until `[DONE]` or stream close.

    An `error` event, or a chunk whose payload carries an `error` key,
    raises MnexiumAPIError. Payloads that are not JSON are skipped.
    """
    async for sse in iter_sse(lines):
        if sse.data.strip() == DONE_SENTINEL:
            return
        try:
            payload = sse.json()
        except json.JSONDecodeError:
            if sse.event == "error":
                raise error_for_response(500, None, sse.data) from None
            continue
        if not isinstance(payload, dict):
            continue
        if sse.event == "error" or payload.get("error"):
            status = payload.get("status") if isinstance(payload.get("status"), int) else 500
            raise error_for_response(status, payload, sse.data)
        if sse.event and "type" not in payload:
            payload = {"type": sse.event, **payload}
        yield payload
