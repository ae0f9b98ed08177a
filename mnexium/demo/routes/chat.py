"""Chat routes for the demo UI.

Every turn goes through the Responses API with all memory features on:
the turn is logged, facts are learned and recalled, and prior turns of the
chat are rebuilt by the service, so only the newest message is sent.
"""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse
from structlog.contextvars import bind_contextvars

from mnexium.client import MnexiumClientError
from mnexium.demo.dependencies import ClientDep, SettingsDep
from mnexium.demo.models import ChatReply, ChatRequest, DoneEvent, ErrorEvent, TokenEvent
from mnexium.models.mnx import MnxOptions
from mnexium.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

TEXT_DELTA_EVENT = "response.output_text.delta"
COMPLETED_EVENT = "response.completed"


def chat_mnx(request: ChatRequest) -> MnxOptions:
    """Memory controls used for every demo turn."""
    return MnxOptions(
        subject_id=request.subject_id,
        chat_id=request.chat_id,
        log=True,
        learn=True,
        recall=True,
        history=True,
    )


@router.post("/chat", response_model=None)
async def chat(
    request: ChatRequest,
    client: ClientDep,
    settings: SettingsDep,
) -> ChatReply | JSONResponse:
    """Send the newest message and return the assistant's reply."""
    bind_contextvars(subject_id=request.subject_id, chat_id=request.chat_id)
    logger.info("chat_turn_started", messages=len(request.messages))

    try:
        response = await client.create_response(
            request.input,
            model=settings.demo.model,
            mnx=chat_mnx(request),
        )
    except MnexiumClientError as exc:
        logger.warning(
            "chat_turn_failed",
            error=exc.message,
            status_code=exc.status_code,
            error_code=exc.error_code,
        )
        return JSONResponse({"error": exc.message}, status_code=500)

    logger.info("chat_turn_completed", response_id=response.id)
    return ChatReply(content=response.output_text)


@router.post("/chat/stream")
async def chat_stream(
    request: ChatRequest,
    client: ClientDep,
    settings: SettingsDep,
) -> EventSourceResponse:
    """Stream the assistant's reply as `token` events, then `done`."""
    bind_contextvars(subject_id=request.subject_id, chat_id=request.chat_id)
    mnx = chat_mnx(request)

    async def event_generator() -> AsyncGenerator[dict[str, str], None]:
        parts: list[str] = []
        usage: dict[str, Any] | None = None
        try:
            async for event in client.stream_response(
                request.input,
                model=settings.demo.model,
                mnx=mnx,
            ):
                delta = event.get("delta")
                if event.get("type") == TEXT_DELTA_EVENT and isinstance(delta, str) and delta:
                    parts.append(delta)
                    yield {
                        "event": "token",
                        "data": TokenEvent(content=delta).model_dump_json(),
                    }
                elif event.get("type") == COMPLETED_EVENT:
                    completed = event.get("response")
                    if isinstance(completed, dict) and isinstance(completed.get("usage"), dict):
                        usage = completed["usage"]

            done = DoneEvent(content="".join(parts), usage=usage)
            logger.info("chat_stream_completed", characters=len(done.content))
            yield {"event": "done", "data": done.model_dump_json()}

        except MnexiumClientError as exc:
            logger.warning("chat_stream_failed", error=exc.message, status_code=exc.status_code)
            error = ErrorEvent(code=exc.error_code or "upstream_error", message=exc.message)
            yield {"event": "error", "data": error.model_dump_json()}
        except Exception as exc:
            logger.exception("chat_stream_error", error=str(exc))
            error = ErrorEvent(code="internal_error", message="Stream failed")
            yield {"event": "error", "data": error.model_dump_json()}

    return EventSourceResponse(event_generator())
