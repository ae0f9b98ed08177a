"""Chat history pass-through routes."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from mnexium.client import MnexiumClient
from mnexium.demo.dependencies import ClientDep, SettingsDep
from mnexium.demo.proxy import forward, require
from mnexium.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/history")


async def _list(client: MnexiumClient, subject_id: str, limit: int) -> dict[str, Any]:
    chats = await client.list_chats(subject_id, limit=limit)
    return {"chats": [c.model_dump(mode="json", exclude_none=True) for c in chats]}


async def _read(
    client: MnexiumClient, chat_id: str, subject_id: str | None, limit: int
) -> dict[str, Any]:
    messages = await client.read_chat(chat_id, subject_id=subject_id, limit=limit)
    return {"messages": [m.model_dump(mode="json", exclude_none=True) for m in messages]}


async def _delete(client: MnexiumClient, chat_id: str, subject_id: str | None) -> dict[str, Any]:
    return {"success": await client.delete_chat(chat_id, subject_id=subject_id)}


@router.get("/list")
async def list_history(
    client: ClientDep,
    settings: SettingsDep,
    subject_id: str | None = None,
) -> JSONResponse:
    """List the subject's chats for the sidebar."""
    subject_id = require("subject_id", subject_id)
    return await forward(
        "history_list",
        _list(client, subject_id, settings.demo.history_limit),
        empty={"chats": []},
        list_key="chats",
    )


@router.get("/read")
async def read_history(
    client: ClientDep,
    settings: SettingsDep,
    chat_id: str | None = None,
    subject_id: str | None = None,
) -> JSONResponse:
    """Read one chat's messages."""
    chat_id = require("chat_id", chat_id)
    return await forward(
        "history_read",
        _read(client, chat_id, subject_id, settings.demo.messages_limit),
        empty={"messages": []},
        list_key="messages",
    )


@router.delete("/delete")
async def delete_history(
    client: ClientDep,
    chat_id: str | None = None,
    subject_id: str | None = None,
) -> JSONResponse:
    """Delete one chat."""
    chat_id = require("chat_id", chat_id)
    logger.info("history_delete_requested", chat_id=chat_id)
    return await forward(
        "history_delete",
        _delete(client, chat_id, subject_id),
        empty={"success": True},
    )
