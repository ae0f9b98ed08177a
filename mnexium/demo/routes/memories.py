"""Memory pass-through routes for the memories page."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from mnexium.client import MnexiumClient
from mnexium.demo.dependencies import ClientDep, SettingsDep
from mnexium.demo.proxy import forward, require

router = APIRouter(prefix="/memories")


async def _list(client: MnexiumClient, subject_id: str, limit: int) -> dict[str, Any]:
    memories = await client.list_memories(subject_id, limit=limit)
    return memories.model_dump(mode="json", exclude_none=True)


async def _search(
    client: MnexiumClient,
    subject_id: str,
    query: str,
    limit: int,
    min_score: int,
) -> dict[str, Any]:
    memories = await client.search_memories(
        subject_id, query, limit=limit, min_score=min_score
    )
    return memories.model_dump(mode="json", exclude_none=True)


@router.get("/list")
async def list_memories(
    client: ClientDep,
    settings: SettingsDep,
    subject_id: str | None = None,
) -> JSONResponse:
    """List the subject's active memories."""
    subject_id = require("subject_id", subject_id)
    return await forward(
        "memories_list",
        _list(client, subject_id, settings.demo.memories_limit),
        list_key="memories",
    )


@router.get("/search")
async def search_memories(
    client: ClientDep,
    settings: SettingsDep,
    subject_id: str | None = None,
    q: str | None = None,
) -> JSONResponse:
    """Search the subject's memories."""
    subject_id = require("subject_id", subject_id)
    query = require("q (query)", q)
    return await forward(
        "memories_search",
        _search(
            client,
            subject_id,
            query,
            settings.demo.search_limit,
            settings.demo.search_min_score,
        ),
        list_key="memories",
    )
