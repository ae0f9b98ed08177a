"""Fixtures for the live contract suite.

Tests skip gracefully when the service key or the OpenAI key is not set.
Configure with MNX_KEY / OPENAI_KEY (or MNEXIUM_API__KEY /
MNEXIUM_PROVIDERS__OPENAI_KEY) and optionally MNX_BASE_URL.
"""

import asyncio
import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TypeVar

import pytest

from mnexium.client import MnexiumClient
from mnexium.config import get_settings

T = TypeVar("T")


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


@pytest.fixture
def mnx_key() -> str:
    """Get the service key or skip test."""
    key = _first_env("MNEXIUM_API__KEY", "MNX_KEY")
    if not key:
        pytest.skip("MNX_KEY not set")
    return key


@pytest.fixture
def openai_key() -> str:
    """Get the OpenAI key or skip test."""
    key = _first_env("MNEXIUM_PROVIDERS__OPENAI_KEY", "OPENAI_KEY", "OPENAI_API_KEY")
    if not key:
        pytest.skip("OPENAI_KEY not set")
    return key


@pytest.fixture
def anthropic_key() -> str:
    """Get the Anthropic key or skip test."""
    key = _first_env(
        "MNEXIUM_PROVIDERS__ANTHROPIC_KEY", "CLAUDE_API_KEY", "ANTHROPIC_API_KEY"
    )
    if not key:
        pytest.skip("CLAUDE_API_KEY not set")
    return key


@pytest.fixture
async def live_client(mnx_key: str, openai_key: str) -> AsyncGenerator[MnexiumClient, None]:
    """Client against the configured service."""
    async with MnexiumClient.from_settings(get_settings()) as client:
        yield client


@pytest.fixture
def subject_id() -> str:
    """A fresh subject per test so runs never share memories."""
    return f"test_{uuid.uuid4().hex[:12]}"


@pytest.fixture
def eventually() -> Callable[..., Awaitable]:
    """Poll an async check until it returns a truthy value.

    Fact extraction runs asynchronously on the service.
    """

    async def _eventually(
        check: Callable[[], Awaitable[T]],
        timeout: float = 30.0,
        interval: float = 2.0,
    ) -> T:
        deadline = asyncio.get_running_loop().time() + timeout
        while True:
            result = await check()
            if result or asyncio.get_running_loop().time() >= deadline:
                return result
            await asyncio.sleep(interval)

    return _eventually
