"""Fixtures for offline unit tests.

Every unit test runs against the in-memory fake service with the test
configuration, whatever keys the developer has exported.
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from mnexium.client import MnexiumClient
from mnexium.config.settings import LEGACY_ENV_VARS
from tests.fakes import FakeMemoryService

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
TEST_BASE_URL = "https://mnexium.test/api/v1"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop exported keys and pin the test environment."""
    legacy = {name for names in LEGACY_ENV_VARS.values() for name in names}
    for name in list(os.environ):
        if name.upper().startswith("MNEXIUM_") or name in legacy:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MNEXIUM_ENV", "test")
    monkeypatch.setenv("MNEXIUM_CONFIG_DIR", str(CONFIG_DIR))


@pytest.fixture
def fake_service() -> FakeMemoryService:
    """Fresh fake service with the key `mnx_test`."""
    return FakeMemoryService()


@pytest.fixture
def make_client(fake_service: FakeMemoryService):
    """Factory for clients wired to the fake service."""

    def _make(**overrides) -> MnexiumClient:
        options = {
            "api_key": "mnx_test",
            "base_url": TEST_BASE_URL,
            "openai_key": "sk-test",
            "anthropic_key": "sk-ant-test",
            "google_key": "g-test",
            "transport": fake_service.transport(),
        }
        options.update(overrides)
        return MnexiumClient(**options)

    return _make


@pytest.fixture
async def client(make_client) -> AsyncGenerator[MnexiumClient, None]:
    """Client with every provider key set."""
    async with make_client() as mnx:
        yield mnx
