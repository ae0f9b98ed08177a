"""Fixtures for demo server tests."""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sse_starlette.sse import AppStatus

from mnexium.client import MnexiumClient
from mnexium.demo.app import create_app
from mnexium.demo.dependencies import get_client


@pytest.fixture(autouse=True)
def reset_sse_exit_event(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each TestClient runs its own event loop."""
    monkeypatch.setattr(AppStatus, "should_exit_event", None, raising=False)


@pytest.fixture
def mnx_client(make_client) -> MnexiumClient:
    """Client the routes use, wired to the fake service."""
    return make_client()


@pytest.fixture
def app(mnx_client: MnexiumClient) -> FastAPI:
    """Demo app with the client replaced."""
    app = create_app()
    app.dependency_overrides[get_client] = lambda: mnx_client
    return app


@pytest.fixture
def http(app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client that does not follow redirects."""
    with TestClient(app, follow_redirects=False) as client:
        yield client
