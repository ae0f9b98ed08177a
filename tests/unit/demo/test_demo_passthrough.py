"""Unit tests for the demo history and memories pass-through routes."""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mnexium.demo.dependencies import get_client
from tests.fakes import FakeMemoryService

SUBJECT = "0f8e2d3c-1111-4a5b-9c9d-123456789abc"


def _serving(body: dict, status_code: int = 200) -> httpx.MockTransport:
    """Transport that answers every request with one JSON body."""
    return httpx.MockTransport(lambda request: httpx.Response(status_code, json=body))


def _chat(http: TestClient, chat_id: str, text: str) -> None:
    response = http.post(
        "/chat",
        json={
            "messages": [{"role": "user", "content": text}],
            "subjectId": SUBJECT,
            "chatId": chat_id,
        },
    )
    assert response.status_code == 200


class TestHistoryRoutes:
    """Tests for /history/*."""

    def test_list_after_chat(self, http: TestClient) -> None:
        _chat(http, "chat_1", "hello")

        response = http.get("/history/list", params={"subject_id": SUBJECT})

        assert response.status_code == 200
        chats = response.json()["chats"]
        assert [c["chat_id"] for c in chats] == ["chat_1"]

    def test_read(self, http: TestClient) -> None:
        _chat(http, "chat_1", "hello")

        response = http.get("/history/read", params={"chat_id": "chat_1"})

        messages = response.json()["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant"]
        assert messages[0]["content"] == "hello"

    def test_delete(self, http: TestClient) -> None:
        _chat(http, "chat_1", "hello")

        response = http.delete("/history/delete", params={"chat_id": "chat_1"})

        assert response.json() == {"success": True}
        assert http.get("/history/read", params={"chat_id": "chat_1"}).json() == {
            "messages": []
        }

    @pytest.mark.parametrize(
        ("method", "path", "name"),
        [
            ("GET", "/history/list", "subject_id"),
            ("GET", "/history/read", "chat_id"),
            ("DELETE", "/history/delete", "chat_id"),
        ],
    )
    def test_missing_parameter(self, http: TestClient, method: str, path: str, name: str) -> None:
        response = http.request(method, path)

        assert response.status_code == 400
        assert response.json() == {"error": f"{name} required"}

    def test_blank_parameter(self, http: TestClient) -> None:
        response = http.get("/history/list", params={"subject_id": "  "})

        assert response.status_code == 400

    def test_unparseable_upstream_falls_back(
        self, http: TestClient, fake_service: FakeMemoryService
    ) -> None:
        """A non-JSON upstream body yields the empty shape with 200."""
        fake_service.fail_mode = "html"

        assert http.get("/history/list", params={"subject_id": SUBJECT}).json() == {"chats": []}
        assert http.get("/history/read", params={"chat_id": "c"}).json() == {"messages": []}
        assert http.delete("/history/delete", params={"chat_id": "c"}).json() == {
            "success": True
        }

    def test_unreachable_upstream(self, http: TestClient, fake_service: FakeMemoryService) -> None:
        """Transport failures are 500s that keep the list key."""
        fake_service.fail_mode = "connect"

        response = http.get("/history/list", params={"subject_id": SUBJECT})

        assert response.status_code == 500
        body = response.json()
        assert body["chats"] == []
        assert "error" in body

    def test_service_error_body_passed_with_200(self, app: FastAPI, make_client) -> None:
        """A 4xx from the service reaches the browser as its JSON body with 200."""
        app.dependency_overrides[get_client] = lambda: make_client(api_key="mnx_wrong")

        with TestClient(app) as http:
            response = http.get("/history/list", params={"subject_id": SUBJECT})

        assert response.status_code == 200
        assert response.json()["error"] == "unauthorized"

    def test_server_error_is_500(self, app: FastAPI, make_client) -> None:
        app.dependency_overrides[get_client] = lambda: make_client(
            transport=_serving({"error": "boom"}, status_code=503)
        )

        with TestClient(app) as http:
            response = http.get("/history/list", params={"subject_id": SUBJECT})

        assert response.status_code == 500
        assert response.json()["chats"] == []

    @pytest.mark.parametrize(
        ("path", "params", "body", "empty"),
        [
            ("/history/list", {"subject_id": SUBJECT}, {"chats": [{"id": "c1"}]}, {"chats": []}),
            (
                "/history/read",
                {"chat_id": "c"},
                {"messages": [{"content": "hi", "type": "message"}]},
                {"messages": []},
            ),
        ],
    )
    def test_unexpected_shape_falls_back(
        self,
        app: FastAPI,
        make_client,
        path: str,
        params: dict,
        body: dict,
        empty: dict,
    ) -> None:
        """Items missing chat_id or role yield the empty shape with 200."""
        app.dependency_overrides[get_client] = lambda: make_client(transport=_serving(body))

        with TestClient(app) as http:
            response = http.get(path, params=params)

        assert response.status_code == 200
        assert response.json() == empty


class TestMemoriesRoutes:
    """Tests for /memories/*."""

    def test_list(self, http: TestClient, fake_service: FakeMemoryService) -> None:
        fake_service.add_memory(SUBJECT, "Favorite fruit is mango")

        response = http.get("/memories/list", params={"subject_id": SUBJECT})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["text"] == "Favorite fruit is mango"

    def test_search(self, http: TestClient, fake_service: FakeMemoryService) -> None:
        fake_service.add_memory(SUBJECT, "Favorite fruit is mango")
        fake_service.add_memory(SUBJECT, "Works as a nurse")

        response = http.get("/memories/search", params={"subject_id": SUBJECT, "q": "fruit"})

        texts = [m["text"] for m in response.json()["data"]]
        assert texts == ["Favorite fruit is mango"]

    def test_search_uses_configured_limits(
        self, http: TestClient, fake_service: FakeMemoryService
    ) -> None:
        http.get("/memories/search", params={"subject_id": SUBJECT, "q": "fruit"})

        params = fake_service.last_request.url.params
        assert params["limit"] == "10"
        assert params["min_score"] == "35"

    def test_search_requires_query(self, http: TestClient) -> None:
        response = http.get("/memories/search", params={"subject_id": SUBJECT})

        assert response.status_code == 400
        assert response.json() == {"error": "q (query) required"}

    def test_list_requires_subject(self, http: TestClient) -> None:
        response = http.get("/memories/list")

        assert response.status_code == 400
        assert response.json() == {"error": "subject_id required"}

    def test_unparseable_upstream_is_500(
        self, http: TestClient, fake_service: FakeMemoryService
    ) -> None:
        """Memory routes have no empty-shaped 200 fallback."""
        fake_service.fail_mode = "html"

        response = http.get("/memories/list", params={"subject_id": SUBJECT})

        assert response.status_code == 500
        assert response.json()["memories"] == []

    def test_service_error_body_passed_with_200(self, app: FastAPI, make_client) -> None:
        """A 4xx from the service reaches the browser as its JSON body with 200."""
        app.dependency_overrides[get_client] = lambda: make_client(api_key="mnx_wrong")

        with TestClient(app) as http:
            response = http.get("/memories/list", params={"subject_id": SUBJECT})

        assert response.status_code == 200
        assert response.json()["error"] == "unauthorized"

    def test_unexpected_shape_is_500(self, app: FastAPI, make_client) -> None:
        app.dependency_overrides[get_client] = lambda: make_client(
            transport=_serving({"data": [{"text": "no id"}]})
        )

        with TestClient(app) as http:
            response = http.get("/memories/list", params={"subject_id": SUBJECT})

        assert response.status_code == 500
        assert response.json()["memories"] == []
