"""
Unit tests for the memory HTTP API.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app import create_app
from app.exceptions import UpstreamServiceError


def _save_body(**overrides):
    body = {
        "memory": {"classification": "skill", "description": "Built a distributed cache"},
        "sourceFile": "resume.md",
    }
    body.update(overrides)
    return body


class TestSaveMemory:
    def test_success(self, client, store):
        response = client.post("/api/save-memory", json=_save_body())

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert len(store.documents) == 1

    @pytest.mark.parametrize(
        "body",
        [
            {"memory": {"classification": "skill"}, "sourceFile": "a.md"},
            {"memory": {"description": "x"}, "sourceFile": "a.md"},
            {"memory": {"classification": "skill", "description": "x"}},
            {"sourceFile": "a.md"},
            {"memory": {"classification": "", "description": "x"}, "sourceFile": "a.md"},
        ],
    )
    def test_missing_fields_rejected_without_embedding(self, client, embedder, store, body):
        response = client.post("/api/save-memory", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"].startswith("Invalid request body.")
        assert embedder.calls == []
        assert store.documents == []

    def test_malformed_json_is_400(self, client):
        response = client.post(
            "/api/save-memory", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_upstream_failure_is_500(self):
        service = MagicMock()
        service.save_memory.side_effect = UpstreamServiceError("embedding down")
        client = TestClient(create_app(memory_service=service))

        response = client.post("/api/save-memory", json=_save_body())

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "embedding down"}

    def test_unexpected_failure_is_generic_500(self):
        service = MagicMock()
        service.save_memory.side_effect = KeyError("embeddings")
        client = TestClient(create_app(memory_service=service))

        response = client.post("/api/save-memory", json=_save_body())

        assert response.status_code == 500
        assert response.json()["error"] == "An internal server error occurred."


class TestSearchMemory:
    def test_success(self, client):
        client.post("/api/save-memory", json=_save_body())

        response = client.post("/api/search-memory", json={"query": "distributed cache", "limit": 3})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        result = data["results"][0]
        assert set(result) == {"classification", "description", "sourceFile", "createdAt", "score"}
        assert result["sourceFile"] == "resume.md"

    def test_default_limit_is_five(self):
        service = MagicMock()
        service.search_memories.return_value = []
        client = TestClient(create_app(memory_service=service))

        client.post("/api/search-memory", json={"query": "hello"})

        service.search_memories.assert_called_once_with("hello", limit=5)

    @pytest.mark.parametrize(
        "body",
        [{}, {"query": ""}, {"query": "x", "limit": 0}, {"query": "x", "limit": 51}],
    )
    def test_invalid_request_is_400(self, client, embedder, body):
        response = client.post("/api/search-memory", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert embedder.calls == []

    def test_upstream_failure_is_500(self):
        service = MagicMock()
        service.search_memories.side_effect = UpstreamServiceError("Vector search failed: timeout")
        client = TestClient(create_app(memory_service=service))

        response = client.post("/api/search-memory", json={"query": "x"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Vector search failed: timeout"}


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_lifespan_closes_injected_service(memory_service, store):
    with TestClient(create_app(memory_service=memory_service)) as client:
        client.get("/api/health")
    assert store.closed is True
