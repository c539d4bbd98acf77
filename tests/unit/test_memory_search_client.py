"""
Unit tests for the HTTP memory search client.
"""

import json

import httpx
import pytest

from app.clients.memory_search_client import HttpMemorySearchClient
from app.exceptions import UpstreamServiceError


def _client_for(handler) -> HttpMemorySearchClient:
    transport = httpx.MockTransport(handler)
    return HttpMemorySearchClient("http://backend:5001/", client=httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
async def test_posts_query_and_parses_results():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "success": True,
                "results": [
                    {
                        "classification": "skill",
                        "description": "Built a distributed cache",
                        "sourceFile": "resume.md",
                        "createdAt": "2025-01-01T00:00:00+00:00",
                        "score": 0.83,
                    }
                ],
            },
        )

    client = _client_for(handler)
    results = await client.search("distributed systems", limit=3)
    await client.aclose()

    assert seen["url"] == "http://backend:5001/api/search-memory"
    assert seen["body"] == {"query": "distributed systems", "limit": 3}
    assert results[0].description == "Built a distributed cache"
    assert results[0].score == pytest.approx(0.83)


@pytest.mark.asyncio
async def test_error_status_raises():
    client = _client_for(lambda request: httpx.Response(500, json={"success": False, "error": "db down"}))

    with pytest.raises(UpstreamServiceError, match="db down"):
        await client.search("x")


@pytest.mark.asyncio
async def test_unsuccessful_envelope_raises():
    client = _client_for(lambda request: httpx.Response(200, json={"success": False, "error": "Search failed"}))

    with pytest.raises(UpstreamServiceError, match="Search failed"):
        await client.search("x")


@pytest.mark.asyncio
async def test_non_json_response_raises():
    client = _client_for(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(UpstreamServiceError):
        await client.search("x")


@pytest.mark.asyncio
async def test_connection_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client_for(handler)

    with pytest.raises(UpstreamServiceError):
        await client.search("x")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[1, 2], "x", None])
async def test_non_object_json_raises(body):
    client = _client_for(lambda request: httpx.Response(200, json=body))

    with pytest.raises(UpstreamServiceError, match="unexpected response body"):
        await client.search("x")
