"""
Pytest configuration and shared fixtures.

Fakes stand in for the embedding service, the vector datastore and the
generative classifier so that no test touches the network.
"""

import math
import re
import zlib
from typing import List

import pytest
from fastapi.testclient import TestClient

from app import create_app
from app.llm.base import Embedder, QuestionClassifier
from app.models.memory import SearchResult
from app.services.memory_service import MemoryService
from app.stores.base import MemoryStore

EMBEDDING_DIM = 256


# ============================================================================
# Fakes
# ============================================================================


class FakeEmbedder(Embedder):
    """Bag-of-words embedding: one hashed dimension per lower-cased word."""

    def __init__(self, dim: int = EMBEDDING_DIM):
        self.dim = dim
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        vector = [0.0] * self.dim
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dim] += 1.0
        return vector


class InMemoryMemoryStore(MemoryStore):
    """Brute-force cosine search scored like Atlas: (1 + cosine) / 2."""

    def __init__(self):
        self.documents: List[dict] = []
        self.closed = False

    def insert(self, document: dict) -> None:
        self.documents.append(dict(document))

    def vector_search(self, query_vector: List[float], limit: int) -> List[dict]:
        scored = []
        for doc in self.documents:
            score = (1.0 + _cosine(query_vector, doc["embedding"])) / 2.0
            scored.append(
                {
                    "classification": doc.get("classification"),
                    "description": doc.get("description"),
                    "sourceFile": doc.get("sourceFile"),
                    "createdAt": doc.get("createdAt"),
                    "score": score,
                }
            )
        scored.sort(key=lambda row: row["score"], reverse=True)
        return scored[:limit]

    def close(self) -> None:
        self.closed = True


class FakeClassifier(QuestionClassifier):
    """Answers from a fixed reply and records every prompt it was asked."""

    def __init__(self, reply: str = "yes"):
        self.reply = reply
        self.calls: List[str] = []

    async def ask(self, text: str) -> str:
        self.calls.append(text)
        return self.reply


class FakeSearcher:
    """Returns canned results for any query."""

    def __init__(self, scores=(0.9, 0.6, 0.3)):
        self.results = [
            SearchResult(
                classification="skill",
                description=f"memory {i}",
                sourceFile="notes.md",
                createdAt="2025-01-01T00:00:00+00:00",
                score=score,
            )
            for i, score in enumerate(scores)
        ]
        self.calls: List[tuple] = []

    async def search(self, query: str, limit: int = 3) -> List[SearchResult]:
        self.calls.append((query, limit))
        return list(self.results)


def _cosine(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore()


@pytest.fixture
def memory_service(embedder, store) -> MemoryService:
    return MemoryService(embedder=embedder, store=store)


@pytest.fixture
def client(memory_service) -> TestClient:
    """API client wired to the in-memory service (lifespan not started)."""
    return TestClient(create_app(memory_service=memory_service))


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def searcher() -> FakeSearcher:
    return FakeSearcher()
