"""
Pytest fixtures - in-memory document store, API client.
Isolated tests; no Elasticsearch needed.
"""

import itertools
import re
from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from posts_api.core.dependencies import get_document_store
from posts_api.core.exceptions import StoreUnavailable
from posts_api.main import app
from posts_api.repositories.post_repository import PostRepository
from posts_api.search import elasticsearch_client

TEXT_FIELDS = ("title", "content")


def _tokens(text: str) -> set[str]:
    return set(re.findall(r"\w+", (text or "").lower()))


def _matches(source: dict[str, Any], fields: tuple[str, ...], term: str) -> bool:
    wanted = _tokens(term)
    return any(wanted & _tokens(source.get(field, "")) for field in fields)


class InMemoryDocumentStore:
    """Dict-backed stand-in for Elasticsearch. Understands match, multi_match and match_all."""

    def __init__(self):
        self.documents: dict[str, dict[str, Any]] = {}
        self.queries: list[dict[str, Any]] = []
        self._ids = itertools.count(1)

    async def save(self, doc_id: str | None, document: dict[str, Any]) -> str:
        doc_id = doc_id or f"doc-{next(self._ids)}"
        self.documents[doc_id] = dict(document)
        return doc_id

    async def find_by_id(self, doc_id: str) -> dict[str, Any] | None:
        source = self.documents.get(doc_id)
        return dict(source) if source is not None else None

    async def delete_by_id(self, doc_id: str) -> bool:
        return self.documents.pop(doc_id, None) is not None

    async def delete_all(self) -> None:
        self.documents.clear()

    def find_all(self) -> AsyncIterator[tuple[str, dict[str, Any]]]:
        return self.raw_query({"match_all": {}})

    async def raw_query(self, query: dict[str, Any]) -> AsyncIterator[tuple[str, dict[str, Any]]]:
        self.queries.append(query)
        for doc_id, source in list(self.documents.items()):
            if self._accepts(query, source):
                yield doc_id, dict(source)

    def _accepts(self, query: dict[str, Any], source: dict[str, Any]) -> bool:
        if "match_all" in query:
            return True
        if "match" in query:
            ((field, spec),) = query["match"].items()
            return _matches(source, (field,), spec["query"])
        if "multi_match" in query:
            spec = query["multi_match"]
            return _matches(source, tuple(spec.get("fields", TEXT_FIELDS)), spec["query"])
        raise ValueError(f"unsupported query: {query}")

    async def ping(self) -> bool:
        return True


class UnavailableDocumentStore:
    """Every call fails the way the Elasticsearch store does when the cluster is down."""

    async def save(self, doc_id, document):
        raise StoreUnavailable("save", "connection refused")

    async def find_by_id(self, doc_id):
        raise StoreUnavailable("find_by_id", "connection refused")

    async def delete_by_id(self, doc_id):
        raise StoreUnavailable("delete_by_id", "connection refused")

    async def delete_all(self):
        raise StoreUnavailable("delete_all", "connection refused")

    def find_all(self):
        return self.raw_query({"match_all": {}})

    async def raw_query(self, query):
        raise StoreUnavailable("raw_query", "connection refused")
        yield  # pragma: no cover

    async def ping(self) -> bool:
        return False


@pytest.fixture(autouse=True)
def posts_index_not_prepared(monkeypatch):
    """Each test starts as if the posts index has not been checked yet."""
    monkeypatch.setattr(elasticsearch_client, "_posts_index_ready", False)


@pytest.fixture
def api_error():
    """Build an Elasticsearch API error with a given status and error type."""

    def make(cls, status: int, error_type: str):
        body = {
            "error": {"type": error_type, "root_cause": [{"type": error_type, "reason": error_type}]},
            "status": status,
        }
        return cls(error_type, meta=MagicMock(status=status), body=body)

    return make


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def repo(store: InMemoryDocumentStore) -> PostRepository:
    return PostRepository(store)


async def _client_for(document_store) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_document_store] = lambda: document_store
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(store: InMemoryDocumentStore):
    async for ac in _client_for(store):
        yield ac


@pytest_asyncio.fixture
async def unavailable_client():
    async for ac in _client_for(UnavailableDocumentStore()):
        yield ac
