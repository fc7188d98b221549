"""
Document store abstraction - the capability set repositories build on.
Challenge: Keep Elasticsearch specifics (ids, refresh, scroll, transport errors) out of repositories.
Design: Protocol for the capabilities; Elasticsearch implementation translates failures to StoreUnavailable.
"""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from elasticsearch import ApiError, AsyncElasticsearch, TransportError
from elasticsearch.helpers import async_scan

from posts_api.core.exceptions import StoreUnavailable
from posts_api.search.elasticsearch_client import error_type

logger = logging.getLogger(__name__)

# (document id, source) pair yielded by queries
Hit = tuple[str, dict[str, Any]]


class DocumentStore(Protocol):
    """What a repository may ask of the store. Absence is a return value, not an error."""

    async def save(self, doc_id: str | None, document: dict[str, Any]) -> str: ...

    async def find_by_id(self, doc_id: str) -> dict[str, Any] | None: ...

    async def delete_by_id(self, doc_id: str) -> bool: ...

    async def delete_all(self) -> None: ...

    def find_all(self) -> AsyncIterator[Hit]: ...

    def raw_query(self, query: dict[str, Any]) -> AsyncIterator[Hit]: ...

    async def ping(self) -> bool: ...


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Map transport failures and server-side errors to StoreUnavailable."""
    try:
        yield
    except TransportError as e:
        logger.warning("%s failed: store unreachable: %s", operation, e)
        raise StoreUnavailable(operation, str(e)) from e
    except ApiError as e:
        if e.meta.status < 500:
            raise
        logger.warning("%s failed: store returned %s: %s", operation, e.meta.status, e)
        raise StoreUnavailable(operation, str(e)) from e


def _index_missing(e: ApiError) -> bool:
    return e.meta.status == 404 and error_type(e) == "index_not_found_exception"


class ElasticsearchDocumentStore:
    """DocumentStore over one Elasticsearch index."""

    def __init__(
        self,
        client: AsyncElasticsearch,
        index: str,
        *,
        refresh: bool = True,
        page_size: int = 500,
    ):
        self.client = client
        self.index = index
        self.refresh = refresh
        self.page_size = page_size

    async def save(self, doc_id: str | None, document: dict[str, Any]) -> str:
        """Index a document. Without an id Elasticsearch assigns one; with an id it overwrites."""
        with store_errors("save"):
            response = await self.client.index(
                index=self.index,
                id=doc_id or None,
                document=document,
                refresh="wait_for" if self.refresh else False,
            )
        return response["_id"]

    async def find_by_id(self, doc_id: str) -> dict[str, Any] | None:
        with store_errors("find_by_id"):
            response = await self.client.options(ignore_status=404).get(index=self.index, id=doc_id)
        if not response.get("found"):
            return None
        return response["_source"]

    async def delete_by_id(self, doc_id: str) -> bool:
        with store_errors("delete_by_id"):
            response = await self.client.options(ignore_status=404).delete(
                index=self.index,
                id=doc_id,
                refresh="wait_for" if self.refresh else False,
            )
        return response.get("result") == "deleted"

    async def delete_all(self) -> None:
        """Remove every document but keep the index and its mapping. A missing index is already empty."""
        try:
            with store_errors("delete_all"):
                response = await self.client.delete_by_query(
                    index=self.index,
                    query={"match_all": {}},
                    conflicts="proceed",
                    refresh=self.refresh,
                )
        except ApiError as e:
            if not _index_missing(e):
                raise
            logger.warning("delete_all: index %r does not exist, nothing to delete", self.index)
            return
        logger.info("Deleted %s documents from %r", response.get("deleted", 0), self.index)

    def find_all(self) -> AsyncIterator[Hit]:
        return self.raw_query({"match_all": {}})

    async def raw_query(self, query: dict[str, Any]) -> AsyncIterator[Hit]:
        """Run a query as given and yield hits page by page (scroll), without buffering the full set.

        A missing index yields no hits.
        """
        try:
            with store_errors("raw_query"):
                async for hit in async_scan(
                    self.client,
                    index=self.index,
                    query={"query": query},
                    size=self.page_size,
                ):
                    yield hit["_id"], hit.get("_source", {})
        except ApiError as e:
            if not _index_missing(e):
                raise
            logger.warning("raw_query: index %r does not exist, returning no hits", self.index)

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except TransportError as e:
            logger.warning("ping failed: %s", e)
            return False
