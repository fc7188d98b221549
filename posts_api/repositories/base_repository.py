"""
Base repository - generic CRUD over a document store (SOLID: Interface Segregation, Dependency Inversion).
Challenge: Consistent data access, testability via an in-memory store.
"""

from collections.abc import AsyncIterator
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from posts_api.search.document_store import DocumentStore

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. The model's `id` field is the document key, not part of the source."""

    def __init__(self, store: DocumentStore, model: type[ModelType]):
        self.store = store
        self.model = model

    def _to_model(self, doc_id: str, source: dict[str, Any]) -> ModelType:
        return self.model(**{**source, "id": doc_id})

    def _to_document(self, entity: ModelType) -> dict[str, Any]:
        return entity.model_dump(exclude={"id"})

    async def find_all(self) -> AsyncIterator[ModelType]:
        """Every document in the index, engine-default order."""
        async for doc_id, source in self.store.find_all():
            yield self._to_model(doc_id, source)

    async def save(self, entity: ModelType) -> ModelType:
        """Insert when the entity has no id, otherwise overwrite. Returns the entity with its id."""
        doc_id = await self.store.save(entity.id or None, self._to_document(entity))
        return entity.model_copy(update={"id": doc_id})

    async def find_by_id(self, id: str) -> ModelType | None:
        source = await self.store.find_by_id(id)
        if source is None:
            return None
        return self._to_model(id, source)

    async def delete_by_id(self, id: str) -> bool:
        """False when nothing was there to delete."""
        return await self.store.delete_by_id(id)

    async def delete_all(self) -> None:
        """Clear the whole index. Bootstrap/reset only."""
        await self.store.delete_all()

    async def _search(self, query: dict[str, Any]) -> AsyncIterator[ModelType]:
        async for doc_id, source in self.store.raw_query(query):
            yield self._to_model(doc_id, source)
