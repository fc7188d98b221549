"""
Post repository - CRUD plus the three full-text searches the API exposes.
Each search sends one fixed query template with the term as its only parameter.
"""

from collections.abc import AsyncIterator
from typing import Any

from posts_api.repositories.base_repository import BaseRepository
from posts_api.schemas.post import Post
from posts_api.search.document_store import DocumentStore


def title_match_query(term: str) -> dict[str, Any]:
    """Full-text match on title only."""
    return {"match": {"title": {"query": term}}}


def content_match_query(term: str) -> dict[str, Any]:
    """Full-text match on content only."""
    return {"match": {"content": {"query": term}}}


def multi_match_query(term: str) -> dict[str, Any]:
    """Full-text match across all indexed text fields."""
    return {"multi_match": {"query": term}}


class PostRepository(BaseRepository[Post]):
    """Post-specific queries on top of base CRUD."""

    def __init__(self, store: DocumentStore):
        super().__init__(store, Post)

    def find_by_title(self, term: str) -> AsyncIterator[Post]:
        return self._search(title_match_query(term))

    def find_by_content(self, term: str) -> AsyncIterator[Post]:
        return self._search(content_match_query(term))

    def find_by_query(self, term: str) -> AsyncIterator[Post]:
        return self._search(multi_match_query(term))
