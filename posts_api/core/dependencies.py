"""
FastAPI dependencies - injection for the document store and repositories (SOLID: Dependency Inversion).
Tests override get_document_store to run without Elasticsearch.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import Depends

from posts_api.config import get_settings
from posts_api.repositories.post_repository import PostRepository
from posts_api.search.document_store import DocumentStore, ElasticsearchDocumentStore, store_errors
from posts_api.search.elasticsearch_client import ensure_posts_index, get_elasticsearch, posts_index_ready

settings = get_settings()


def build_document_store(es: AsyncElasticsearch) -> ElasticsearchDocumentStore:
    """Store over the configured posts index. Shared by request handling, lifespan and scripts."""
    return ElasticsearchDocumentStore(
        es,
        settings.posts_index,
        refresh=settings.elasticsearch_refresh,
        page_size=settings.scan_page_size,
    )


async def get_document_store(
    es: Annotated[AsyncElasticsearch, Depends(get_elasticsearch)],
) -> DocumentStore:
    """Store for one request. Creates the posts index first if startup could not,
    so writes never land in an index Elasticsearch auto-creates without our mapping."""
    if not posts_index_ready():
        with store_errors("ensure_posts_index"):
            await ensure_posts_index(es)
    return build_document_store(es)


async def get_post_repository(
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> PostRepository:
    return PostRepository(store)


Store = Annotated[DocumentStore, Depends(get_document_store)]
PostRepo = Annotated[PostRepository, Depends(get_post_repository)]
