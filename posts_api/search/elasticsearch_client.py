"""
Elasticsearch client - the document store behind the posts API.
Client lifecycle (one shared async client per process) and posts index management.
"""

import logging
from urllib.parse import urlparse

from elasticsearch import ApiError, AsyncElasticsearch, BadRequestError

from posts_api.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_es_client: AsyncElasticsearch | None = None
# Set once the posts index is known to exist with our mapping
_posts_index_ready = False


def _es_client_options() -> dict:
    """Build Elasticsearch client options from settings (supports HTTPS + basic auth in URL)."""
    url = settings.elasticsearch_url
    basic_auth = None
    parsed = urlparse(url)
    if parsed.username and parsed.password:
        basic_auth = (parsed.username, parsed.password)
        # Strip credentials from the host; the client takes them separately
        netloc = parsed.hostname or ""
        if parsed.port:
            netloc += f":{parsed.port}"
        url = f"{parsed.scheme}://{netloc}"
    opts = {
        "hosts": [url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": settings.elasticsearch_request_timeout,
    }
    if basic_auth:
        opts["basic_auth"] = basic_auth
    return opts


async def get_elasticsearch() -> AsyncElasticsearch:
    """Get the shared Elasticsearch client. Dependency injection for tests."""
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


async def close_elasticsearch() -> None:
    """Close the shared client on shutdown."""
    global _es_client
    if _es_client is not None:
        await _es_client.close()
        _es_client = None


def posts_index_mappings() -> dict:
    """Mapping for the posts index. fielddata lets title/content back aggregations."""
    text_field = {"type": "text", "store": True, "fielddata": True}
    return {
        "properties": {
            "title": dict(text_field),
            "content": dict(text_field),
        }
    }


def error_type(e: ApiError) -> str:
    """Elasticsearch error type of an API error, e.g. "index_not_found_exception"."""
    error = e.body.get("error") if isinstance(e.body, dict) else None
    if isinstance(error, dict) and "type" in error:
        return error["type"]
    return e.message


def posts_index_ready() -> bool:
    """True once this process has seen the posts index exist (or created it)."""
    return _posts_index_ready


async def ensure_posts_index(es: AsyncElasticsearch | None = None) -> bool:
    """Create the posts index if missing. Single-node: 0 replicas. Returns True when created."""
    global _posts_index_ready
    es = es or await get_elasticsearch()
    index = settings.posts_index
    if await es.indices.exists(index=index):
        _posts_index_ready = True
        return False
    try:
        await es.indices.create(
            index=index,
            settings={"index": {"number_of_replicas": 0}},
            mappings=posts_index_mappings(),
        )
    except BadRequestError as e:
        # Another request or worker created it between exists and create
        if error_type(e) != "resource_already_exists_exception":
            raise
        _posts_index_ready = True
        return False
    _posts_index_ready = True
    logger.info("Created index %r", index)
    return True


async def delete_posts_index(es: AsyncElasticsearch | None = None) -> bool:
    """Drop the posts index. Returns False when it did not exist."""
    global _posts_index_ready
    es = es or await get_elasticsearch()
    index = settings.posts_index
    _posts_index_ready = False
    if not await es.indices.exists(index=index):
        return False
    await es.indices.delete(index=index)
    logger.info("Deleted index %r", index)
    return True
