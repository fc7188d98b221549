"""
FastAPI application entry point.
Mounts routes and middleware (Prometheus), maps store failures to 503,
and prepares the posts index (plus optional seed data) on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from posts_api.api.router import api_router
from posts_api.config import get_settings
from posts_api.core.dependencies import build_document_store
from posts_api.core.exceptions import StoreUnavailable
from posts_api.repositories.post_repository import PostRepository
from posts_api.search.elasticsearch_client import close_elasticsearch, ensure_posts_index, get_elasticsearch
from posts_api.seed import seed_posts

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the posts index, seed when configured. Shutdown: close the ES client."""
    settings = get_settings()
    es = await get_elasticsearch()
    try:
        await ensure_posts_index(es)
        if settings.seed_on_startup:
            await seed_posts(PostRepository(build_document_store(es)))
    except Exception as e:
        # ES may be down; the app still starts and requests answer 503 until it is back
        logger.warning("Startup index preparation failed: %s", e)
    yield
    await close_elasticsearch()


async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Document store unavailable"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        description="Blog post CRUD and full-text search backed by Elasticsearch.",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    app.include_router(api_router)

    return app


app = create_app()
