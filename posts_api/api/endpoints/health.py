"""
Health checks - for load balancers, Kubernetes, and monitoring.
Fast liveness; readiness pings the document store.
"""

from fastapi import APIRouter, HTTPException, status

from posts_api.config import get_settings
from posts_api.core.dependencies import Store

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(store: Store):
    """Readiness: can the document store answer?"""
    if not await store.ping():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Document store unavailable",
        )
    return {"status": "ready"}
