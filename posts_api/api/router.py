"""
API router - aggregates all endpoint modules (RESTful structure).
"""

from fastapi import APIRouter

from posts_api.api.endpoints import health, posts

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
