"""
Post endpoints - RESTful resource (GET/POST/PUT/DELETE) plus full-text search.
Design: Thin controller; each route is one repository call, except PUT (read-modify-write).
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from posts_api.api.streaming import stream_json_array
from posts_api.core.dependencies import PostRepo
from posts_api.schemas.post import Post, PostUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")


@router.get("", response_model=list[Post])
async def list_posts(repo: PostRepo):
    """All posts, streamed as a JSON array. No pagination."""
    return await stream_json_array(repo.find_all())


@router.post("", response_model=Post)
async def create_post(repo: PostRepo, data: Post):
    """Insert a post (or overwrite, when the body carries an id). Returns it with its id."""
    post = await repo.save(data)
    logger.info("Saved post id=%s", post.id)
    return post


@router.get("/search/title/{term}", response_model=list[Post])
async def search_title(repo: PostRepo, term: str):
    """Match `term` against titles."""
    return await stream_json_array(repo.find_by_title(term))


@router.get("/search/content/{term}", response_model=list[Post])
async def search_content(repo: PostRepo, term: str):
    """Match `term` against content."""
    return await stream_json_array(repo.find_by_content(term))


@router.get("/search/{term}", response_model=list[Post])
async def search(repo: PostRepo, term: str):
    """Match `term` across every indexed text field."""
    return await stream_json_array(repo.find_by_query(term))


@router.get("/{post_id}", response_model=Post)
async def get_post(repo: PostRepo, post_id: str):
    post = await repo.find_by_id(post_id)
    if not post:
        raise _not_found()
    return post


@router.put("/{post_id}", response_model=Post)
async def update_post(repo: PostRepo, post_id: str, data: PostUpdate):
    """Replace title and content of an existing post. The path id is authoritative."""
    post = await repo.find_by_id(post_id)
    if not post:
        raise _not_found()
    post = post.model_copy(update={"title": data.title, "content": data.content})
    return await repo.save(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(repo: PostRepo, post_id: str):
    """Delete a post. Idempotent: an unknown id is not an error."""
    deleted = await repo.delete_by_id(post_id)
    if not deleted:
        logger.debug("Delete of unknown post id=%s", post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
