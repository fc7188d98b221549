"""
Sample data bootstrap - wipes the posts index and inserts placeholder posts.
Only runs in seed mode (SEED_ON_STARTUP=true or scripts/seed_posts.py), never from a request.
"""

import asyncio
import logging
import random
from collections.abc import Iterable

from posts_api.repositories.post_repository import PostRepository
from posts_api.schemas.post import Post

logger = logging.getLogger(__name__)

DEFAULT_TITLES = ("post1", "post2")


async def seed_posts(repo: PostRepository, titles: Iterable[str] = DEFAULT_TITLES) -> list[Post]:
    """Delete every post, then save one post per title concurrently."""
    logger.info("start data initialization ...")
    await repo.delete_all()
    saved = await asyncio.gather(
        *(repo.save(Post(title=title, content=f"content of {random.random()}")) for title in titles)
    )
    for post in saved:
        logger.info("seeded post id=%s title=%r", post.id, post.title)
    logger.info("done initialization, %d posts", len(saved))
    return list(saved)
