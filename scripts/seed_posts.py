#!/usr/bin/env python3
"""
Seed script: wipes the posts index and inserts placeholder posts directly in Elasticsearch.
Run when you want sample data without restarting the API in seed mode:
  python scripts/seed_posts.py
  python scripts/seed_posts.py --reset-index
  python scripts/seed_posts.py --title hello --title world

Reads ELASTICSEARCH_URL and POSTS_INDEX from .env (defaults http://localhost:9200, posts).
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from posts_api.core.dependencies import build_document_store
from posts_api.repositories.post_repository import PostRepository
from posts_api.search.elasticsearch_client import (
    close_elasticsearch,
    delete_posts_index,
    ensure_posts_index,
    get_elasticsearch,
)
from posts_api.seed import DEFAULT_TITLES, seed_posts


async def run(titles: list[str], reset_index: bool) -> None:
    es = await get_elasticsearch()
    try:
        if reset_index:
            if await delete_posts_index(es):
                print("Deleted posts index.")
        await ensure_posts_index(es)
        posts = await seed_posts(PostRepository(build_document_store(es)), titles)
        for post in posts:
            print(f"  {post.id}  {post.title!r}  {post.content!r}")
        print(f"Seeded {len(posts)} posts.")
    finally:
        await close_elasticsearch()


def main():
    ap = argparse.ArgumentParser(description="Reset the posts index to sample data")
    ap.add_argument("--title", action="append", dest="titles", help="Post title to seed (repeatable)")
    ap.add_argument("--reset-index", action="store_true", help="Drop and recreate the posts index first (re-applies the mapping)")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(run(args.titles or list(DEFAULT_TITLES), args.reset_index))


if __name__ == "__main__":
    main()
