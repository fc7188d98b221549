# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from posts_api.repositories.post_repository import PostRepository

__all__ = ["PostRepository"]
