"""Post request/response schemas - REST API contract and stored document shape."""

from pydantic import BaseModel


class PostBase(BaseModel):
    title: str = ""
    content: str = ""


class PostUpdate(PostBase):
    """PUT body. Any id in the body is ignored; the path id wins."""


class Post(PostBase):
    # None until the store assigns one on first save
    id: str | None = None
