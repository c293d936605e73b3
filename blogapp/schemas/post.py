# blogapp/schemas/post.py
from datetime import datetime

from pydantic import BaseModel, Field

from blogapp.schemas.user import UserRead


class PostCreate(BaseModel):
    title: str
    content: str
    excerpt: str = ""
    tags: list[str] = Field(default_factory=list)
    image: str | None = None


class PostUpdate(BaseModel):
    """Partial update; fields left unset keep their stored value."""
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    tags: list[str] | None = None
    image: str | None = None


class PostRead(BaseModel):
    id: int
    title: str
    content: str
    excerpt: str
    author_id: int
    author: UserRead
    tags: list[str] = []
    image: str | None = None
    created_at: datetime
    updated_at: datetime
    views: int = 0
    comments_count: int = 0  # live count from the comments table
