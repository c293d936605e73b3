# blogapp/schemas/comment.py
from datetime import datetime

from pydantic import BaseModel

from blogapp.schemas.user import UserRead


class CommentCreate(BaseModel):
    content: str


class CommentRead(BaseModel):
    id: int
    post_id: int
    author_id: int
    author: UserRead
    content: str
    created_at: datetime
