# blogapp/crud/comment.py
import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.errors import NotFoundError, ValidationError, store_call
from blogapp.core.session import SessionContext
from blogapp.crud.user import to_user
from blogapp.models.comment import Comment
from blogapp.models.post import BlogPost
from blogapp.models.user import User
from blogapp.schemas.comment import CommentRead

logger = logging.getLogger(__name__)


def to_comment(row: Comment, author: User) -> CommentRead:
    return CommentRead(
        id=row.id,
        post_id=row.post_id,
        author_id=row.author_id,
        author=to_user(author),
        content=row.content,
        created_at=row.created_at,
    )


class CRUDComment:
    @store_call
    async def list_comments(self, db: AsyncSession, post_id: int) -> list[CommentRead]:
        stmt = (
            select(Comment, User)
            .join(User, Comment.author_id == User.id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return [to_comment(comment, author) for comment, author in result.all()]

    @store_call
    async def count_comments(self, db: AsyncSession, post_id: int) -> int:
        q = select(func.count(Comment.id)).where(Comment.post_id == post_id)
        return (await db.execute(q)).scalar_one()

    @store_call
    async def create_comment(
        self, db: AsyncSession, session: SessionContext, post_id: int, content: str
    ) -> CommentRead:
        author = session.require_user()
        if content is None or not content.strip():
            raise ValidationError("Comment cannot be empty")

        exists = await db.execute(select(BlogPost.id).where(BlogPost.id == post_id))
        if exists.scalar_one_or_none() is None:
            raise NotFoundError("Post not found")

        row = Comment(
            post_id=post_id,
            author_id=author.id,
            content=content.strip(),
            created_at=datetime.utcnow(),
        )
        db.add(row)
        await db.commit()
        await db.refresh(row)
        logger.info("user %s commented on post %s", author.id, post_id)

        author_row = await db.get(User, author.id)
        return to_comment(row, author_row)

comment = CRUDComment()
