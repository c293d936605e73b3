# blogapp/crud/post.py
import logging
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.config import get_settings
from blogapp.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    store_call,
)
from blogapp.core.session import SessionContext
from blogapp.crud.user import to_user
from blogapp.models.comment import Comment
from blogapp.models.post import BlogPost
from blogapp.models.user import User
from blogapp.schemas.post import PostCreate, PostRead, PostUpdate

logger = logging.getLogger(__name__)


def to_post(row: BlogPost, author: User, comments_count: int) -> PostRead:
    """Assemble the post view model from a blog_posts row, its author row and a comment count."""
    return PostRead(
        id=row.id,
        title=row.title,
        content=row.content,
        excerpt=row.excerpt or "",
        author_id=row.author_id,
        author=to_user(author),
        tags=list(row.tags or []),
        image=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at or row.created_at,
        views=row.views or 0,
        comments_count=comments_count or 0,
    )


def make_excerpt(content: str, length: int | None = None) -> str:
    """First paragraph of the content, cut to ``length`` characters."""
    if length is None:
        length = get_settings().EXCERPT_LENGTH
    first_paragraph = content.strip().split("\n\n")[0]
    if len(first_paragraph) > length:
        return first_paragraph[:length] + "..."
    return first_paragraph


def clean_tags(tags: list[str] | None) -> list[str]:
    seen = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value


class CRUDPost:
    @store_call
    async def list_posts(self, db: AsyncSession, skip: int = 0, limit: int | None = None) -> list[PostRead]:
        comment_count_subq = (
            select(Comment.post_id, func.count(Comment.id).label("count"))
            .group_by(Comment.post_id)
            .subquery()
        )
        stmt = (
            select(BlogPost, User, func.coalesce(comment_count_subq.c.count, 0))
            .join(User, BlogPost.author_id == User.id)
            # LEFT JOIN so posts without comments stay in the list
            .outerjoin(comment_count_subq, BlogPost.id == comment_count_subq.c.post_id)
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
            .offset(skip)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await db.execute(stmt)
        return [to_post(post, author, count) for post, author, count in result.all()]

    @store_call
    async def get_post(self, db: AsyncSession, post_id: int) -> PostRead:
        comment_count = (
            select(func.count(Comment.id))
            .where(Comment.post_id == BlogPost.id)
            .scalar_subquery()
        )
        stmt = (
            select(BlogPost, User, comment_count)
            .join(User, BlogPost.author_id == User.id)
            .where(BlogPost.id == post_id)
            .execution_options(populate_existing=True)
        )
        row = (await db.execute(stmt)).first()
        if row is None:
            raise NotFoundError("Post not found")
        post, author, count = row
        return to_post(post, author, count)

    @store_call
    async def create_post(self, db: AsyncSession, session: SessionContext, data: PostCreate) -> PostRead:
        author = session.require_user()
        title = _require_text(data.title, "Title").strip()
        content = _require_text(data.content, "Content")
        excerpt = data.excerpt.strip() or make_excerpt(content)

        now = datetime.utcnow()
        row = BlogPost(
            title=title,
            content=content,
            excerpt=excerpt,
            author_id=author.id,
            tags=clean_tags(data.tags),
            image_url=data.image or None,
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        await db.commit()
        await db.refresh(row)
        logger.info("user %s created post %s", author.id, row.id)
        return await self.get_post(db, row.id)

    async def _get_owned(self, db: AsyncSession, session: SessionContext, post_id: int) -> BlogPost:
        session.require_user()
        row = await db.get(BlogPost, post_id, populate_existing=True)
        if row is None:
            raise NotFoundError("Post not found")
        if not session.can_modify(row.author_id):
            raise PermissionDeniedError()
        return row

    @store_call
    async def update_post(
        self, db: AsyncSession, session: SessionContext, post_id: int, changes: PostUpdate
    ) -> PostRead:
        row = await self._get_owned(db, session, post_id)
        data = changes.model_dump(exclude_unset=True)

        if "title" in data:
            row.title = _require_text(data["title"], "Title").strip()
        if "content" in data:
            row.content = _require_text(data["content"], "Content")
        if "excerpt" in data:
            row.excerpt = (data["excerpt"] or "").strip() or make_excerpt(row.content)
        if "tags" in data:
            row.tags = clean_tags(data["tags"])
        if "image" in data:
            row.image_url = data["image"] or None
        row.updated_at = datetime.utcnow()

        await db.commit()
        logger.info("user %s updated post %s", session.user.id, post_id)
        return await self.get_post(db, post_id)

    @store_call
    async def delete_post(self, db: AsyncSession, session: SessionContext, post_id: int) -> None:
        await self._get_owned(db, session, post_id)
        await db.execute(delete(Comment).where(Comment.post_id == post_id))
        await db.execute(delete(BlogPost).where(BlogPost.id == post_id))
        await db.commit()
        logger.info("user %s deleted post %s", session.user.id, post_id)

    @store_call
    async def increment_views(self, db: AsyncSession, post_id: int) -> None:
        result = await db.execute(
            update(BlogPost)
            .where(BlogPost.id == post_id)
            .values(views=BlogPost.views + 1)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError("Post not found")
        await db.commit()

post = CRUDPost()
