# blogapp/services/blog.py
"""Cached reads and invalidating writes over the data-access layer.

Each read is served through ``QueryCache`` under a key derived from the
resource identity. Each successful mutation deletes every key whose value it
may have changed; a failed mutation raises before any key is touched.
"""
import logging

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blogapp.cache import (
    ANALYTICS_KEY,
    POST_LIST_PATTERN,
    QueryCache,
    comments_key,
    post_key,
    post_list_key,
)
from blogapp.core.errors import BlogError
from blogapp.core.session import SessionContext
from blogapp.crud.analytics import analytics as analytics_crud
from blogapp.crud.comment import comment as comment_crud
from blogapp.crud.post import post as post_crud
from blogapp.crud.user import user as user_crud
from blogapp.schemas.analytics import AnalyticsRead
from blogapp.schemas.comment import CommentRead
from blogapp.schemas.post import PostCreate, PostRead, PostUpdate
from blogapp.schemas.user import ProfileUpdate, UserRead

logger = logging.getLogger(__name__)

post_list_adapter = TypeAdapter(list[PostRead])
comment_list_adapter = TypeAdapter(list[CommentRead])


class BlogService:
    def __init__(self, db: AsyncSession, cache: QueryCache):
        self.db = db
        self.cache = cache

    # --- posts ---

    async def list_posts(self, skip: int = 0, limit: int | None = None) -> list[PostRead]:
        async def fetch():
            posts = await post_crud.list_posts(self.db, skip=skip, limit=limit)
            return post_list_adapter.dump_python(posts, mode="json")

        data = await self.cache.get_or_fetch(post_list_key(skip, limit), fetch)
        return post_list_adapter.validate_python(data)

    async def get_post(self, post_id: int) -> PostRead:
        async def fetch():
            return (await post_crud.get_post(self.db, post_id)).model_dump(mode="json")

        data = await self.cache.get_or_fetch(post_key(post_id), fetch)
        return PostRead.model_validate(data)

    async def create_post(self, session: SessionContext, data: PostCreate) -> PostRead:
        post = await post_crud.create_post(self.db, session, data)
        await self.cache.invalidate(POST_LIST_PATTERN, ANALYTICS_KEY)
        return post

    async def update_post(self, session: SessionContext, post_id: int, changes: PostUpdate) -> PostRead:
        post = await post_crud.update_post(self.db, session, post_id, changes)
        await self.cache.invalidate(POST_LIST_PATTERN, post_key(post_id))
        return post

    async def delete_post(self, session: SessionContext, post_id: int) -> None:
        await post_crud.delete_post(self.db, session, post_id)
        await self.cache.invalidate(
            POST_LIST_PATTERN,
            post_key(post_id),
            comments_key(post_id),
            ANALYTICS_KEY,
        )

    # --- comments ---

    async def list_comments(self, post_id: int) -> list[CommentRead]:
        async def fetch():
            comments = await comment_crud.list_comments(self.db, post_id)
            return comment_list_adapter.dump_python(comments, mode="json")

        data = await self.cache.get_or_fetch(comments_key(post_id), fetch)
        return comment_list_adapter.validate_python(data)

    async def create_comment(self, session: SessionContext, post_id: int, content: str) -> CommentRead:
        comment = await comment_crud.create_comment(self.db, session, post_id, content)
        # the list and the detail view both carry the comment count
        await self.cache.invalidate(
            comments_key(post_id),
            POST_LIST_PATTERN,
            post_key(post_id),
            ANALYTICS_KEY,
        )
        return comment

    # --- profiles ---

    async def get_profile(self, user_id: int) -> UserRead:
        return await user_crud.get_profile(self.db, user_id)

    async def update_profile(self, session: SessionContext, user_id: int, changes: ProfileUpdate) -> UserRead:
        profile = await user_crud.update_profile(self.db, session, user_id, changes)
        # authors are embedded in every post and comment view model
        await self.cache.invalidate(POST_LIST_PATTERN, "post:*", "comments:*")
        return profile

    # --- analytics ---

    async def get_analytics(self) -> AnalyticsRead:
        async def fetch():
            return (await analytics_crud.refresh_snapshot(self.db)).model_dump(mode="json")

        data = await self.cache.get_or_fetch(ANALYTICS_KEY, fetch)
        return AnalyticsRead.model_validate(data)


async def increment_view_count(
    post_id: int,
    session_factory: async_sessionmaker[AsyncSession],
    cache: QueryCache,
) -> None:
    """Add one view to a post. Runs after the response is sent; never raises."""
    try:
        async with session_factory() as db:
            await post_crud.increment_views(db, post_id)
        await cache.invalidate(post_key(post_id), ANALYTICS_KEY)
    except (BlogError, OSError):
        logger.warning("could not record a view for post %s", post_id, exc_info=True)
