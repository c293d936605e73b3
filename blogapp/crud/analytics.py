# blogapp/crud/analytics.py
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.errors import store_call
from blogapp.models.analytics import Analytics
from blogapp.models.comment import Comment
from blogapp.models.post import BlogPost
from blogapp.models.user import User
from blogapp.schemas.analytics import AnalyticsRead


class CRUDAnalytics:
    @store_call
    async def compute_totals(self, db: AsyncSession) -> dict:
        stmt = select(
            select(func.count(User.id)).scalar_subquery(),
            select(func.count(BlogPost.id)).scalar_subquery(),
            select(func.count(Comment.id)).scalar_subquery(),
            select(func.coalesce(func.sum(BlogPost.views), 0)).scalar_subquery(),
        )
        users, posts, comments, views = (await db.execute(stmt)).one()
        return {
            "total_users": users,
            "total_blog_posts": posts,
            "total_comments": comments,
            "total_views": views,
        }

    @store_call
    async def refresh_snapshot(self, db: AsyncSession) -> AnalyticsRead:
        totals = await self.compute_totals(db)
        row = (await db.execute(select(Analytics).limit(1))).scalar_one_or_none()
        if row is None:
            row = Analytics()
            db.add(row)
        for field, value in totals.items():
            setattr(row, field, value)
        row.updated_at = datetime.utcnow()
        await db.commit()
        await db.refresh(row)
        return AnalyticsRead.model_validate(row)

analytics = CRUDAnalytics()
