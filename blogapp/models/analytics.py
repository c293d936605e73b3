# blogapp/models/analytics.py
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column
from blogapp.database import Base

class Analytics(Base):
    """Single-row snapshot of site-wide counters."""
    __tablename__ = "analytics"

    id: Mapped[int] = mapped_column(primary_key=True)
    total_users: Mapped[int] = mapped_column(default=0)
    total_blog_posts: Mapped[int] = mapped_column(default=0)
    total_comments: Mapped[int] = mapped_column(default=0)
    total_views: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
