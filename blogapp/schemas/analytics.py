# blogapp/schemas/analytics.py
from datetime import datetime

from pydantic import BaseModel

class AnalyticsRead(BaseModel):
    total_users: int = 0
    total_blog_posts: int = 0
    total_comments: int = 0
    total_views: int = 0
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
