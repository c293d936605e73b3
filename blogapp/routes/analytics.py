# blogapp/routes/analytics.py
from fastapi import APIRouter, Depends

from blogapp.core.deps import get_blog_service
from blogapp.schemas.analytics import AnalyticsRead
from blogapp.services.blog import BlogService

router = APIRouter(prefix="/analytics", tags=["analytics"])

@router.get("", response_model=AnalyticsRead)
async def read_analytics(service: BlogService = Depends(get_blog_service)):
    return await service.get_analytics()
