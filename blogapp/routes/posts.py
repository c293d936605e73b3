# blogapp/routes/posts.py
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blogapp.cache import QueryCache, get_cache
from blogapp.core.deps import get_blog_service, get_session_context
from blogapp.core.session import SessionContext
from blogapp.database import get_session_factory
from blogapp.schemas.post import PostCreate, PostRead, PostUpdate
from blogapp.services.blog import BlogService, increment_view_count

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[PostRead])
async def list_posts(
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=100),
    service: BlogService = Depends(get_blog_service),
):
    return await service.list_posts(skip=skip, limit=limit)


@router.get("/{post_id}", response_model=PostRead)
async def get_post(
    post_id: int,
    background_tasks: BackgroundTasks,
    service: BlogService = Depends(get_blog_service),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    cache: QueryCache = Depends(get_cache),
):
    post = await service.get_post(post_id)
    background_tasks.add_task(increment_view_count, post_id, session_factory, cache)
    return post


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    session: SessionContext = Depends(get_session_context),
    service: BlogService = Depends(get_blog_service),
):
    return await service.create_post(session, data)


@router.patch("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: int,
    changes: PostUpdate,
    session: SessionContext = Depends(get_session_context),
    service: BlogService = Depends(get_blog_service),
):
    return await service.update_post(session, post_id, changes)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    session: SessionContext = Depends(get_session_context),
    service: BlogService = Depends(get_blog_service),
):
    await service.delete_post(session, post_id)
