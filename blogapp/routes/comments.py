# blogapp/routes/comments.py
from fastapi import APIRouter, Depends, status

from blogapp.core.deps import get_blog_service, get_session_context
from blogapp.core.session import SessionContext
from blogapp.schemas.comment import CommentCreate, CommentRead
from blogapp.services.blog import BlogService

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])


@router.get("", response_model=list[CommentRead])
async def list_comments(post_id: int, service: BlogService = Depends(get_blog_service)):
    return await service.list_comments(post_id)


@router.post("", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: int,
    data: CommentCreate,
    session: SessionContext = Depends(get_session_context),
    service: BlogService = Depends(get_blog_service),
):
    return await service.create_comment(session, post_id, data.content)
