# blogapp/routes/users.py
from fastapi import APIRouter, Depends
from blogapp.core.deps import get_blog_service, get_session_context
from blogapp.core.session import SessionContext
from blogapp.schemas.user import ProfileUpdate, UserRead
from blogapp.services.blog import BlogService

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserRead)
async def read_users_me(session: SessionContext = Depends(get_session_context)):
    return session.require_user()

@router.get("/{user_id}", response_model=UserRead)
async def read_profile(user_id: int, service: BlogService = Depends(get_blog_service)):
    return await service.get_profile(user_id)

@router.patch("/{user_id}", response_model=UserRead)
async def update_profile(
    user_id: int,
    changes: ProfileUpdate,
    session: SessionContext = Depends(get_session_context),
    service: BlogService = Depends(get_blog_service),
):
    return await service.update_profile(session, user_id, changes)
