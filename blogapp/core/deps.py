# blogapp/core/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError
from blogapp.cache import QueryCache, get_cache
from blogapp.database import get_db
from blogapp.crud.user import to_user, user as user_crud
from blogapp.schemas.user import TokenData
from blogapp.core.security import decode_access_token
from blogapp.core.session import ANONYMOUS, SessionContext
from blogapp.services.blog import BlogService

# auto_error=False: reads are open to anonymous callers
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

async def get_session_context(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> SessionContext:
    if token is None:
        return ANONYMOUS

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        sub = payload.get("sub")
        if sub is None:
            raise credentials_exception
        token_data = TokenData(sub=sub)
        user_id = int(token_data.sub)
    except (JWTError, ValueError):
        raise credentials_exception

    row = await user_crud.get_by_id(db, user_id)
    if not row:
        raise credentials_exception
    return SessionContext(user=to_user(row))

async def get_blog_service(
    db: AsyncSession = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
) -> BlogService:
    return BlogService(db, cache)
