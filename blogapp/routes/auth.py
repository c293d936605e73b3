# blogapp/routes/auth.py
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from google.oauth2 import id_token
from google.auth.transport import requests
from sqlalchemy.ext.asyncio import AsyncSession
import requests as httpx

from blogapp.core.config import get_settings
from blogapp.core.deps import get_session_context
from blogapp.core.security import create_access_token
from blogapp.core.session import SessionContext
from blogapp.crud.user import user as user_crud
from blogapp.database import get_db
from blogapp.schemas.user import SessionRead, Token, UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_crud.create(db, obj_in=data)


@router.post("/token", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    # OAuth2 calls the email field "username"
    user = await user_crud.authenticate(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token({"sub": str(user.id)}))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(session: SessionContext = Depends(get_session_context)):
    # tokens are stateless; signing out means the client drops its token
    if session.is_authenticated:
        logger.info("user %s signed out", session.user.id)


@router.get("/session", response_model=SessionRead)
async def current_session(session: SessionContext = Depends(get_session_context)):
    return SessionRead(is_authenticated=session.is_authenticated, user=session.user)


@router.get("/google/login")
def google_login():
    settings = get_settings()
    query = urlencode({
        "response_type": "code",
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.GOOGLE_REDIRECT_URI,
        "scope": "openid email profile",
    })
    return RedirectResponse(url=f"{GOOGLE_AUTH_URL}?{query}")


@router.get("/google/callback", response_model=Token)
async def google_callback(code: str, db: AsyncSession = Depends(get_db)):
    settings = get_settings()

    # Exchange code for token
    data = {
        "code": code,
        "client_id": settings.GOOGLE_CLIENT_ID,
        "client_secret": settings.GOOGLE_CLIENT_SECRET,
        "redirect_uri": settings.GOOGLE_REDIRECT_URI,
        "grant_type": "authorization_code",
    }
    try:
        response = httpx.post(GOOGLE_TOKEN_URL, data=data, timeout=10)
        token_data = response.json()
    except (httpx.RequestException, ValueError) as exc:
        logger.warning("google token exchange failed: %s", exc)
        raise HTTPException(status_code=502, detail="Google token exchange failed")

    if "id_token" not in token_data:
        raise HTTPException(status_code=400, detail="Google token exchange failed")

    try:
        id_info = id_token.verify_oauth2_token(
            token_data["id_token"], requests.Request(), settings.GOOGLE_CLIENT_ID
        )
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid Google identity token")

    email = id_info.get("email")
    user = await user_crud.get_by_email(db, email)
    if not user:
        user = await user_crud.create_google_user(db, email, id_info.get("name"), id_info.get("sub"))

    return Token(access_token=create_access_token({"sub": str(user.id)}))
