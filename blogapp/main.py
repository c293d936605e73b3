# blogapp/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from blogapp.cache import close_redis
from blogapp.core.config import get_settings
from blogapp.core.errors import BlogError
from blogapp.database import engine, Base
from blogapp.models import analytics, comment, post, user  # noqa: F401  registers tables
from blogapp.routes import analytics as analytics_routes, auth, comments, posts, users

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(analytics_routes.router)


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup_event():
    # create tables if they don't exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

@app.on_event("shutdown")
async def shutdown_event():
    await engine.dispose()
    await close_redis()

@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME}
