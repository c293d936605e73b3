from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from blogapp.core.config import get_settings

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.DB_ECHO, pool_pre_ping=True)

async_session = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    async with async_session() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    # background work outlives the request session and opens its own
    return async_session
