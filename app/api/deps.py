from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import get_settings

settings = get_settings()

# Ensure we have a valid URL or fallback to memory for dev/test if not set
DB_URL = settings.database_url or "sqlite+aiosqlite:///:memory:"

# An in-memory SQLite database lives inside one connection; share it across sessions
_engine_kwargs = (
    {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    if DB_URL.endswith(":memory:")
    else {}
)

engine = create_async_engine(DB_URL, echo=settings.database_echo, **_engine_kwargs)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
