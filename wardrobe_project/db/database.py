# wardrobe_project/db/database.py
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from config.settings import settings

IN_MEMORY_SQLITE_URL = "sqlite+aiosqlite://"


def make_engine(url: str = settings.DATABASE_URL, **kwargs) -> AsyncEngine:
    """In-memory SQLite URLs get a single shared connection."""
    if url == IN_MEMORY_SQLITE_URL:
        kwargs.setdefault("poolclass", StaticPool)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_async_engine(url, **kwargs)

def make_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # Rows handed to the routes are serialized after commit
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


engine = make_engine()
AsyncSessionLocal = make_session_factory(engine)

Base = declarative_base()

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
