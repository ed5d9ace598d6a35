"""Async database engine and session helpers."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sessionpurge.core.config import settings

async_engine = create_async_engine(
    settings.SQLALCHEMY_ASYNC_DATABASE_URI,
    pool_size=10,
    max_overflow=5,
    pool_pre_ping=True,
    pool_recycle=300,
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    autoflush=False,
    expire_on_commit=False,
)


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on error.

    Everything executed inside one ``async with`` block is a single transaction.

    Yields:
        AsyncSession bound to the shared engine
    """
    async with AsyncSessionLocal() as db:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise


def config_safe_database_url(url: str = settings.SQLALCHEMY_ASYNC_DATABASE_URI) -> str:
    """Escape a database URL for configparser-backed configs (alembic.ini).

    configparser treats "%" as interpolation syntax; percent-encoded
    passwords would otherwise fail to load.
    """
    return url.replace("%", "%%")
