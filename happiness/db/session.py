"""Database session management."""

import ssl
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from happiness.config import get_settings

settings = get_settings()

engine_kwargs: dict[str, Any] = {
    "echo": settings.debug,
    "pool_pre_ping": True,
}

# SQLite (local runs) uses a single-connection pool that takes no sizing options
if not settings.database_url.startswith("sqlite"):
    engine_kwargs.update(pool_size=5, max_overflow=10)

if settings.database_requires_ssl:
    engine_kwargs["connect_args"] = {"ssl": ssl.create_default_context()}

# Create async engine
engine = create_async_engine(settings.database_url, **engine_kwargs)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
