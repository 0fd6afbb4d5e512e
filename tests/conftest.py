"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; configure before importing the app.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from happiness.api.deps import create_access_token
from happiness.db.base import Base
from happiness.db.models import User
from happiness.db.session import get_db
from happiness.main import app
from happiness.services.completion_client import get_completion_client


class FakeCompletionClient:
    """Stands in for the Anthropic-backed client; records every prompt."""

    def __init__(self, reply: str = "Take a short walk outside.") -> None:
        self.reply = reply
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting data directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def completion() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    completion: FakeCompletionClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_client] = lambda: completion
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: AsyncSession) -> Callable:
    async def _make_user(email: str = "alex@example.com", name: str | None = "Alex") -> User:
        user = User(email=email, name=name)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers() -> Callable[[int], dict[str, str]]:
    def _auth_headers(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _auth_headers
