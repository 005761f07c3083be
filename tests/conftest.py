"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings
from models.base import Base


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file, ignoring any local .env."""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        ENV="development",
        BOOKMARKS_DEFAULT_SCOPE="all",
        FOLDER_DELETE_POLICY="keep",
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """
    Create an async engine on a fresh database with the schema in place.

    Every test gets its own database file, so tests don't affect each other.
    """
    engine = create_async_engine(settings.database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session on the test database."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


def build_test_app(settings: Settings, db_session: AsyncSession) -> FastAPI:
    """Build an app for ``settings`` whose requests all share ``db_session``."""
    from api.main import create_app
    from db.session import get_async_session

    app = create_app(settings)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


ClientFactory = Callable[[Settings], AbstractAsyncContextManager[AsyncClient]]


@pytest.fixture
def make_client(db_session: AsyncSession) -> ClientFactory:
    """
    Return a factory for test clients built with custom settings.

    Used by tests that need a non-default configuration (default scope, folder
    delete policy, production mode).
    """

    @asynccontextmanager
    async def _make_client(custom_settings: Settings) -> AsyncGenerator[AsyncClient]:
        app = build_test_app(custom_settings, db_session)
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as test_client:
            yield test_client

    return _make_client


@pytest.fixture
async def client(
    settings: Settings,
    make_client: ClientFactory,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override."""
    async with make_client(settings) as test_client:
        yield test_client
