"""Shared fixtures: a throwaway SQLite database per test."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from catalog_api.catalog import models  # noqa: F401  (registers tables)
from catalog_api.infrastructure.database import Base, get_session
from catalog_api.main import app


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    """Create an empty catalog schema in a temporary SQLite file."""
    path = tmp_path / "catalog.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def session_factory(database_path: Path) -> async_sessionmaker[AsyncSession]:
    """Async session factory bound to the temporary database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{database_path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for one test."""
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def app_database(
    session_factory: async_sessionmaker[AsyncSession],
) -> Generator[None, None, None]:
    """Point the application's session dependency at the test database."""
    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as db_session:
            try:
                yield db_session
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    yield
    app.dependency_overrides.pop(get_session, None)
