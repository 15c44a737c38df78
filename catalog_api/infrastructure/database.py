"""Database engine and request sessions.

Services own the unit of work: each application service commits or rolls
back its own operation (see ``SessionService._run``). The request dependency
only hands out the session and discards whatever an unhandled exception
left open.
"""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Objects stay readable after commit so services can return them.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session.

    Yields:
        AsyncSession for one request. Nothing is committed here.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close every pooled connection on shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")
