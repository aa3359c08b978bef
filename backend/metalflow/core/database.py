"""Async SQLAlchemy engine and session factory."""

import asyncio
import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from metalflow.core.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session.

    The session is one unit of work per request: it commits when the
    handler returns and rolls back on any exception.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _retry_delay(attempt: int) -> float:
    """Exponential backoff capped at DB_RETRY_MAX_DELAY_SECONDS."""
    return min(2.0 ** attempt, settings.DB_RETRY_MAX_DELAY_SECONDS)


async def wait_for_database() -> None:
    """Ping the database, retrying transient connection failures."""
    attempt = 0
    while True:
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return
        except (OperationalError, OSError) as exc:
            attempt += 1
            if attempt > settings.DB_CONNECT_RETRIES:
                logger.error("Database unreachable after %d attempts", attempt)
                raise
            delay = _retry_delay(attempt)
            logger.warning(
                "Database connection failed (attempt %d/%d): %s; retrying in %.1fs",
                attempt,
                settings.DB_CONNECT_RETRIES,
                exc,
                delay,
            )
            await asyncio.sleep(delay)


async def init_db() -> None:
    """Create database tables. Used during application startup."""
    import metalflow.models  # noqa: F401  registers every mapper on Base.metadata

    await wait_for_database()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the database engine. Used during application shutdown."""
    await engine.dispose()
