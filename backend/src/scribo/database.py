"""Async SQLAlchemy engine and sessions for the usage and subscription stores."""
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from scribo.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    """
    Create the async engine for a configuration.

    Requests issue a handful of single-row statements, so the pool is sized by
    concurrent requests rather than by query volume.
    """
    return create_async_engine(
        str(config.database_url),
        echo=config.debug,
        pool_pre_ping=True,
        pool_size=config.database_pool_size,
        max_overflow=config.database_max_overflow,
    )


engine = build_engine(settings)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Repositories commit their own writes while the request is still being
    handled; anything left uncommitted is rolled back when the handler raises
    and discarded when the session closes.

    Yields:
        AsyncSession: Database session for the request lifecycle
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def ping() -> None:
    """Round-trip a trivial query; raises if the store is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


# Declarative base for all models
Base = declarative_base()
