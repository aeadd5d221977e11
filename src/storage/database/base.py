"""Base database models and session management."""

import datetime
from typing import Any, AsyncGenerator

from sqlalchemy import DateTime, func
from sqlalchemy.exc import ArgumentError, InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.config import get_settings
from src.core.exceptions import ConfigurationException

settings = get_settings()


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class TimestampMixin:
    """Mixin for adding timestamp fields."""

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def create_engine_for_url(url: str) -> AsyncEngine:
    """Create an async engine, sizing the pool only for server databases.

    Args:
        url: SQLAlchemy database URL

    Returns:
        AsyncEngine bound to the URL

    Raises:
        ConfigurationException: If the URL cannot be parsed or names a sync driver
    """
    options: dict[str, Any] = {"echo": settings.debug}
    if not url.startswith("sqlite"):
        options.update(pool_pre_ping=True, pool_size=20, max_overflow=10)
    try:
        return create_async_engine(url, **options)
    except (ArgumentError, InvalidRequestError) as e:
        raise ConfigurationException(f"Invalid database URL: {e}") from e


# Async engine for application
async_engine = create_engine_for_url(settings.async_database_url)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database by creating all tables."""
    # Register mappers on the metadata before create_all
    import src.storage.database.models  # noqa: F401
    import src.storage.database.webhook_models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await async_engine.dispose()
