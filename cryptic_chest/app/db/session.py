# cryptic_chest/app/db/session.py
"""
Async database session management for SQLAlchemy.

- asyncpg for PostgreSQL
- aiosqlite for SQLite (local development and tests)
- In-memory SQLite shares one connection so every session sees the
  same tables

Every repository write commits on its own; a session is never held
open across a whole backup restore.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool, AsyncAdaptedQueuePool

from cryptic_chest.app.core.config import settings


def _create_async_engine() -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    SQLite file:   NullPool, one connection per session
    SQLite memory: StaticPool, a single shared connection
    PostgreSQL:    queue pool with pre-ping and periodic recycle

    Returns:
        Configured AsyncEngine instance
    """
    if settings.is_memory_sqlite:
        return create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    if settings.is_sqlite:
        return create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


engine: AsyncEngine = _create_async_engine()

# expire_on_commit=False: records stay readable after each per-call commit
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Usage in FastAPI endpoints:
        @router.get("/passwords")
        async def list_passwords(db: AsyncSession = Depends(get_db)):
            ...

    Yields:
        AsyncSession bound to the configured database
    """
    async with AsyncSessionLocal() as session:
        yield session
