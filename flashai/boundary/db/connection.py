"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, schema bootstrap and
FastAPI dependency for database session injection.

Dependencies: sqlalchemy, aiosqlite, flashai.configs
System role: Database connection lifecycle management
"""

import logging
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from flashai.boundary.db.base import Base
from flashai.configs import get_settings

logger = logging.getLogger(__name__)

DEFAULT_CONCEPT_NAME = "General"
DEFAULT_CONCEPT_DESCRIPTION = "Default concept for uncategorized cards"


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async SQLAlchemy engine.

    Returns:
        AsyncEngine: Engine bound to the configured SQLite database

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    db_config = get_settings().database
    db_config.ensure_parent_dir()

    url = db_config.async_database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}

    return create_async_engine(url, echo=db_config.echo_sql, connect_args=connect_args)


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Returns fresh async_sessionmaker bound to engine with autoflush=False
    and expire_on_commit=False for explicit transaction control.

    Args:
        engine: Engine to bind (defaults to the process-wide engine)

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine | None = None) -> None:
    """
    Create all tables and seed the default concept.

    Idempotent; safe to call on every startup.

    Args:
        engine: Engine to initialize (defaults to the process-wide engine)
    """
    # Register ORM models on the metadata before create_all
    from flashai.boundary.db.models import ConceptModel

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionFactory = get_async_session_factory(engine)
    async with SessionFactory() as session:
        existing = await session.execute(
            select(ConceptModel.id).where(ConceptModel.name == DEFAULT_CONCEPT_NAME)
        )
        if existing.scalar_one_or_none() is None:
            session.add(
                ConceptModel(
                    name=DEFAULT_CONCEPT_NAME,
                    description=DEFAULT_CONCEPT_DESCRIPTION,
                    weight=0.0,
                    source_exam_ids=[],
                )
            )
            await session.commit()
            logger.info(f"{__name__}:init_models - Seeded default concept")


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session
