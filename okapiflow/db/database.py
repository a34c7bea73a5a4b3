"""
Async SQLAlchemy store setup.

The embedded store is an async engine (SQLite through aiosqlite by default).
Opening the store runs an idempotent upgrade hook that creates any missing
collection and ``space_id`` index, then records the schema version.
"""
from __future__ import annotations

import logging
from typing import Any, AsyncGenerator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from okapiflow.config import settings as settings
from okapiflow.core.errors import SchemaVersionError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


# Global engine and session factory (initialized by open_store)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """Get the database URL from settings."""
    url = settings.database_url
    if not url:
        url = "sqlite+aiosqlite:///./okapiflow.db"
        logger.warning(f"No database URL configured, using SQLite: {url}")
    return url


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by every store operation."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def upgrade_schema(
    engine: AsyncEngine,
    *,
    store_name: str | None = None,
    schema_version: int | None = None,
) -> int:
    """Create missing collections/indexes and stamp the schema version.

    Safe to run on every open. Returns the version previously recorded
    (0 for a fresh store).

    Raises:
        SchemaVersionError: If the store was written by a newer schema.
    """
    from okapiflow.db.models import StoreMeta

    name = store_name or settings.store_name
    version = schema_version or settings.schema_version

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = create_session_factory(engine)
    async with factory() as session:
        async with session.begin():
            result = await session.execute(
                select(StoreMeta).where(StoreMeta.store_name == name)
            )
            meta = result.scalar_one_or_none()
            old_version = meta.schema_version if meta else 0
            if old_version > version:
                raise SchemaVersionError(name, old_version, version)
            if meta is None:
                session.add(StoreMeta(store_name=name, schema_version=version))
            elif old_version < version:
                meta.schema_version = version

    if old_version < version:
        logger.info(f"Upgraded store '{name}' from version {old_version} to {version}")
    return old_version


async def open_store(
    database_url: str | None = None,
    *,
    create_schema: bool = True,
) -> async_sessionmaker[AsyncSession]:
    """Initialize the engine and session factory, running the upgrade hook."""
    global _engine, _async_session_factory

    url = database_url or get_database_url()
    logger.info(f"Opening store '{settings.store_name}' v{settings.schema_version}: {url}")

    connect_args: dict[str, Any] = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_async_engine(
        url,
        echo=settings.debug,
        connect_args=connect_args,
    )
    if create_schema:
        try:
            await upgrade_schema(engine)
        except Exception:
            await engine.dispose()
            raise

    _engine = engine
    _async_session_factory = create_session_factory(engine)
    logger.info("Store opened successfully")
    return _async_session_factory


async def close_store() -> None:
    """Close the store connection."""
    global _engine, _async_session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Store connection closed")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session that commits on success and rolls back on error.

    Usage:
        async for session in get_session():
            ...
    """
    if _async_session_factory is None:
        raise RuntimeError("Store not initialized. Call open_store() first.")

    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory of the open store."""
    if _async_session_factory is None:
        raise RuntimeError("Store not initialized. Call open_store() first.")
    return _async_session_factory
