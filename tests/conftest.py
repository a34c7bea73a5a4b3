"""Pytest configuration and fixtures."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from okapiflow.db import models  # noqa: F401  register tables
from okapiflow.db.database import Base, create_session_factory
from okapiflow.models.space import SpaceCreate
from okapiflow.repositories.factory import RepositoryFactory
from okapiflow.services.container import Services, build_services


def pytest_configure(config):
    """Ensure asyncio_mode is auto so async fixtures work when pyproject is not in cwd."""
    if hasattr(config.option, "asyncio_mode") and config.option.asyncio_mode is None:
        config.option.asyncio_mode = "auto"


class FakeClock:
    """Deterministic clock; every service in a test shares one instance."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory store shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def repos(session_factory, clock) -> RepositoryFactory:
    return RepositoryFactory(session_factory, clock=clock)


@pytest.fixture
def services(session_factory, clock) -> Services:
    return build_services(session_factory, clock=clock)


@pytest_asyncio.fixture
async def space(services: Services):
    """A freshly created Space."""
    return await services.spaces.create_space(SpaceCreate(name="Garage", goal="Clear the bench"))
