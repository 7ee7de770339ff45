"""Shared fixtures: an in-memory database per test."""
from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base
from factories import FIXED_NOW
from services.application import ApplicationCoordinator


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def coordinator():
    return ApplicationCoordinator(clock=lambda: FIXED_NOW)


@pytest.fixture
def seed(session_factory):
    """Insert rows in their own committed transaction."""

    async def _seed(*rows):
        async with session_factory() as session:
            async with session.begin():
                session.add_all(rows)
        return rows

    return _seed
