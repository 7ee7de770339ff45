"""Database utilities and declarative base."""
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


engine = create_async_engine(settings.database_url, echo=settings.database_echo, future=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def init_models() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Provide a database session for dependency injection."""

    async with AsyncSessionLocal() as session:
        yield session


def transaction(session: AsyncSession) -> AsyncSessionTransaction:
    """Open a unit of work on ``session``.

    Starts a top-level transaction when the session is idle and a SAVEPOINT
    when the caller already holds one, so service calls compose.
    """

    if session.in_transaction():
        return session.begin_nested()
    return session.begin()
