"""FastAPI dependency helpers."""
from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.database import get_session
from services import ApplicationCoordinator, JobRequirementService, PendingDecisionSweeper


async def db_session() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def settings_provider() -> Settings:
    return get_settings()


def coordinator_provider() -> ApplicationCoordinator:
    return ApplicationCoordinator()


def sweeper_provider(
    settings: Settings = Depends(settings_provider),
    coordinator: ApplicationCoordinator = Depends(coordinator_provider),
) -> PendingDecisionSweeper:
    return PendingDecisionSweeper(settings, coordinator)


def requirement_service_provider() -> JobRequirementService:
    return JobRequirementService()
