"""Bulk re-evaluation of undecided applications."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import transaction
from app.errors import StorageError
from app.models import Application
from services.application import ApplicationCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepEntry:
    application_id: int
    outcome: str
    eligible: bool | None = None
    error: str | None = None


@dataclass
class SweepManifest:
    entries: list[SweepEntry] = field(default_factory=list)
    remaining: int = 0

    @property
    def updated(self) -> int:
        return sum(1 for entry in self.entries if entry.outcome == "updated")

    @property
    def failed(self) -> int:
        return sum(1 for entry in self.entries if entry.outcome == "failed")

    @property
    def message(self) -> str:
        return f"Processed {len(self.entries)} applications"


class PendingDecisionSweeper:
    """Re-run the eligibility check for applications without a current decision.

    Each application is updated in its own transaction; one failing item never
    stops the rest.
    """

    def __init__(self, settings: Settings, coordinator: ApplicationCoordinator | None = None) -> None:
        self.settings = settings
        self.coordinator = coordinator or ApplicationCoordinator()

    async def sweep(self, session: AsyncSession) -> SweepManifest:
        application_ids = await self._pending_ids(session)
        logger.info("Sweeping %d undecided applications", len(application_ids))

        budget = self.settings.sweep_time_budget_seconds
        started = time.monotonic()
        manifest = SweepManifest()

        for index, application_id in enumerate(application_ids):
            if budget is not None and time.monotonic() - started >= budget:
                manifest.remaining = len(application_ids) - index
                logger.warning("Sweep time budget exhausted, %d applications left", manifest.remaining)
                break

            try:
                verdict = await self.coordinator.reevaluate(session, application_id=application_id)
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Re-evaluation of application %s failed: %s", application_id, exc)
                manifest.entries.append(SweepEntry(application_id=application_id, outcome="failed", error=str(exc)))
            else:
                manifest.entries.append(
                    SweepEntry(application_id=application_id, outcome="updated", eligible=verdict.eligible)
                )

        logger.info("Sweep finished: %d updated, %d failed", manifest.updated, manifest.failed)
        return manifest

    @staticmethod
    async def _pending_ids(session: AsyncSession) -> list[int]:
        stmt = (
            select(Application.id)
            .where(or_(Application.eligibility_status == "pending", Application.eligibility_checked_at.is_(None)))
            .order_by(Application.id)
        )
        try:
            async with transaction(session):
                result = await session.scalars(stmt)
                return list(result.all())
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc
