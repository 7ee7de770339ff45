"""Application submission with an eligibility snapshot."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.errors import Conflict, NotFound, StorageError
from app.models import Application, utcnow
from services.evaluation import EligibilityVerdict, evaluate
from services.profile import assemble_profile

logger = logging.getLogger(__name__)

DUPLICATE_APPLICATION = "Application already exists for this student and job"


@dataclass(frozen=True)
class Submission:
    application: Application
    verdict: EligibilityVerdict

    @property
    def message(self) -> str:
        if self.verdict.eligible:
            return "Application submitted successfully"
        return "Application created but marked as not eligible"


def apply_verdict(application: Application, verdict: EligibilityVerdict, *, checked_at: datetime) -> None:
    """Copy the verdict onto the application's snapshot columns."""

    checks = verdict.checks
    application.eligibility_status = verdict.status.value
    application.eligibility_comments = verdict.comments
    application.eligibility_checked_at = checked_at
    application.tenth_percent_meets = checks.tenth_percent_meets if checks else None
    application.twelfth_percent_meets = checks.twelfth_percent_meets if checks else None
    application.ug_cgpa_meets = checks.ug_cgpa_meets if checks else None
    application.pg_cgpa_meets = checks.pg_cgpa_meets if checks else None
    application.experience_meets = checks.experience_meets if checks else None
    application.branch_meets = checks.branch_meets if checks else None


class ApplicationCoordinator:
    """Evaluate a student against a job and record the outcome."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self.clock = clock

    async def check_eligibility(self, session: AsyncSession, *, student_id: str, job_id: int) -> EligibilityVerdict:
        now = self.clock()
        try:
            async with transaction(session):
                context = await assemble_profile(session, student_id, job_id)
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc
        return evaluate(context.profile, context.job, now=now)

    async def submit(self, session: AsyncSession, *, student_id: str, job_id: int) -> Submission:
        now = self.clock()
        try:
            async with transaction(session):
                if await self._existing_application_id(session, student_id, job_id) is not None:
                    raise Conflict(DUPLICATE_APPLICATION)

                context = await assemble_profile(session, student_id, job_id)
                verdict = evaluate(context.profile, context.job, now=now)

                application = Application(student_id=student_id, job_id=job_id, status="submitted", applied_at=now)
                apply_verdict(application, verdict, checked_at=now)
                session.add(application)
                await session.flush()
        except IntegrityError as exc:
            logger.warning("Concurrent submission for student %s job %s rejected", student_id, job_id)
            raise Conflict(DUPLICATE_APPLICATION) from exc
        except SQLAlchemyError as exc:
            logger.error("Submission for student %s job %s failed: %s", student_id, job_id, exc)
            raise StorageError(str(exc)) from exc

        if verdict.deadline_passed:
            logger.info("Student %s applied to job %s after its deadline", student_id, job_id)
        logger.info(
            "Application %s created for student %s job %s: %s",
            application.id,
            student_id,
            job_id,
            verdict.status.value,
        )
        return Submission(application=application, verdict=verdict)

    @staticmethod
    async def _existing_application_id(session: AsyncSession, student_id: str, job_id: int) -> int | None:
        result = await session.execute(
            select(Application.id).where(Application.student_id == student_id, Application.job_id == job_id)
        )
        return result.scalar_one_or_none()

    async def reevaluate(self, session: AsyncSession, *, application_id: int) -> EligibilityVerdict:
        """Recompute and overwrite the snapshot of an existing application."""

        now = self.clock()
        try:
            async with transaction(session):
                application = await session.get(Application, application_id)
                if application is None:
                    raise NotFound("Application not found")

                context = await assemble_profile(session, application.student_id, application.job_id)
                verdict = evaluate(context.profile, context.job, now=now)
                apply_verdict(application, verdict, checked_at=now)
                application.updated_at = now
                await session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

        logger.debug("Application %s re-evaluated: %s", application_id, verdict.status.value)
        return verdict
