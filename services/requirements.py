"""Job eligibility requirements: branch normalization and requirement lifecycle."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import transaction
from app.errors import Conflict, NotFound, StorageError, ValidationError
from app.models import Job, JobRequirement

logger = logging.getLogger(__name__)

BRANCH_CODES: frozenset[str] = frozenset(
    {"CSE", "AI", "ECE", "MECH", "EEE", "CIVIL", "CSBS", "ETE", "MCA", "ALL"}
)
ANY_BRANCH = "ALL"

REQUIREMENT_FIELDS = (
    "tenth_percent",
    "twelfth_percent",
    "ug_cgpa",
    "pg_cgpa",
    "min_experience_yrs",
    "allowed_branches",
    "skills_required",
    "additional_notes",
    "backlogs_allowed",
)


def normalize_branches(value: Any, *, branch_codes: Iterable[str] = BRANCH_CODES) -> list[str] | None:
    """Trim and uppercase every branch code, rejecting unknown ones.

    ``None`` means "no branch constraint". Duplicates are kept as given.
    """

    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise ValidationError("allowed_branches must be an array")

    allowed = set(branch_codes)
    normalized = [str(branch).strip().upper() for branch in value]
    for branch in normalized:
        if branch not in allowed:
            raise ValidationError(f"Invalid branch: {branch}")
    return normalized


@dataclass(frozen=True)
class RequirementSet:
    """Thresholds a candidate must meet; ``None`` means unconstrained."""

    tenth_percent: float | None = None
    twelfth_percent: float | None = None
    ug_cgpa: float | None = None
    pg_cgpa: float | None = None
    min_experience_yrs: float | None = None
    allowed_branches: tuple[str, ...] | None = None
    skills_required: str | None = None
    additional_notes: str | None = None
    backlogs_allowed: int | None = None

    @classmethod
    def from_model(cls, requirement: JobRequirement | None) -> RequirementSet | None:
        if requirement is None:
            return None
        branches = requirement.allowed_branches
        return cls(
            tenth_percent=_as_float(requirement.tenth_percent),
            twelfth_percent=_as_float(requirement.twelfth_percent),
            ug_cgpa=_as_float(requirement.ug_cgpa),
            pg_cgpa=_as_float(requirement.pg_cgpa),
            min_experience_yrs=_as_float(requirement.min_experience_yrs),
            allowed_branches=tuple(branches) if branches is not None else None,
            skills_required=requirement.skills_required,
            additional_notes=requirement.additional_notes,
            backlogs_allowed=requirement.backlogs_allowed,
        )


def _as_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class JobRequirementService:
    """Create, read, update and delete the single requirement row of a job."""

    async def create(self, session: AsyncSession, *, job_id: int, fields: dict[str, Any]) -> JobRequirement:
        values = self._clean(fields)
        try:
            async with transaction(session):
                job = await session.get(Job, job_id)
                if job is None:
                    raise NotFound("Job not found")

                existing = await session.execute(select(JobRequirement.id).where(JobRequirement.job_id == job_id))
                if existing.scalar_one_or_none() is not None:
                    raise Conflict("Job requirement already exists for this job")

                requirement = JobRequirement(job_id=job_id, **values)
                session.add(requirement)
                await session.flush()
        except IntegrityError as exc:
            raise Conflict("Job requirement already exists for this job") from exc
        except SQLAlchemyError as exc:
            logger.error("create requirement for job %s failed: %s", job_id, exc)
            raise StorageError(str(exc)) from exc

        logger.info("Created requirement %s for job %s", requirement.id, job_id)
        return requirement

    async def get(self, session: AsyncSession, *, job_id: int) -> JobRequirement:
        async with transaction(session):
            requirement = await self._load(session, job_id)
        return requirement

    async def update(self, session: AsyncSession, *, job_id: int, fields: dict[str, Any]) -> JobRequirement:
        if not fields:
            raise ValidationError("No fields provided for update")
        values = self._clean(fields)
        try:
            async with transaction(session):
                requirement = await self._load(session, job_id)
                for name, value in values.items():
                    setattr(requirement, name, value)
                await session.flush()
        except SQLAlchemyError as exc:
            logger.error("update requirement for job %s failed: %s", job_id, exc)
            raise StorageError(str(exc)) from exc

        logger.info("Updated requirement for job %s: %s", job_id, sorted(values))
        return requirement

    async def delete(self, session: AsyncSession, *, job_id: int) -> JobRequirement:
        try:
            async with transaction(session):
                requirement = await self._load(session, job_id)
                await session.delete(requirement)
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

        logger.info("Deleted requirement for job %s", job_id)
        return requirement

    @staticmethod
    async def _load(session: AsyncSession, job_id: int) -> JobRequirement:
        result = await session.execute(select(JobRequirement).where(JobRequirement.job_id == job_id))
        requirement = result.scalar_one_or_none()
        if requirement is None:
            raise NotFound("Job requirement not found")
        return requirement

    @staticmethod
    def _clean(fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - set(REQUIREMENT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown requirement fields: {', '.join(sorted(unknown))}")

        values = dict(fields)
        if "allowed_branches" in values:
            values["allowed_branches"] = normalize_branches(values["allowed_branches"])
        for name in ("skills_required", "additional_notes"):
            if name in values:
                values[name] = _blank_to_none(values[name])
        return values
