"""Candidate profile assembly from the student, academic, internship and job stores."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any

from sqlalchemy import String, select, type_coerce
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from app.errors import NotFound, ValidationError
from app.models import Job, JobRequirement, Student, StudentAcademics, StudentInternship
from services.requirements import RequirementSet

logger = logging.getLogger(__name__)

_MONTHS_PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CandidateProfile:
    student_id: str
    branch: str | None
    tenth_percent: float | None
    twelfth_percent: float | None
    ug_cgpa: float | None
    pg_cgpa: float | None
    experience_years: float = 0.0


@dataclass(frozen=True)
class JobTerms:
    job_id: int
    application_deadline: datetime | None
    requirement: RequirementSet | None


@dataclass(frozen=True)
class EvaluationContext:
    profile: CandidateProfile
    job: JobTerms


def parse_duration_months(duration: str | None) -> int:
    """Return the duration in months when it is a bare integer, else 0."""

    if duration is None or not _MONTHS_PATTERN.fullmatch(duration):
        return 0
    return int(duration)


def total_experience_years(durations: Iterable[str | None]) -> float:
    return sum(parse_duration_months(duration) for duration in durations) / 12.0


def coerce_deadline(value: Any) -> datetime | None:
    """Normalise a stored deadline to an aware UTC datetime.

    A bare date is the start of that day in UTC.
    """

    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid application deadline: {value}") from exc
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise ValidationError(f"Invalid application deadline: {value!r}")


async def assemble_profile(session: AsyncSession, student_id: str, job_id: int) -> EvaluationContext:
    """Gather everything the evaluator needs for one student against one job."""

    stmt = (
        select(
            Student,
            StudentAcademics,
            Job,
            JobRequirement,
            # Raw stored text, so a malformed deadline reaches coerce_deadline instead of the Date type.
            type_coerce(Job.application_deadline, String).label("raw_deadline"),
        )
        .select_from(Student)
        .join(Job, Job.id == job_id)
        .outerjoin(StudentAcademics, StudentAcademics.student_id == Student.id)
        .outerjoin(JobRequirement, JobRequirement.job_id == Job.id)
        .where(Student.id == student_id)
        .options(defer(Job.application_deadline, raiseload=True))
    )
    row = (await session.execute(stmt)).first()
    if row is None:
        logger.info("No student %s or job %s for eligibility", student_id, job_id)
        raise NotFound("Student or job not found")

    student, academics, job, requirement, raw_deadline = row
    durations = await session.scalars(
        select(StudentInternship.duration).where(StudentInternship.student_id == student_id)
    )

    profile = CandidateProfile(
        student_id=student.id,
        branch=student.branch,
        tenth_percent=_optional_float(academics, "tenth_percent"),
        twelfth_percent=_optional_float(academics, "twelfth_percent"),
        ug_cgpa=_optional_float(academics, "ug_cgpa"),
        pg_cgpa=_optional_float(academics, "pg_cgpa"),
        experience_years=total_experience_years(durations.all()),
    )
    terms = JobTerms(
        job_id=job.id,
        application_deadline=coerce_deadline(raw_deadline),
        requirement=RequirementSet.from_model(requirement),
    )
    return EvaluationContext(profile=profile, job=terms)


def _optional_float(academics: StudentAcademics | None, field: str) -> float | None:
    if academics is None:
        return None
    value = getattr(academics, field)
    return float(value) if value is not None else None
