"""Eligibility decision logic.

Everything here is pure: the verdict depends only on the candidate profile,
the job terms and the supplied clock reading.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

from services.profile import CandidateProfile, JobTerms
from services.requirements import ANY_BRANCH, RequirementSet

DEADLINE_PASSED = "Application deadline has passed"


class EligibilityStatus(str, enum.Enum):
    ELIGIBLE = "eligible"
    NOT_ELIGIBLE = "not_eligible"


@dataclass(frozen=True)
class CriterionChecks:
    tenth_percent_meets: bool
    twelfth_percent_meets: bool
    ug_cgpa_meets: bool
    pg_cgpa_meets: bool
    experience_meets: bool
    branch_meets: bool

    def all_met(self) -> bool:
        return all(
            (
                self.tenth_percent_meets,
                self.twelfth_percent_meets,
                self.ug_cgpa_meets,
                self.pg_cgpa_meets,
                self.experience_meets,
                self.branch_meets,
            )
        )


@dataclass(frozen=True)
class EligibilityVerdict:
    """Outcome of one evaluation.

    ``checks`` is ``None`` when the deadline guard fired before any
    criterion was looked at.
    """

    eligible: bool
    status: EligibilityStatus
    comments: str
    checks: CriterionChecks | None

    @property
    def deadline_passed(self) -> bool:
        return self.checks is None and self.comments == DEADLINE_PASSED


def format_number(value: float) -> str:
    """Render a number the way the comments show it: ``7`` not ``7.0``."""

    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _threshold(
    label: str, unit: str, required: float | None, actual: float | None, reasons: list[str]
) -> bool:
    if required is None:
        return True
    if actual is None:
        reasons.append(f"{label} data missing (required: {format_number(required)}{unit})")
        return False
    if actual >= required:
        return True
    reasons.append(
        f"{label} below requirement ({format_number(actual)}{unit} < {format_number(required)}{unit})"
    )
    return False


def _experience(required: float | None, actual: float, reasons: list[str]) -> bool:
    if required is None or actual >= required:
        return True
    reasons.append(
        f"Experience below requirement ({format_number(actual)} years < {format_number(required)} years)"
    )
    return False


def _branch(allowed: tuple[str, ...] | None, branch: str | None, reasons: list[str]) -> bool:
    if not allowed:
        return True
    candidate = (branch or "").lower()
    if any(code.upper() == ANY_BRANCH or code.lower() == candidate for code in allowed):
        return True
    reasons.append(f"Branch not allowed ({branch or 'unknown'} not in [{', '.join(allowed)}])")
    return False


def evaluate(profile: CandidateProfile, job: JobTerms, *, now: datetime) -> EligibilityVerdict:
    """Decide whether ``profile`` satisfies ``job``'s requirement at ``now``."""

    if job.application_deadline is not None and now > job.application_deadline:
        return EligibilityVerdict(
            eligible=False,
            status=EligibilityStatus.NOT_ELIGIBLE,
            comments=DEADLINE_PASSED,
            checks=None,
        )

    requirement = job.requirement or RequirementSet()
    # Appended in canonical order: 10th, 12th, UG, PG, experience, branch.
    reasons: list[str] = []
    checks = CriterionChecks(
        tenth_percent_meets=_threshold(
            "10th percentage", "%", requirement.tenth_percent, profile.tenth_percent, reasons
        ),
        twelfth_percent_meets=_threshold(
            "12th percentage", "%", requirement.twelfth_percent, profile.twelfth_percent, reasons
        ),
        ug_cgpa_meets=_threshold("UG CGPA", "", requirement.ug_cgpa, profile.ug_cgpa, reasons),
        pg_cgpa_meets=_threshold("PG CGPA", "", requirement.pg_cgpa, profile.pg_cgpa, reasons),
        experience_meets=_experience(requirement.min_experience_yrs, profile.experience_years, reasons),
        branch_meets=_branch(requirement.allowed_branches, profile.branch, reasons),
    )

    eligible = checks.all_met()
    return EligibilityVerdict(
        eligible=eligible,
        status=EligibilityStatus.ELIGIBLE if eligible else EligibilityStatus.NOT_ELIGIBLE,
        comments="; ".join(reasons),
        checks=checks,
    )
