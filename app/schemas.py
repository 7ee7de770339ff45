"""Pydantic schemas for the HTTP layer."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ApplicationCreate(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=50)
    job_id: int = Field(..., gt=0)


class CriterionResults(BaseModel):
    tenth_percent_meets: bool | None = None
    twelfth_percent_meets: bool | None = None
    ug_cgpa_meets: bool | None = None
    pg_cgpa_meets: bool | None = None
    experience_meets: bool | None = None
    branch_meets: bool | None = None


class EligibilityResult(BaseModel):
    student_id: str
    job_id: int
    eligible: bool
    eligibility_status: str
    eligibility_comments: str
    checks: CriterionResults | None = None


class ApplicationRecord(BaseModel):
    id: int
    student_id: str
    job_id: int
    status: str
    applied_at: datetime
    eligibility_status: str
    eligibility_checked_at: datetime | None = None
    eligibility_comments: str | None = None
    checks: CriterionResults


class SubmissionResponse(BaseModel):
    success: bool = True
    message: str
    data: ApplicationRecord


class SweepItem(BaseModel):
    application_id: int
    outcome: str
    eligible: bool | None = None
    error: str | None = None


class SweepResponse(BaseModel):
    success: bool = True
    message: str
    updated: int
    failed: int
    remaining: int = 0
    data: list[SweepItem] = Field(default_factory=list)


class _RequirementFields(BaseModel):
    tenth_percent: float | None = Field(default=None, ge=0, le=100)
    twelfth_percent: float | None = Field(default=None, ge=0, le=100)
    ug_cgpa: float | None = Field(default=None, ge=0, le=10)
    pg_cgpa: float | None = Field(default=None, ge=0, le=10)
    min_experience_yrs: float | None = Field(default=None, ge=0, le=50)
    # Branch codes are checked by the service so the message names the bad value.
    allowed_branches: list[str] | None = None
    skills_required: str | None = None
    additional_notes: str | None = None
    backlogs_allowed: int | None = Field(default=None, ge=0)


class RequirementCreate(_RequirementFields):
    pass


class RequirementUpdate(_RequirementFields):
    pass


class RequirementRecord(BaseModel):
    id: int
    job_id: int
    tenth_percent: float | None = None
    twelfth_percent: float | None = None
    ug_cgpa: float | None = None
    pg_cgpa: float | None = None
    min_experience_yrs: float | None = None
    allowed_branches: list[str] | None = None
    skills_required: str | None = None
    additional_notes: str | None = None
    backlogs_allowed: int | None = None


class RequirementResponse(BaseModel):
    success: bool = True
    message: str
    data: RequirementRecord
