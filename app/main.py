"""FastAPI entrypoint wiring the eligibility services together."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.database import init_models
from app.dependencies import (
    coordinator_provider,
    db_session,
    requirement_service_provider,
    sweeper_provider,
)
from app.errors import PlacementError
from app.logging_config import configure_logging
from app.models import Application, JobRequirement
from app.schemas import (
    ApplicationCreate,
    ApplicationRecord,
    CriterionResults,
    EligibilityResult,
    RequirementCreate,
    RequirementRecord,
    RequirementResponse,
    RequirementUpdate,
    SubmissionResponse,
    SweepItem,
    SweepResponse,
)
from services import ApplicationCoordinator, EligibilityVerdict, JobRequirementService, PendingDecisionSweeper

logger = logging.getLogger(__name__)


def _criteria(verdict: EligibilityVerdict) -> CriterionResults | None:
    if verdict.checks is None:
        return None
    checks = verdict.checks
    return CriterionResults(
        tenth_percent_meets=checks.tenth_percent_meets,
        twelfth_percent_meets=checks.twelfth_percent_meets,
        ug_cgpa_meets=checks.ug_cgpa_meets,
        pg_cgpa_meets=checks.pg_cgpa_meets,
        experience_meets=checks.experience_meets,
        branch_meets=checks.branch_meets,
    )


def _application_record(application: Application) -> ApplicationRecord:
    return ApplicationRecord(
        id=application.id,
        student_id=application.student_id,
        job_id=application.job_id,
        status=application.status,
        applied_at=application.applied_at,
        eligibility_status=application.eligibility_status,
        eligibility_checked_at=application.eligibility_checked_at,
        eligibility_comments=application.eligibility_comments,
        checks=CriterionResults(
            tenth_percent_meets=application.tenth_percent_meets,
            twelfth_percent_meets=application.twelfth_percent_meets,
            ug_cgpa_meets=application.ug_cgpa_meets,
            pg_cgpa_meets=application.pg_cgpa_meets,
            experience_meets=application.experience_meets,
            branch_meets=application.branch_meets,
        ),
    )


def _requirement_record(requirement: JobRequirement) -> RequirementRecord:
    return RequirementRecord(
        id=requirement.id,
        job_id=requirement.job_id,
        tenth_percent=requirement.tenth_percent,
        twelfth_percent=requirement.twelfth_percent,
        ug_cgpa=requirement.ug_cgpa,
        pg_cgpa=requirement.pg_cgpa,
        min_experience_yrs=requirement.min_experience_yrs,
        allowed_branches=requirement.allowed_branches,
        skills_required=requirement.skills_required,
        additional_notes=requirement.additional_notes,
        backlogs_allowed=requirement.backlogs_allowed,
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title="Placement Eligibility Engine", version="0.1.0")

    @app.on_event("startup")
    async def _startup() -> None:  # pragma: no cover - framework hook
        await init_models()

    @app.exception_handler(PlacementError)
    async def _placement_error(request: Request, exc: PlacementError) -> JSONResponse:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        message = f"{field}: {error['msg']}" if field else error["msg"]
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"success": False, "message": message})

    @app.post("/applications", response_model=SubmissionResponse, status_code=201)
    async def submit_application(
        payload: ApplicationCreate,
        session: AsyncSession = Depends(db_session),
        coordinator: ApplicationCoordinator = Depends(coordinator_provider),
    ) -> SubmissionResponse:
        submission = await coordinator.submit(session, student_id=payload.student_id, job_id=payload.job_id)
        return SubmissionResponse(message=submission.message, data=_application_record(submission.application))

    @app.get("/students/{student_id}/jobs/{job_id}/eligibility", response_model=EligibilityResult)
    async def check_eligibility(
        student_id: str,
        job_id: int,
        session: AsyncSession = Depends(db_session),
        coordinator: ApplicationCoordinator = Depends(coordinator_provider),
    ) -> EligibilityResult:
        verdict = await coordinator.check_eligibility(session, student_id=student_id, job_id=job_id)
        return EligibilityResult(
            student_id=student_id,
            job_id=job_id,
            eligible=verdict.eligible,
            eligibility_status=verdict.status.value,
            eligibility_comments=verdict.comments,
            checks=_criteria(verdict),
        )

    @app.post("/applications/eligibility/sweep", response_model=SweepResponse)
    async def sweep_pending_decisions(
        session: AsyncSession = Depends(db_session),
        sweeper: PendingDecisionSweeper = Depends(sweeper_provider),
    ) -> SweepResponse:
        manifest = await sweeper.sweep(session)
        return SweepResponse(
            message=manifest.message,
            updated=manifest.updated,
            failed=manifest.failed,
            remaining=manifest.remaining,
            data=[
                SweepItem(
                    application_id=entry.application_id,
                    outcome=entry.outcome,
                    eligible=entry.eligible,
                    error=entry.error,
                )
                for entry in manifest.entries
            ],
        )

    @app.post("/jobs/{job_id}/requirement", response_model=RequirementResponse, status_code=201)
    async def create_requirement(
        job_id: int,
        payload: RequirementCreate,
        session: AsyncSession = Depends(db_session),
        service: JobRequirementService = Depends(requirement_service_provider),
    ) -> RequirementResponse:
        requirement = await service.create(session, job_id=job_id, fields=payload.model_dump())
        return RequirementResponse(
            message="Job requirement created successfully", data=_requirement_record(requirement)
        )

    @app.get("/jobs/{job_id}/requirement", response_model=RequirementResponse)
    async def get_requirement(
        job_id: int,
        session: AsyncSession = Depends(db_session),
        service: JobRequirementService = Depends(requirement_service_provider),
    ) -> RequirementResponse:
        requirement = await service.get(session, job_id=job_id)
        return RequirementResponse(
            message="Job requirement fetched successfully", data=_requirement_record(requirement)
        )

    @app.patch("/jobs/{job_id}/requirement", response_model=RequirementResponse)
    async def update_requirement(
        job_id: int,
        payload: RequirementUpdate,
        session: AsyncSession = Depends(db_session),
        service: JobRequirementService = Depends(requirement_service_provider),
    ) -> RequirementResponse:
        requirement = await service.update(session, job_id=job_id, fields=payload.model_dump(exclude_unset=True))
        return RequirementResponse(
            message="Job requirement updated successfully", data=_requirement_record(requirement)
        )

    @app.delete("/jobs/{job_id}/requirement", response_model=RequirementResponse)
    async def delete_requirement(
        job_id: int,
        session: AsyncSession = Depends(db_session),
        service: JobRequirementService = Depends(requirement_service_provider),
    ) -> RequirementResponse:
        requirement = await service.delete(session, job_id=job_id)
        return RequirementResponse(
            message="Job requirement deleted successfully", data=_requirement_record(requirement)
        )

    return app


app = create_app()
