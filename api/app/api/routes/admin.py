from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_admin_registry, get_moderation_service, get_verification_service
from app.core.auth import Principal
from app.core.security import get_human_principal
from app.schemas.admin import AdminEmailRequest, AdminEmailsMutationOut, AdminEmailsOut
from app.schemas.common import RejectRequest, ReviewStatusFilter, validate_rows
from app.schemas.company_emails import (
    ApplicationListOut,
    ApplicationMutationOut,
    ApplicationStatusFilter,
    CompanyEmailApplication,
)
from app.schemas.jobs import AdminJobListOut, AdminJobPosting, JobMutationOut, JobPosting
from app.schemas.talents import AdminTalentListOut, AdminTalentProfile, TalentMutationOut, TalentProfile
from app.services.identity import IdentityUnavailableError
from app.services.moderation import COMPANY_EMAIL_REVIEW, JOB_REVIEW, TALENT_REVIEW
from app.services.repository import (
    RepositoryConflictError,
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    RepositoryValidationError,
)

router = APIRouter()


def _require(principal: Principal, scopes: set[str]) -> None:
    try:
        principal.require_scopes(scopes)
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc


@router.get("/manage", response_model=AdminEmailsOut)
async def list_admin_emails(
    principal=Depends(get_human_principal),
    registry=Depends(get_admin_registry),
) -> AdminEmailsOut:
    _require(principal, {"admin:write"})

    try:
        emails = await registry.list_emails()
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return AdminEmailsOut(admin_emails=emails)


@router.post("/manage", response_model=AdminEmailsMutationOut)
async def add_admin_email(
    payload: AdminEmailRequest,
    principal=Depends(get_human_principal),
    registry=Depends(get_admin_registry),
) -> AdminEmailsMutationOut:
    _require(principal, {"admin:write"})

    try:
        emails = await registry.add(payload.email)
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return AdminEmailsMutationOut(admin_emails=emails)


@router.delete("/manage/{email}", response_model=AdminEmailsMutationOut)
async def remove_admin_email(
    email: str,
    principal=Depends(get_human_principal),
    registry=Depends(get_admin_registry),
) -> AdminEmailsMutationOut:
    _require(principal, {"admin:write"})

    try:
        emails = await registry.remove(email)
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)) from exc
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return AdminEmailsMutationOut(admin_emails=emails)


@router.get("/jobs", response_model=AdminJobListOut)
async def list_jobs_for_review(
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
    review_status: ReviewStatusFilter = Query(default="pending", alias="status"),
) -> AdminJobListOut:
    _require(principal, {"moderation:read"})

    try:
        rows = await moderation.list_for_review(JOB_REVIEW, status=review_status)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return AdminJobListOut(jobs=validate_rows(AdminJobPosting, rows))


@router.post("/jobs/{job_id}/approve", response_model=JobMutationOut)
async def approve_job(
    job_id: str,
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
) -> JobMutationOut:
    _require(principal, {"moderation:write"})

    try:
        row = await moderation.approve(JOB_REVIEW, job_id, reviewer_id=principal.subject)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found") from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return JobMutationOut(job=JobPosting.model_validate(row))


@router.post("/jobs/{job_id}/reject", response_model=JobMutationOut)
async def reject_job(
    job_id: str,
    payload: RejectRequest | None = None,
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
) -> JobMutationOut:
    _require(principal, {"moderation:write"})

    try:
        row = await moderation.reject(
            JOB_REVIEW,
            job_id,
            reviewer_id=principal.subject,
            reason=payload.rejection_reason if payload else None,
        )
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found") from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return JobMutationOut(job=JobPosting.model_validate(row))


@router.get("/talents", response_model=AdminTalentListOut)
async def list_talents_for_review(
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
    review_status: ReviewStatusFilter = Query(default="pending", alias="status"),
) -> AdminTalentListOut:
    _require(principal, {"moderation:read"})

    try:
        rows = await moderation.list_for_review(TALENT_REVIEW, status=review_status)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return AdminTalentListOut(talents=validate_rows(AdminTalentProfile, rows))


@router.post("/talents/{talent_id}/approve", response_model=TalentMutationOut)
async def approve_talent(
    talent_id: str,
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
) -> TalentMutationOut:
    _require(principal, {"moderation:write"})

    try:
        row = await moderation.approve(TALENT_REVIEW, talent_id, reviewer_id=principal.subject)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Talent not found") from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return TalentMutationOut(talent=TalentProfile.model_validate(row))


@router.post("/talents/{talent_id}/reject", response_model=TalentMutationOut)
async def reject_talent(
    talent_id: str,
    payload: RejectRequest | None = None,
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
) -> TalentMutationOut:
    _require(principal, {"moderation:write"})

    try:
        row = await moderation.reject(
            TALENT_REVIEW,
            talent_id,
            reviewer_id=principal.subject,
            reason=payload.rejection_reason if payload else None,
        )
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Talent not found") from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return TalentMutationOut(talent=TalentProfile.model_validate(row))


@router.get("/company-emails", response_model=ApplicationListOut)
async def list_company_email_applications(
    principal=Depends(get_human_principal),
    moderation=Depends(get_moderation_service),
    application_status: ApplicationStatusFilter = Query(default="pending", alias="status"),
) -> ApplicationListOut:
    _require(principal, {"moderation:read"})

    try:
        rows = await moderation.list_for_review(COMPANY_EMAIL_REVIEW, status=application_status)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return ApplicationListOut(applications=validate_rows(CompanyEmailApplication, rows))


@router.post("/company-emails/{application_id}/approve", response_model=ApplicationMutationOut)
async def approve_company_email(
    application_id: str,
    principal=Depends(get_human_principal),
    verification=Depends(get_verification_service),
) -> ApplicationMutationOut:
    _require(principal, {"moderation:write"})

    try:
        row = await verification.approve(application_id, reviewer_id=principal.subject)
    except (RepositoryUnavailableError, IdentityUnavailableError) as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found") from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ApplicationMutationOut(application=CompanyEmailApplication.model_validate(row))


@router.post("/company-emails/{application_id}/reject", response_model=ApplicationMutationOut)
async def reject_company_email(
    application_id: str,
    payload: RejectRequest | None = None,
    principal=Depends(get_human_principal),
    verification=Depends(get_verification_service),
) -> ApplicationMutationOut:
    _require(principal, {"moderation:write"})

    try:
        row = await verification.reject(
            application_id,
            reviewer_id=principal.subject,
            reason=payload.rejection_reason if payload else None,
        )
    except (RepositoryUnavailableError, IdentityUnavailableError) as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found") from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ApplicationMutationOut(application=CompanyEmailApplication.model_validate(row))
