from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_listing_service, get_submission_service
from app.core.security import get_human_principal
from app.schemas.common import validate_rows
from app.schemas.jobs import JobCreateRequest, JobListOut, JobMutationOut, JobOut, JobPosting
from app.services.repository import RepositoryNotFoundError, RepositoryUnavailableError

router = APIRouter()


@router.get("", response_model=JobListOut)
async def list_jobs(
    category: str | None = Query(default=None, min_length=1),
    listings=Depends(get_listing_service),
) -> JobListOut:
    try:
        rows = await listings.list_jobs(category=category)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return JobListOut(jobs=validate_rows(JobPosting, rows))


@router.get("/{job_id}", response_model=JobOut)
async def get_job(job_id: str, listings=Depends(get_listing_service)) -> JobOut:
    try:
        row = await listings.get_job(job_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found") from exc
    return JobOut(job=JobPosting.model_validate(row))


@router.post("", response_model=JobMutationOut)
async def create_job(
    payload: JobCreateRequest,
    principal=Depends(get_human_principal),
    submissions=Depends(get_submission_service),
) -> JobMutationOut:
    try:
        principal.require_scopes({"submission:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    try:
        job = await submissions.create_job(principal, payload)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return JobMutationOut(job=job)
