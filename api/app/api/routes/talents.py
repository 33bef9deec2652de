from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_listing_service, get_submission_service
from app.core.security import get_human_principal
from app.schemas.common import validate_rows
from app.schemas.talents import TalentCreateRequest, TalentListOut, TalentMutationOut, TalentOut, TalentProfile
from app.services.repository import RepositoryNotFoundError, RepositoryUnavailableError

router = APIRouter()


@router.get("", response_model=TalentListOut)
async def list_talents(listings=Depends(get_listing_service)) -> TalentListOut:
    try:
        rows = await listings.list_talents()
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return TalentListOut(talents=validate_rows(TalentProfile, rows))


@router.get("/{talent_id}", response_model=TalentOut)
async def get_talent(talent_id: str, listings=Depends(get_listing_service)) -> TalentOut:
    try:
        row = await listings.get_talent(talent_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Talent not found") from exc
    return TalentOut(talent=TalentProfile.model_validate(row))


@router.post("", response_model=TalentMutationOut)
async def create_talent(
    payload: TalentCreateRequest,
    principal=Depends(get_human_principal),
    submissions=Depends(get_submission_service),
) -> TalentMutationOut:
    try:
        principal.require_scopes({"submission:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    try:
        talent = await submissions.create_talent(principal, payload)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return TalentMutationOut(talent=talent)
