from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api.deps import get_upload_service
from app.core.config import Settings, get_settings
from app.core.security import get_human_principal
from app.schemas.uploads import UploadOut
from app.services.object_store import ObjectStoreUnavailableError
from app.services.repository import RepositoryValidationError
from app.services.uploads import UploadPolicy, company_logo_policy, user_avatar_policy

router = APIRouter()


async def _relay_upload(file: UploadFile | None, policy: UploadPolicy, uploads) -> UploadOut:
    if file is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail="No file provided")

    try:
        # Multipart parsing already spooled the body; refuse before copying it into memory.
        if file.size is not None:
            policy.validate(content_type=file.content_type, size=file.size)
        data = await file.read(policy.max_bytes + 1)
        url = await uploads.upload(policy, filename=file.filename, content_type=file.content_type, data=data)
    except RepositoryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)) from exc
    except ObjectStoreUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return UploadOut(url=url)


@router.post("/company-logo", response_model=UploadOut)
async def upload_company_logo(
    file: UploadFile | None = File(default=None),
    principal=Depends(get_human_principal),
    settings: Settings = Depends(get_settings),
    uploads=Depends(get_upload_service),
) -> UploadOut:
    try:
        principal.require_scopes({"upload:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return await _relay_upload(file, company_logo_policy(settings), uploads)


@router.post("/user-avatar", response_model=UploadOut)
async def upload_user_avatar(
    file: UploadFile | None = File(default=None),
    principal=Depends(get_human_principal),
    settings: Settings = Depends(get_settings),
    uploads=Depends(get_upload_service),
) -> UploadOut:
    try:
        principal.require_scopes({"upload:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return await _relay_upload(file, user_avatar_policy(settings), uploads)
