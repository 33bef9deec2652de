from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_profile_service, get_verification_service
from app.core.security import get_human_principal
from app.schemas.company_emails import ApplicationMutationOut, CompanyEmailApplication, CompanyEmailApplyRequest
from app.schemas.settings import SettingsMutationOut, SettingsOut, SettingsUpdateRequest, UserSettings
from app.services.identity import IdentityUnavailableError
from app.services.repository import RepositoryConflictError, RepositoryUnavailableError

router = APIRouter()


@router.get("", response_model=SettingsOut)
async def get_settings_view(
    principal=Depends(get_human_principal),
    profiles=Depends(get_profile_service),
) -> SettingsOut:
    return SettingsOut(user=UserSettings.model_validate(profiles.get_settings(principal)))


@router.post("", response_model=SettingsMutationOut)
async def update_settings(
    payload: SettingsUpdateRequest,
    principal=Depends(get_human_principal),
    profiles=Depends(get_profile_service),
) -> SettingsMutationOut:
    try:
        principal.require_scopes({"profile:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    try:
        view = await profiles.update_settings(principal, name=payload.name, avatar=payload.avatar)
    except IdentityUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return SettingsMutationOut(user=UserSettings.model_validate(view))


@router.post("/company-email", response_model=ApplicationMutationOut)
async def apply_for_company_email_verification(
    payload: CompanyEmailApplyRequest,
    principal=Depends(get_human_principal),
    verification=Depends(get_verification_service),
) -> ApplicationMutationOut:
    try:
        principal.require_scopes({"profile:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    try:
        row = await verification.apply(principal, payload.company_email)
    except (RepositoryUnavailableError, IdentityUnavailableError) as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ApplicationMutationOut(application=CompanyEmailApplication.model_validate(row))
