from fastapi import Depends, Header, HTTPException, status

from app.api.deps import get_admin_registry
from app.core.auth import Principal
from app.core.config import Settings, get_settings
from app.services.admin_registry import AdminRegistry
from app.services.identity import (
    IdentityUnavailableError,
    InvalidTokenError,
    SupabaseIdentityProvider,
    get_identity_provider,
)
from app.services.repository import RepositoryUnavailableError

ROLE_SCOPES: dict[str, set[str]] = {
    "user": {"catalog:read", "submission:write", "profile:write", "upload:write"},
    "admin": {
        "catalog:read",
        "submission:write",
        "profile:write",
        "upload:write",
        "moderation:read",
        "moderation:write",
        "admin:write",
    },
}


async def get_human_principal(
    settings: Settings = Depends(get_settings),
    identity: SupabaseIdentityProvider = Depends(get_identity_provider),
    registry: AdminRegistry = Depends(get_admin_registry),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Principal:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="human auth requires bearer token",
        )

    token = authorization.split(" ", maxsplit=1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="empty bearer token")

    # The public anon key is a valid JWT but identifies nobody.
    if settings.supabase_anon_key and token == settings.supabase_anon_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="anonymous token not accepted")

    try:
        user = await identity.resolve_token(token)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except IdentityUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    try:
        role = "admin" if await registry.is_admin(user.email) else "user"
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return Principal(
        subject=user.id,
        role=role,
        scopes=set(ROLE_SCOPES[role]),
        email=user.email,
        user_metadata=user.user_metadata,
    )
