from __future__ import annotations

import logging
from typing import Any

from app.core.auth import Principal
from app.services.identity import IdentityUser, SupabaseIdentityProvider
from app.services.verification import current_company_email_status

logger = logging.getLogger(__name__)


def settings_view(user_id: str, email: str | None, user_metadata: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": user_id,
        "email": email,
        "name": user_metadata.get("name"),
        "avatar": user_metadata.get("avatar"),
        "companyEmail": user_metadata.get("companyEmail"),
        "companyEmailVerified": user_metadata.get("companyEmailVerified") is True,
        "companyEmailStatus": current_company_email_status(user_metadata),
    }


class ProfileService:
    def __init__(self, identity: SupabaseIdentityProvider) -> None:
        self.identity = identity

    def get_settings(self, principal: Principal) -> dict[str, Any]:
        return settings_view(principal.subject, principal.email, principal.user_metadata)

    async def update_settings(self, principal: Principal, *, name: str | None, avatar: str | None) -> dict[str, Any]:
        metadata = dict(principal.user_metadata)
        if name:
            metadata["name"] = name
        if avatar:
            metadata["avatar"] = avatar
        updated = await self.identity.update_user_metadata(principal.subject, metadata)
        logger.info("profile settings updated user_id=%s", principal.subject)
        return settings_view(updated.id, updated.email, updated.user_metadata)

    async def signup(self, *, email: str, password: str, name: str | None) -> IdentityUser:
        user_metadata = {"name": name} if name else {}
        user = await self.identity.create_user(email=email, password=password, user_metadata=user_metadata)
        logger.info("user signed up user_id=%s", user.id)
        return user
