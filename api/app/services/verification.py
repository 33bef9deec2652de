from __future__ import annotations

import logging
from typing import Any

from app.core.auth import Principal
from app.services.identity import SupabaseIdentityProvider
from app.services.moderation import COMPANY_EMAIL_REVIEW, ModerationService
from app.services.records import COMPANY_EMAIL_KIND, generate_record_id, record_owner_id, utc_now_iso
from app.services.repository import RepositoryConflictError
from app.services.store import RecordStore

logger = logging.getLogger(__name__)

# Verification state mirrored into the user's identity metadata. A rejected
# user may apply again; a verified user may not.
USER_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "none": frozenset({"pending"}),
    "pending": frozenset({"pending", "pass", "no"}),
    "no": frozenset({"pending"}),
    "pass": frozenset(),
}


# Only decisions on the most recent application are mirrored into metadata.
CURRENT_APPLICATION_KEY = "companyEmailApplicationId"


def current_company_email_status(user_metadata: dict[str, Any]) -> str:
    status = user_metadata.get("companyEmailStatus")
    if isinstance(status, str) and status in USER_STATUS_TRANSITIONS:
        return status
    return "none"


class CompanyEmailVerificationService:
    def __init__(
        self,
        store: RecordStore,
        identity: SupabaseIdentityProvider,
        moderation: ModerationService,
    ) -> None:
        self.store = store
        self.identity = identity
        self.moderation = moderation

    async def apply(self, principal: Principal, company_email: str) -> dict[str, Any]:
        from_status = current_company_email_status(principal.user_metadata)
        if "pending" not in USER_STATUS_TRANSITIONS[from_status]:
            raise RepositoryConflictError(f"company email already verified (status={from_status})")

        application_id = generate_record_id(COMPANY_EMAIL_KIND)
        application = {
            "id": application_id,
            "ownerId": principal.subject,
            "ownerEmail": principal.email,
            "companyEmail": company_email,
            "status": "pending",
            "createdAt": utc_now_iso(),
        }
        await self.store.set(application_id, application)

        await self.identity.update_user_metadata(
            principal.subject,
            {
                **principal.user_metadata,
                "companyEmail": company_email,
                "companyEmailStatus": "pending",
                "companyEmailVerified": False,
                CURRENT_APPLICATION_KEY: application_id,
            },
        )
        logger.info("company email application submitted id=%s owner_id=%s", application_id, principal.subject)
        return application

    async def approve(self, application_id: str, *, reviewer_id: str) -> dict[str, Any]:
        application = await self.moderation.approve(COMPANY_EMAIL_REVIEW, application_id, reviewer_id=reviewer_id)
        await self._sync_owner_metadata(
            application,
            {
                "companyEmail": application.get("companyEmail"),
                "companyEmailVerified": True,
                "companyEmailStatus": "pass",
            },
        )
        return application

    async def reject(self, application_id: str, *, reviewer_id: str, reason: str | None = None) -> dict[str, Any]:
        application = await self.moderation.reject(
            COMPANY_EMAIL_REVIEW,
            application_id,
            reviewer_id=reviewer_id,
            reason=reason,
        )
        # The submitted address stays on the profile so the user can resubmit.
        await self._sync_owner_metadata(application, {"companyEmailStatus": "no", "companyEmailVerified": False})
        return application

    async def _sync_owner_metadata(self, application: dict[str, Any], changes: dict[str, Any]) -> None:
        owner_id = record_owner_id(application)
        owner = await self.identity.get_user(owner_id) if owner_id else None
        if owner is None:
            logger.warning("company email owner missing; metadata not synced application_id=%s", application.get("id"))
            return

        current_id = owner.user_metadata.get(CURRENT_APPLICATION_KEY)
        if current_id is not None and current_id != application.get("id"):
            logger.warning(
                "company email application superseded; metadata not synced application_id=%s current_id=%s",
                application.get("id"),
                current_id,
            )
            return

        from_status = current_company_email_status(owner.user_metadata)
        to_status = changes["companyEmailStatus"]
        if to_status not in USER_STATUS_TRANSITIONS[from_status]:
            logger.warning(
                "company email status change refused; metadata not synced application_id=%s from_status=%s to_status=%s",
                application.get("id"),
                from_status,
                to_status,
            )
            return
        await self.identity.update_user_metadata(owner.id, {**owner.user_metadata, **changes})
