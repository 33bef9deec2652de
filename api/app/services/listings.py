from __future__ import annotations

import logging
from typing import Any

from app.services.identity import IdentityProviderError, SupabaseIdentityProvider
from app.services.records import (
    JOB_KIND,
    TALENT_KIND,
    created_at_sort_key,
    load_record,
    record_owner_id,
    record_prefix,
)
from app.services.store import RecordStore

logger = logging.getLogger(__name__)

PUBLIC_STATUS = "approved"


def is_publicly_visible(record: dict[str, Any]) -> bool:
    status = record.get("status")
    return not status or status == PUBLIC_STATUS


class ListingService:
    def __init__(self, store: RecordStore, identity: SupabaseIdentityProvider) -> None:
        self.store = store
        self.identity = identity

    async def list_jobs(self, category: str | None = None) -> list[dict[str, Any]]:
        jobs = await self._list_public(JOB_KIND)
        if category and category != "all":
            jobs = [job for job in jobs if job.get("category") == category]
        return jobs

    async def list_talents(self) -> list[dict[str, Any]]:
        return await self._list_public(TALENT_KIND)

    async def get_job(self, job_id: str) -> dict[str, Any]:
        return await self._get_enriched(JOB_KIND, job_id)

    async def get_talent(self, talent_id: str) -> dict[str, Any]:
        return await self._get_enriched(TALENT_KIND, talent_id)

    async def _list_public(self, kind: str) -> list[dict[str, Any]]:
        rows = await self.store.get_by_prefix(record_prefix(kind))
        visible = [row for row in rows if isinstance(row, dict) and is_publicly_visible(row)]
        return sorted(visible, key=created_at_sort_key, reverse=True)

    async def _get_enriched(self, kind: str, record_id: str) -> dict[str, Any]:
        # Detail views are not filtered by status.
        record = await load_record(self.store, kind=kind, record_id=record_id)
        record["companyEmailVerified"] = await self._owner_verified(record)
        return record

    async def _owner_verified(self, record: dict[str, Any]) -> bool:
        owner_id = record_owner_id(record)
        if owner_id is None:
            return False
        try:
            owner = await self.identity.get_user(owner_id)
        except IdentityProviderError as exc:
            logger.warning("owner lookup failed record_id=%s error=%s", record.get("id"), exc)
            return False
        if owner is None:
            return False
        return owner.user_metadata.get("companyEmailVerified") is True
