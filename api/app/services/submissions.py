from __future__ import annotations

import logging
from typing import Any

from app.core.auth import Principal
from app.schemas.jobs import JobCreateRequest, JobPosting
from app.schemas.talents import TalentCreateRequest, TalentProfile
from app.services.records import JOB_KIND, TALENT_KIND, generate_record_id, utc_now_iso
from app.services.store import RecordStore

logger = logging.getLogger(__name__)


class SubmissionService:
    """Persists new jobs and talent profiles as pending records owned by the caller."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def create_job(self, principal: Principal, payload: JobCreateRequest) -> JobPosting:
        job = JobPosting(
            **payload.model_dump(by_alias=False),
            **self._server_fields(JOB_KIND, principal),
        )
        await self.store.set(job.id, job.model_dump(by_alias=True, mode="json", exclude_none=True))
        logger.info("job submitted id=%s owner_id=%s", job.id, principal.subject)
        return job

    async def create_talent(self, principal: Principal, payload: TalentCreateRequest) -> TalentProfile:
        talent = TalentProfile(
            **payload.model_dump(by_alias=False),
            **self._server_fields(TALENT_KIND, principal),
        )
        await self.store.set(talent.id, talent.model_dump(by_alias=True, mode="json", exclude_none=True))
        logger.info("talent submitted id=%s owner_id=%s", talent.id, principal.subject)
        return talent

    @staticmethod
    def _server_fields(kind: str, principal: Principal) -> dict[str, Any]:
        return {
            "id": generate_record_id(kind),
            "owner_id": principal.subject,
            "status": "pending",
            "created_at": utc_now_iso(),
        }
