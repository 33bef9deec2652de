from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from app.services.identity import IdentityProviderError, SupabaseIdentityProvider
from app.services.records import (
    COMPANY_EMAIL_KIND,
    JOB_KIND,
    TALENT_KIND,
    created_at_sort_key,
    load_record,
    record_owner_id,
    record_prefix,
    utc_now_iso,
)
from app.services.repository import RepositoryConflictError
from app.services.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReviewKind:
    kind: str
    approved_status: str
    rejected_status: str
    default_rejection_reason: str
    transitions: dict[str, frozenset[str]]
    # Status assumed for records written before moderation existed.
    legacy_status: str
    enrich_owner: bool


JOB_REVIEW = ReviewKind(
    kind=JOB_KIND,
    approved_status="approved",
    rejected_status="rejected",
    default_rejection_reason=(
        "未通过审核，您的企业可能：\n"
        "- 不是 top20 交易所\n"
        "- 过于早期/看不出业务形态\n"
        "- 公开信息不足\n"
        "- 可持续运营公信力不足（如纯meme）"
    ),
    transitions={
        "pending": frozenset({"approved", "rejected"}),
        "approved": frozenset(),
        "rejected": frozenset(),
    },
    legacy_status="approved",
    enrich_owner=True,
)

TALENT_REVIEW = ReviewKind(
    kind=TALENT_KIND,
    approved_status="approved",
    rejected_status="rejected",
    default_rejection_reason="经历 / 删除部分过于模糊",
    transitions={
        "pending": frozenset({"approved", "rejected"}),
        "approved": frozenset(),
        "rejected": frozenset(),
    },
    legacy_status="approved",
    enrich_owner=True,
)

COMPANY_EMAIL_REVIEW = ReviewKind(
    kind=COMPANY_EMAIL_KIND,
    approved_status="pass",
    rejected_status="no",
    default_rejection_reason="未通过：企业邮箱与域名未对应",
    transitions={
        "pending": frozenset({"pass", "no"}),
        "pass": frozenset(),
        "no": frozenset(),
    },
    legacy_status="pending",
    enrich_owner=False,
)


class ModerationService:
    def __init__(self, store: RecordStore, identity: SupabaseIdentityProvider) -> None:
        self.store = store
        self.identity = identity

    async def list_for_review(self, review: ReviewKind, status: str = "pending") -> list[dict[str, Any]]:
        rows = [row for row in await self.store.get_by_prefix(record_prefix(review.kind)) if isinstance(row, dict)]
        if status != "all":
            rows = [row for row in rows if (row.get("status") or review.legacy_status) == status]
        rows.sort(key=created_at_sort_key, reverse=True)
        if not review.enrich_owner:
            return rows
        return list(await asyncio.gather(*(self._enrich_with_owner(row) for row in rows)))

    async def approve(self, review: ReviewKind, record_id: str, *, reviewer_id: str) -> dict[str, Any]:
        return await self._transition(review, record_id, to_status=review.approved_status, reviewer_id=reviewer_id)

    async def reject(
        self,
        review: ReviewKind,
        record_id: str,
        *,
        reviewer_id: str,
        reason: str | None = None,
    ) -> dict[str, Any]:
        return await self._transition(
            review,
            record_id,
            to_status=review.rejected_status,
            reviewer_id=reviewer_id,
            reason=reason or review.default_rejection_reason,
        )

    async def _transition(
        self,
        review: ReviewKind,
        record_id: str,
        *,
        to_status: str,
        reviewer_id: str,
        reason: str | None = None,
    ) -> dict[str, Any]:
        record = await load_record(self.store, kind=review.kind, record_id=record_id)
        from_status = record.get("status") or review.legacy_status
        if from_status == to_status:
            logger.info("review no-op kind=%s id=%s status=%s", review.kind, record_id, to_status)
            return record

        self._validate_transition(review, from_status=from_status, to_status=to_status)

        record["status"] = to_status
        record["reviewedAt"] = utc_now_iso()
        record["reviewedBy"] = reviewer_id
        if reason is not None:
            record["rejectionReason"] = reason
        await self.store.set(record_id, record)
        logger.info(
            "review applied kind=%s id=%s from_status=%s to_status=%s reviewer_id=%s",
            review.kind,
            record_id,
            from_status,
            to_status,
            reviewer_id,
        )
        return record

    @staticmethod
    def _validate_transition(review: ReviewKind, *, from_status: str, to_status: str) -> None:
        allowed = review.transitions.get(from_status)
        if not allowed or to_status not in allowed:
            raise RepositoryConflictError(f"invalid {review.kind} status transition: {from_status} -> {to_status}")

    async def _enrich_with_owner(self, row: dict[str, Any]) -> dict[str, Any]:
        owner_id = record_owner_id(row)
        if owner_id is None:
            return row
        try:
            owner = await self.identity.get_user(owner_id)
        except IdentityProviderError as exc:
            logger.warning("owner lookup failed for review id=%s error=%s", row.get("id"), exc)
            return row
        if owner is None:
            return row
        return {
            **row,
            "ownerEmail": owner.email,
            "companyEmailVerified": owner.user_metadata.get("companyEmailVerified") is True,
        }
