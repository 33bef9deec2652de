from __future__ import annotations

import asyncio

import pytest

from app.services.moderation import COMPANY_EMAIL_REVIEW, JOB_REVIEW, ModerationService
from app.services.repository import RepositoryConflictError, RepositoryNotFoundError
from app.services.store import InMemoryRecordStore

JOB_ID = "job:1700000000000:aaaaaaaaa"


@pytest.fixture
def moderation(store: InMemoryRecordStore, identity) -> ModerationService:
    store.records[JOB_ID] = {
        "id": JOB_ID,
        "title": "Rust Engineer",
        "company": "Solana Shop",
        "description": "Programs.",
        "status": "pending",
        "ownerId": "user-1",
        "createdAt": "2023-11-14T22:13:20+00:00",
    }
    return ModerationService(store, identity)


def test_approve_stamps_reviewer(moderation: ModerationService, store: InMemoryRecordStore) -> None:
    record = asyncio.run(moderation.approve(JOB_REVIEW, JOB_ID, reviewer_id="admin-1"))

    assert record["status"] == "approved"
    assert record["reviewedBy"] == "admin-1"
    assert store.records[JOB_ID]["reviewedAt"] == record["reviewedAt"]
    assert "rejectionReason" not in store.records[JOB_ID]


def test_repeating_the_same_decision_is_a_no_op(moderation: ModerationService, store: InMemoryRecordStore) -> None:
    first = asyncio.run(moderation.approve(JOB_REVIEW, JOB_ID, reviewer_id="admin-1"))
    second = asyncio.run(moderation.approve(JOB_REVIEW, JOB_ID, reviewer_id="admin-2"))

    assert second["reviewedBy"] == "admin-1"
    assert second["reviewedAt"] == first["reviewedAt"]


def test_reversing_a_decision_is_a_conflict(moderation: ModerationService, store: InMemoryRecordStore) -> None:
    asyncio.run(moderation.approve(JOB_REVIEW, JOB_ID, reviewer_id="admin-1"))

    with pytest.raises(RepositoryConflictError):
        asyncio.run(moderation.reject(JOB_REVIEW, JOB_ID, reviewer_id="admin-1"))

    assert store.records[JOB_ID]["status"] == "approved"


def test_reject_uses_default_reason(moderation: ModerationService) -> None:
    record = asyncio.run(moderation.reject(JOB_REVIEW, JOB_ID, reviewer_id="admin-1", reason=""))

    assert record["status"] == "rejected"
    assert record["rejectionReason"] == JOB_REVIEW.default_rejection_reason


def test_legacy_record_cannot_be_rejected(moderation: ModerationService, store: InMemoryRecordStore) -> None:
    store.records["job:1600000000000:legacy000"] = {"id": "job:1600000000000:legacy000", "title": "Old"}

    noop = asyncio.run(moderation.approve(JOB_REVIEW, "job:1600000000000:legacy000", reviewer_id="admin-1"))
    assert "reviewedBy" not in noop

    with pytest.raises(RepositoryConflictError):
        asyncio.run(moderation.reject(JOB_REVIEW, "job:1600000000000:legacy000", reviewer_id="admin-1"))


def test_unknown_or_mismatched_ids_are_not_found(moderation: ModerationService) -> None:
    with pytest.raises(RepositoryNotFoundError):
        asyncio.run(moderation.approve(JOB_REVIEW, "job:1:missing", reviewer_id="admin-1"))
    with pytest.raises(RepositoryNotFoundError):
        asyncio.run(moderation.approve(COMPANY_EMAIL_REVIEW, JOB_ID, reviewer_id="admin-1"))


def test_review_list_enriches_owner(moderation: ModerationService, identity) -> None:
    identity.users["user-1"].user_metadata["companyEmailVerified"] = True

    rows = asyncio.run(moderation.list_for_review(JOB_REVIEW))

    assert len(rows) == 1
    assert rows[0]["ownerEmail"] == "alice@example.com"
    assert rows[0]["companyEmailVerified"] is True


def test_review_list_tolerates_missing_owner(moderation: ModerationService, store: InMemoryRecordStore) -> None:
    store.records[JOB_ID]["ownerId"] = "deleted-user"

    rows = asyncio.run(moderation.list_for_review(JOB_REVIEW))

    assert rows[0]["id"] == JOB_ID
    assert "ownerEmail" not in rows[0]
