from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any

from app.services.repository import RepositoryNotFoundError

JOB_KIND = "job"
TALENT_KIND = "talent"
COMPANY_EMAIL_KIND = "company-email"

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9


def record_prefix(kind: str) -> str:
    return f"{kind}:"


def generate_record_id(kind: str, *, now_ms: int | None = None) -> str:
    """Build ``<kind>:<unix-ms>:<base36 suffix>``; the id doubles as the store key."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{kind}:{timestamp}:{suffix}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def record_owner_id(record: dict[str, Any]) -> str | None:
    owner_id = record.get("ownerId") or record.get("userId")
    if isinstance(owner_id, str) and owner_id:
        return owner_id
    return None


def created_at_sort_key(record: dict[str, Any]) -> str:
    created_at = record.get("createdAt")
    return created_at if isinstance(created_at, str) else ""


async def load_record(store: Any, *, kind: str, record_id: str) -> dict[str, Any]:
    if not record_id.startswith(record_prefix(kind)):
        raise RepositoryNotFoundError(f"{kind} not found")
    record = await store.get(record_id)
    if not isinstance(record, dict):
        raise RepositoryNotFoundError(f"{kind} not found")
    return record
