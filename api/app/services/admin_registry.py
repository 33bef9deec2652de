from __future__ import annotations

import logging
from collections.abc import Iterable

from app.services.repository import RepositoryConflictError, RepositoryNotFoundError, RepositoryValidationError
from app.services.store import RecordStore

ADMIN_EMAILS_KEY = "admin:emails"

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str | None:
    if not isinstance(email, str):
        return None
    normalized = email.strip().lower()
    return normalized or None


class AdminRegistry:
    """Set of admin emails stored as one JSON array under ``admin:emails``.

    When the record has never been written, the configured bootstrap emails are
    persisted on first read. After that the stored list is authoritative and the
    bootstrap configuration is ignored.
    """

    def __init__(self, store: RecordStore, bootstrap_emails: Iterable[str] = ()) -> None:
        self.store = store
        self.bootstrap_emails = _dedupe(normalize_email(email) for email in bootstrap_emails)

    async def list_emails(self) -> list[str]:
        return await self._load()

    async def is_admin(self, email: str | None) -> bool:
        normalized = normalize_email(email)
        if normalized is None:
            return False
        return normalized in await self._load()

    async def add(self, email: str) -> list[str]:
        normalized = normalize_email(email)
        if normalized is None:
            raise RepositoryValidationError("email is required")

        emails = await self._load()
        if normalized in emails:
            return emails

        emails.append(normalized)
        await self.store.set(ADMIN_EMAILS_KEY, emails)
        logger.info("admin email added email=%s total=%s", normalized, len(emails))
        return emails

    async def remove(self, email: str) -> list[str]:
        normalized = normalize_email(email)
        if normalized is None:
            raise RepositoryValidationError("email is required")

        emails = await self._load()
        if normalized not in emails:
            raise RepositoryNotFoundError("admin email not found")

        remaining = [item for item in emails if item != normalized]
        if not remaining:
            raise RepositoryConflictError("cannot remove the last admin")

        await self.store.set(ADMIN_EMAILS_KEY, remaining)
        logger.info("admin email removed email=%s total=%s", normalized, len(remaining))
        return remaining

    async def _load(self) -> list[str]:
        value = await self.store.get(ADMIN_EMAILS_KEY)
        if value is None:
            if not self.bootstrap_emails:
                return []
            seeded = list(self.bootstrap_emails)
            await self.store.set(ADMIN_EMAILS_KEY, seeded)
            logger.info("admin registry seeded from bootstrap configuration total=%s", len(seeded))
            return seeded
        if not isinstance(value, list):
            logger.warning("admin registry record is not a list; treating as empty")
            return []
        return _dedupe(normalize_email(item) for item in value)


def _dedupe(emails: Iterable[str | None]) -> list[str]:
    seen: list[str] = []
    for email in emails:
        if email and email not in seen:
            seen.append(email)
    return seen
