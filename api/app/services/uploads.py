from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass

from app.core.config import Settings
from app.services.object_store import SupabaseObjectStore
from app.services.repository import RepositoryValidationError

logger = logging.getLogger(__name__)

COMPANY_LOGO_CONTENT_TYPES = frozenset({"image/png", "image/jpeg", "image/jpg", "image/gif"})
_NAME_ALPHABET = string.digits + string.ascii_lowercase


@dataclass(frozen=True, slots=True)
class UploadPolicy:
    bucket: str
    max_bytes: int
    allowed_content_types: frozenset[str] | None = None
    allowed_content_type_prefix: str | None = None
    type_error: str = "Invalid file type."

    def validate(self, *, content_type: str | None, size: int) -> None:
        normalized = (content_type or "").split(";", maxsplit=1)[0].strip().lower()
        if self.allowed_content_types is not None and normalized not in self.allowed_content_types:
            raise RepositoryValidationError(self.type_error)
        if self.allowed_content_type_prefix is not None and not normalized.startswith(self.allowed_content_type_prefix):
            raise RepositoryValidationError(self.type_error)
        if size <= 0:
            raise RepositoryValidationError("File is empty.")
        if size > self.max_bytes:
            raise RepositoryValidationError(f"File too large. Maximum size is {_format_size(self.max_bytes)}.")


def company_logo_policy(settings: Settings) -> UploadPolicy:
    return UploadPolicy(
        bucket=settings.company_logo_bucket,
        max_bytes=settings.company_logo_max_bytes,
        allowed_content_types=COMPANY_LOGO_CONTENT_TYPES,
        type_error="Invalid file type. Only PNG, JPG, and GIF are allowed.",
    )


def user_avatar_policy(settings: Settings) -> UploadPolicy:
    return UploadPolicy(
        bucket=settings.user_avatar_bucket,
        max_bytes=settings.user_avatar_max_bytes,
        allowed_content_type_prefix="image/",
        type_error="Invalid file type. Only images are allowed.",
    )


def build_object_name(filename: str | None, *, now_ms: int | None = None) -> str:
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_NAME_ALPHABET) for _ in range(11))
    name = f"{timestamp}-{suffix}"
    if filename and "." in filename:
        extension = filename.rsplit(".", maxsplit=1)[1].strip().lower()
        if extension.isalnum():
            name = f"{name}.{extension}"
    return name


class UploadService:
    def __init__(self, object_store: SupabaseObjectStore) -> None:
        self.object_store = object_store

    async def upload(
        self,
        policy: UploadPolicy,
        *,
        filename: str | None,
        content_type: str | None,
        data: bytes,
    ) -> str:
        policy.validate(content_type=content_type, size=len(data))
        name = build_object_name(filename)
        url = await self.object_store.put(
            bucket=policy.bucket,
            name=name,
            data=data,
            content_type=content_type or "application/octet-stream",
        )
        logger.info("upload stored bucket=%s name=%s bytes=%s", policy.bucket, name, len(data))
        return url


def _format_size(num_bytes: int) -> str:
    if num_bytes >= 1024 * 1024 and num_bytes % (1024 * 1024) == 0:
        return f"{num_bytes // (1024 * 1024)}MB"
    return f"{num_bytes // 1024}KB"
