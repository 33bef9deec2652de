from __future__ import annotations

from functools import lru_cache
from urllib.parse import quote

import httpx

from app.core.config import get_settings


class ObjectStoreUnavailableError(Exception):
    """Raised when Supabase Storage is unreachable, misconfigured or rejects an upload."""


class SupabaseObjectStore:
    def __init__(self, *, supabase_url: str | None, service_role_key: str | None, timeout_seconds: float) -> None:
        self.supabase_url = supabase_url.rstrip("/") if supabase_url else None
        self.service_role_key = service_role_key
        self.timeout_seconds = timeout_seconds

    async def put(self, *, bucket: str, name: str, data: bytes, content_type: str) -> str:
        if not self.supabase_url or not self.service_role_key:
            raise ObjectStoreUnavailableError("Supabase storage is not configured")

        headers = {
            "Authorization": f"Bearer {self.service_role_key}",
            "apikey": self.service_role_key,
            "Content-Type": content_type,
            "x-upsert": "false",
        }
        url = f"{self.supabase_url}/storage/v1/object/{quote(bucket)}/{quote(name)}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, content=data, headers=headers)
        except httpx.HTTPError as exc:  # pragma: no cover - network dependent
            raise ObjectStoreUnavailableError("Supabase storage unavailable") from exc

        if response.status_code not in {200, 201}:
            raise ObjectStoreUnavailableError(f"Supabase storage upload failed status={response.status_code}")
        return self.public_url(bucket=bucket, name=name)

    def public_url(self, *, bucket: str, name: str) -> str:
        return f"{self.supabase_url}/storage/v1/object/public/{quote(bucket)}/{quote(name)}"


@lru_cache
def get_object_store() -> SupabaseObjectStore:
    settings = get_settings()
    return SupabaseObjectStore(
        supabase_url=settings.supabase_url,
        service_role_key=settings.supabase_service_role_key,
        timeout_seconds=settings.storage_timeout_seconds,
    )
