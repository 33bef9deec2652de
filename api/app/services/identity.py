from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import httpx

from app.core.config import get_settings
from app.services.repository import coerce_json_dict, coerce_text


class IdentityProviderError(Exception):
    """Base identity provider error."""


class IdentityUnavailableError(IdentityProviderError):
    """Raised when Supabase auth is unreachable, misconfigured or failing."""


class InvalidTokenError(IdentityProviderError):
    """Raised when a bearer token does not resolve to a user."""


class IdentityRequestError(IdentityProviderError):
    """Raised when Supabase rejects an admin request (e.g. duplicate signup)."""


@dataclass(slots=True)
class IdentityUser:
    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> IdentityUser:
        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("invalid bearer token")
        return cls(
            id=user_id,
            email=coerce_text(payload.get("email")),
            user_metadata=coerce_json_dict(payload.get("user_metadata")),
        )


class SupabaseIdentityProvider:
    """Thin client for the Supabase Auth (GoTrue) REST API."""

    def __init__(
        self,
        *,
        supabase_url: str | None,
        anon_key: str | None,
        service_role_key: str | None,
        timeout_seconds: float,
    ) -> None:
        self.supabase_url = supabase_url.rstrip("/") if supabase_url else None
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout_seconds = timeout_seconds

    async def resolve_token(self, token: str) -> IdentityUser:
        if not self.supabase_url or not self.anon_key:
            raise IdentityUnavailableError("Supabase auth is not configured")

        response = await self._request(
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {token}", "apikey": self.anon_key},
        )
        if response.status_code in {401, 403}:
            raise InvalidTokenError("invalid bearer token")
        if response.status_code != 200:
            raise IdentityUnavailableError("Supabase auth verification failed")
        return IdentityUser.from_payload(response.json())

    async def get_user(self, user_id: str) -> IdentityUser | None:
        response = await self._admin_request("GET", f"/auth/v1/admin/users/{user_id}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise IdentityUnavailableError(f"Supabase user lookup failed status={response.status_code}")
        return IdentityUser.from_payload(response.json())

    async def update_user_metadata(self, user_id: str, user_metadata: dict[str, Any]) -> IdentityUser:
        """Replace the user's metadata; callers merge with the current values first."""
        response = await self._admin_request(
            "PUT",
            f"/auth/v1/admin/users/{user_id}",
            json={"user_metadata": user_metadata},
        )
        if response.status_code != 200:
            raise IdentityUnavailableError(f"Supabase user update failed status={response.status_code}")
        return IdentityUser.from_payload(response.json())

    async def create_user(self, *, email: str, password: str, user_metadata: dict[str, Any]) -> IdentityUser:
        # No mail server is configured, so accounts are created pre-confirmed.
        response = await self._admin_request(
            "POST",
            "/auth/v1/admin/users",
            json={
                "email": email,
                "password": password,
                "user_metadata": user_metadata,
                "email_confirm": True,
            },
        )
        if response.status_code in {400, 409, 422}:
            raise IdentityRequestError(_error_message(response))
        if response.status_code not in {200, 201}:
            raise IdentityUnavailableError(f"Supabase user creation failed status={response.status_code}")
        return IdentityUser.from_payload(response.json())

    async def _admin_request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if not self.supabase_url or not self.service_role_key:
            raise IdentityUnavailableError("Supabase admin access is not configured")
        headers = {
            "Authorization": f"Bearer {self.service_role_key}",
            "apikey": self.service_role_key,
        }
        return await self._request(method, path, headers=headers, **kwargs)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                return await client.request(method, f"{self.supabase_url}{path}", **kwargs)
        except httpx.HTTPError as exc:  # pragma: no cover - network dependent
            raise IdentityUnavailableError("Supabase auth unavailable") from exc


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or "request rejected"
    if isinstance(payload, dict):
        for key in ("msg", "message", "error_description", "error"):
            message = payload.get(key)
            if isinstance(message, str) and message:
                return message
    return "request rejected"


@lru_cache
def get_identity_provider() -> SupabaseIdentityProvider:
    settings = get_settings()
    return SupabaseIdentityProvider(
        supabase_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        service_role_key=settings.supabase_service_role_key,
        timeout_seconds=settings.auth_timeout_seconds,
    )
