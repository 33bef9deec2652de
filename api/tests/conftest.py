from __future__ import annotations

import dataclasses
import os
from typing import Any

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JB_SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("JB_SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("JB_RECORD_STORE_BACKEND", "memory")
os.environ.setdefault("JB_OTEL_ENABLED", "false")

from app.core.config import get_settings  # noqa: E402
from app.main import app  # noqa: E402
from app.services.identity import IdentityRequestError, IdentityUser, InvalidTokenError, get_identity_provider  # noqa: E402
from app.services.object_store import get_object_store  # noqa: E402
from app.services.repository import get_repository  # noqa: E402
from app.services.store import InMemoryRecordStore  # noqa: E402

ADMIN_EMAIL = "admin@example.com"


class FakeIdentityProvider:
    def __init__(self) -> None:
        self.users: dict[str, IdentityUser] = {}
        self.tokens: dict[str, str] = {}
        self.passwords: dict[str, str] = {}

    def add_user(
        self,
        user_id: str,
        email: str | None,
        *,
        token: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> IdentityUser:
        user = IdentityUser(id=user_id, email=email, user_metadata=dict(metadata or {}))
        self.users[user_id] = user
        if token:
            self.tokens[token] = user_id
        return user

    async def resolve_token(self, token: str) -> IdentityUser:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise InvalidTokenError("invalid bearer token")
        return _copy_user(self.users[user_id])

    async def get_user(self, user_id: str) -> IdentityUser | None:
        user = self.users.get(user_id)
        return _copy_user(user) if user else None

    async def update_user_metadata(self, user_id: str, user_metadata: dict[str, Any]) -> IdentityUser:
        user = self.users[user_id]
        user.user_metadata = dict(user_metadata)
        return _copy_user(user)

    async def create_user(self, *, email: str, password: str, user_metadata: dict[str, Any]) -> IdentityUser:
        if any(user.email == email for user in self.users.values()):
            raise IdentityRequestError("A user with this email address has already been registered")
        user = self.add_user(f"user-{len(self.users) + 1}", email, metadata=user_metadata)
        self.passwords[user.id] = password
        return _copy_user(user)


class FakeObjectStore:
    def __init__(self) -> None:
        self.puts: list[dict[str, Any]] = []

    async def put(self, *, bucket: str, name: str, data: bytes, content_type: str) -> str:
        self.puts.append({"bucket": bucket, "name": name, "size": len(data), "content_type": content_type})
        return f"https://example.supabase.co/storage/v1/object/public/{bucket}/{name}"


def _copy_user(user: IdentityUser) -> IdentityUser:
    return dataclasses.replace(user, user_metadata=dict(user.user_metadata))


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore({"admin:emails": [ADMIN_EMAIL]})


@pytest.fixture
def identity() -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.add_user("admin-1", ADMIN_EMAIL, token="admin-token")
    provider.add_user("user-1", "alice@example.com", token="user-token", metadata={"name": "Alice"})
    provider.add_user("user-2", "bob@example.com", token="bob-token")
    return provider


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def client(store: InMemoryRecordStore, identity: FakeIdentityProvider, object_store: FakeObjectStore) -> TestClient:
    get_settings.cache_clear()
    app.dependency_overrides[get_repository] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_object_store] = lambda: object_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
