from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from app.services.admin_registry import ADMIN_EMAILS_KEY, AdminRegistry
from app.services.repository import RepositoryConflictError, RepositoryNotFoundError, RepositoryValidationError
from app.services.store import InMemoryRecordStore


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_bootstrap_emails_seed_an_absent_registry() -> None:
    store = InMemoryRecordStore()
    registry = AdminRegistry(store, bootstrap_emails=[" Root@Example.com ", "root@example.com", "ops@example.com"])

    emails = asyncio.run(registry.list_emails())

    assert emails == ["root@example.com", "ops@example.com"]
    assert store.records[ADMIN_EMAILS_KEY] == ["root@example.com", "ops@example.com"]


def test_bootstrap_emails_ignored_once_registry_exists() -> None:
    store = InMemoryRecordStore({ADMIN_EMAILS_KEY: ["owner@example.com"]})
    registry = AdminRegistry(store, bootstrap_emails=["root@example.com"])

    assert asyncio.run(registry.is_admin("root@example.com")) is False
    assert asyncio.run(registry.is_admin("OWNER@example.com")) is True


def test_registry_without_bootstrap_has_no_admins() -> None:
    store = InMemoryRecordStore()
    registry = AdminRegistry(store)

    assert asyncio.run(registry.list_emails()) == []
    assert asyncio.run(registry.is_admin(None)) is False
    assert ADMIN_EMAILS_KEY not in store.records


def test_add_is_idempotent() -> None:
    store = InMemoryRecordStore({ADMIN_EMAILS_KEY: ["owner@example.com"]})
    registry = AdminRegistry(store)

    first = asyncio.run(registry.add("New@Example.com"))
    second = asyncio.run(registry.add("new@example.com"))

    assert first == ["owner@example.com", "new@example.com"]
    assert second == first
    assert store.records[ADMIN_EMAILS_KEY] == first


def test_add_rejects_blank_email() -> None:
    registry = AdminRegistry(InMemoryRecordStore({ADMIN_EMAILS_KEY: ["owner@example.com"]}))

    with pytest.raises(RepositoryValidationError):
        asyncio.run(registry.add("   "))


def test_removing_last_admin_is_refused() -> None:
    store = InMemoryRecordStore({ADMIN_EMAILS_KEY: ["owner@example.com"]})
    registry = AdminRegistry(store)

    with pytest.raises(RepositoryConflictError):
        asyncio.run(registry.remove("owner@example.com"))

    assert store.records[ADMIN_EMAILS_KEY] == ["owner@example.com"]


def test_removing_unknown_admin_is_not_found() -> None:
    registry = AdminRegistry(InMemoryRecordStore({ADMIN_EMAILS_KEY: ["owner@example.com", "ops@example.com"]}))

    with pytest.raises(RepositoryNotFoundError):
        asyncio.run(registry.remove("stranger@example.com"))


def test_non_list_record_reads_as_empty() -> None:
    registry = AdminRegistry(InMemoryRecordStore({ADMIN_EMAILS_KEY: {"emails": ["owner@example.com"]}}))

    assert asyncio.run(registry.list_emails()) == []


def test_manage_endpoints_round_trip(client: TestClient, store: InMemoryRecordStore) -> None:
    listed = client.get("/admin/manage", headers=_auth("admin-token"))
    assert listed.status_code == 200
    assert listed.json() == {"adminEmails": ["admin@example.com"]}

    added = client.post("/admin/manage", json={"email": "Alice@Example.com"}, headers=_auth("admin-token"))
    assert added.status_code == 200
    assert added.json() == {"success": True, "adminEmails": ["admin@example.com", "alice@example.com"]}

    # The new admin is recognized on the next request.
    promoted = client.get("/admin/jobs", headers=_auth("user-token"))
    assert promoted.status_code == 200

    removed = client.delete("/admin/manage/admin@example.com", headers=_auth("user-token"))
    assert removed.status_code == 200
    assert store.records["admin:emails"] == ["alice@example.com"]


def test_manage_refuses_last_admin_removal(client: TestClient, store: InMemoryRecordStore) -> None:
    response = client.delete("/admin/manage/admin@example.com", headers=_auth("admin-token"))

    assert response.status_code == 409
    assert response.json() == {"error": "cannot remove the last admin"}
    assert store.records["admin:emails"] == ["admin@example.com"]


def test_manage_unknown_email_returns_404(client: TestClient) -> None:
    response = client.delete("/admin/manage/nobody@example.com", headers=_auth("admin-token"))
    assert response.status_code == 404


def test_manage_rejects_malformed_email(client: TestClient) -> None:
    response = client.post("/admin/manage", json={"email": "not-an-email"}, headers=_auth("admin-token"))
    assert response.status_code == 422
