from __future__ import annotations

from fastapi.testclient import TestClient


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_settings_defaults_for_fresh_user(client: TestClient) -> None:
    response = client.get("/settings", headers=_auth("bob-token"))

    assert response.status_code == 200
    assert response.json() == {
        "user": {
            "id": "user-2",
            "email": "bob@example.com",
            "name": None,
            "avatar": None,
            "companyEmail": None,
            "companyEmailVerified": False,
            "companyEmailStatus": "none",
        }
    }


def test_settings_update_merges_metadata(client: TestClient, identity) -> None:
    identity.users["user-1"].user_metadata.update({"avatar": "https://cdn.example/a.png", "companyEmailVerified": True})

    response = client.post("/settings", json={"name": "Alice L", "avatar": ""}, headers=_auth("user-token"))

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Alice L"
    assert user["avatar"] == "https://cdn.example/a.png"
    assert user["companyEmailVerified"] is True
    assert identity.users["user-1"].user_metadata["name"] == "Alice L"


def test_settings_require_authentication(client: TestClient) -> None:
    assert client.get("/settings").status_code == 401
    assert client.post("/settings", json={"name": "x"}).status_code == 401


def test_signup_creates_confirmed_user(client: TestClient, identity) -> None:
    response = client.post(
        "/auth/signup",
        json={"email": "carol@example.com", "password": "s3cret!", "name": "Carol"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["email"] == "carol@example.com"
    created = identity.users[body["user"]["id"]]
    assert created.user_metadata == {"name": "Carol"}


def test_signup_duplicate_email_is_rejected(client: TestClient) -> None:
    response = client.post("/auth/signup", json={"email": "alice@example.com", "password": "s3cret!"})

    assert response.status_code == 400
    assert response.json() == {"error": "A user with this email address has already been registered"}


def test_signup_validates_payload(client: TestClient) -> None:
    short_password = client.post("/auth/signup", json={"email": "dave@example.com", "password": "123"})
    bad_email = client.post("/auth/signup", json={"email": "dave", "password": "s3cret!"})

    assert short_password.status_code == 422
    assert bad_email.status_code == 422
