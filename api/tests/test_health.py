from fastapi.testclient import TestClient

from app.main import app
from app.services.repository import RepositoryUnavailableError, get_repository


class UnavailableStore:
    async def ping(self) -> None:
        raise RepositoryUnavailableError("JB_DATABASE_URL is required")


def test_healthz() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_alias() -> None:
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_readyz_reports_ok_when_store_answers(client: TestClient) -> None:
    response = client.get("/readyz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_readyz_reports_unavailable_store() -> None:
    app.dependency_overrides[get_repository] = lambda: UnavailableStore()
    try:
        response = TestClient(app).get("/readyz")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json() == {"error": "JB_DATABASE_URL is required"}
