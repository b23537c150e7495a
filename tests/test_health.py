import pytest

pytest.importorskip("httpx", reason="httpx requis pour les tests client FastAPI")

from fastapi.testclient import TestClient

from app.config.settings import settings
from app.deps.services import get_record_store_factory
from app.main import app
from app.services.record_store import get_record_store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_record_store_factory] = lambda: (lambda: store)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_root_and_health(client):
    assert client.get("/").json() == {"ok": True, "service": "leaderboard-api"}
    assert client.get("/health").json() == {"ok": True, "service": settings.APP_NAME}


def test_health_db_ok(client):
    payload = client.get("/health/db").json()

    assert payload["ok"] is True
    assert payload["collection"] == settings.MONGODB_COLLECTION_NAME


def test_health_db_reports_failure(client, store):
    store.fail_reads = True

    payload = client.get("/health/db").json()

    assert payload["ok"] is False
    assert "ping failed" in payload["error"]


def test_cors_allows_itch_subdomain(client):
    response = client.get("/health", headers={"Origin": "https://someone.itch.io"})

    assert response.headers.get("access-control-allow-origin") == "https://someone.itch.io"


def test_cors_rejects_other_origin(client):
    response = client.get("/health", headers={"Origin": "https://evil.example.com"})

    assert "access-control-allow-origin" not in response.headers
