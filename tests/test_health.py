from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from api.main import app_state


def test_liveness(client: TestClient):
    response = client.get("/api/health/live")

    assert response.status_code == 200
    assert response.json()["status"] == "alive"


def test_readiness_without_database_client(client: TestClient):
    app_state.pop("mongo_client", None)

    response = client.get("/api/health/ready")

    assert response.status_code == 503


def test_readiness_with_reachable_database(client: TestClient):
    mongo_client = MagicMock()
    mongo_client.admin.command = AsyncMock(return_value={"ok": 1})
    app_state["mongo_client"] = mongo_client
    try:
        response = client.get("/api/health/ready")
    finally:
        app_state.pop("mongo_client", None)

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_readiness_with_unreachable_database(client: TestClient):
    mongo_client = MagicMock()
    mongo_client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("timed out"))
    app_state["mongo_client"] = mongo_client
    try:
        response = client.get("/api/health/ready")
    finally:
        app_state.pop("mongo_client", None)

    assert response.status_code == 503


def test_root_lists_links(client: TestClient):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["users"] == "/api/users"
