from fastapi.testclient import TestClient

from api.dependencies import get_account_service
from api.main import app
from exceptions import DatabaseUnavailableError


class FailingService:
    def __init__(self, error: Exception):
        self.error = error

    async def register(self, *args):
        raise self.error

    async def login(self, *args):
        raise self.error

    async def get_profile(self, *args):
        raise self.error


def test_unexpected_error_is_plain_text_500(client: TestClient):
    app.dependency_overrides[get_account_service] = lambda: FailingService(
        RuntimeError("connection reset by peer")
    )

    response = client.post(
        "/api/users/login",
        json={"email": "jane@example.com", "password": "secret123"},
    )

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "connection reset by peer"


def test_database_unavailable_is_500(client: TestClient):
    app.dependency_overrides[get_account_service] = lambda: FailingService(
        DatabaseUnavailableError("mongodb://db:27017", "timed out")
    )

    response = client.post(
        "/api/users/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "secret123"},
    )

    assert response.status_code == 500
    assert response.json()["errors"][0]["error_type"] == "DatabaseUnavailableError"


def test_validation_runs_before_service(client: TestClient):
    app.dependency_overrides[get_account_service] = lambda: FailingService(
        RuntimeError("should not be reached")
    )

    response = client.post(
        "/api/users/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "123"},
    )

    assert response.status_code == 400
