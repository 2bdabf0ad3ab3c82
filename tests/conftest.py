import os

# Test settings must be in place before the app (and its cached settings) load
os.environ.setdefault("ACCOUNTS_JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("ACCOUNTS_BCRYPT_ROUNDS", "4")
os.environ.setdefault("ACCOUNTS_RATE_LIMIT_ENABLED", "false")

from typing import Any, Dict, Optional  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402
from bson.errors import InvalidId  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from config import get_settings  # noqa: E402

get_settings.cache_clear()

from api.dependencies import get_account_repository  # noqa: E402
from api.main import app  # noqa: E402
from exceptions import AccountExistsError  # noqa: E402


class InMemoryAccountRepository:
    """Dict-backed stand-in for MongoAccountRepository."""

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.create_calls = 0

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        for document in self.documents.values():
            if document["email"] == email:
                return dict(document)
        return None

    async def find_by_id(self, account_id: str) -> Optional[Dict[str, Any]]:
        try:
            object_id = ObjectId(account_id)
        except (InvalidId, TypeError):
            return None
        document = self.documents.get(object_id)
        return dict(document) if document else None

    async def create(self, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        self.create_calls += 1
        if await self.find_by_email(email) is not None:
            raise AccountExistsError(email)
        document = {
            "_id": ObjectId(),
            "name": name,
            "email": email,
            "password": password_hash,
            "date": datetime.now(timezone.utc),
        }
        self.documents[document["_id"]] = document
        return dict(document)


@pytest.fixture(name="repository")
def repository_fixture():
    """Provide an empty in-memory account repository"""
    return InMemoryAccountRepository()


@pytest.fixture(name="client")
def client_fixture(repository: InMemoryAccountRepository):
    """Provide a test client backed by the in-memory repository

    The client is not used as a context manager, so the lifespan
    (which connects to MongoDB) never runs.
    """
    app.dependency_overrides[get_account_repository] = lambda: repository

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client: TestClient):
    """Register an account through the API and return its token"""

    def _register(name="Jane Doe", email="jane@example.com", password="secret123"):
        response = client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _register
