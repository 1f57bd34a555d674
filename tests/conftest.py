import os

# Cheap hashes keep the suite fast; must be set before settings load
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.main import app
from app.db import mongo
from app.services import media_service
from app.services.connection_registry import get_connection_registry


class FakeMediaService:
    """Stands in for Cloudinary; records uploads and can be told to fail."""

    def __init__(self):
        self.uploads = []
        self.fail_with = None

    async def upload(self, content, content_type, folder=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.uploads.append({"content": content, "content_type": content_type, "folder": folder})
        return f"https://res.cloudinary.com/demo/image/upload/{folder or 'chat'}/{len(self.uploads)}.png"

    async def close(self):
        return None


@pytest.fixture(autouse=True)
def database(monkeypatch):
    client = AsyncMongoMockClient()
    db = client["quickchat_test"]
    monkeypatch.setattr(mongo, "_client", client)
    monkeypatch.setattr(mongo, "_database", db)
    yield db


@pytest.fixture(autouse=True)
def media(monkeypatch):
    fake = FakeMediaService()
    monkeypatch.setattr(media_service, "_media_service", fake)
    return fake


@pytest.fixture(autouse=True)
def registry():
    reg = get_connection_registry()
    reg.clear()
    yield reg
    reg.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(client):
    """Signs a user up over HTTP and returns (userData, auth headers)."""
    def _make_user(name="Alice", email=None, password="secret123", bio="Hello there"):
        response = client.post("/api/auth/signup", json={
            "fullName": name,
            "email": email or f"{name.lower()}@example.com",
            "password": password,
            "bio": bio,
        })
        assert response.status_code == 200, response.text
        body = response.json()
        return body["userData"], {"Authorization": f"Bearer {body['token']}"}
    return _make_user
