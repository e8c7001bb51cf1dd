"""Shared test fixtures for API tests."""

import logging
import os
import uuid

# Set up test environment variables before any other imports
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-characters-for-testing")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from interview_prep.api.auth import get_jwt_service, get_token_config
from interview_prep.api.dependencies import get_provider, get_storage
from interview_prep.api.main import app
from tests.mocks.mock_provider import MockProvider

logger = logging.getLogger(__name__)

SAMPLE_SESSION = {
    "title": "Backend Engineer",
    "skills": "Go,SQL",
    "experience": "3 years",
    "description": "prep",
}
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="function")
def test_db(tmp_path):
    """Point the app at a fresh SQLite file for one test."""
    original_db_url = os.environ.get("DATABASE_URL")
    db_path = tmp_path / f"test_{uuid.uuid4().hex[:8]}.db"
    os.environ["DATABASE_URL"] = f"sqlite:///{db_path}"
    get_storage.cache_clear()

    yield db_path

    try:
        get_storage().dispose()
    except Exception as e:
        logger.debug(f"Failed to dispose database engine for {db_path}: {e}")

    if original_db_url is not None:
        os.environ["DATABASE_URL"] = original_db_url
    else:
        os.environ.pop("DATABASE_URL", None)
    get_storage.cache_clear()


@pytest.fixture
def mock_provider():
    return MockProvider()


@pytest.fixture(scope="function")
def client(test_db, mock_provider):
    """Create a test client with isolated database and a scripted provider."""
    get_token_config.cache_clear()
    get_jwt_service.cache_clear()
    original_overrides = app.dependency_overrides.copy()
    app.dependency_overrides[get_provider] = lambda: mock_provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides = original_overrides


def signup(client: TestClient, email: str, full_name: str = "Test User", password: str = TEST_PASSWORD) -> dict:
    """Register through the real endpoint and return the response body.

    The auth cookie set by the response is dropped so each request states
    its credentials explicitly.
    """
    response = client.post("/api/auth/signup", json={"fullName": full_name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    client.cookies.clear()
    return response.json()


@pytest.fixture
def auth_headers(client):
    body = signup(client, "alice@example.com", "Alice")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def other_auth_headers(client):
    body = signup(client, "bob@example.com", "Bob")
    return {"Authorization": f"Bearer {body['token']}"}


def create_session(client: TestClient, headers: dict, **overrides) -> dict:
    """Create a session and return the ``session`` object from the response."""
    payload = {**SAMPLE_SESSION, **overrides}
    response = client.post("/api/sessions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["session"]
