"""
Shared pytest fixtures for Holiday Email Orchestrator tests.
"""

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing orchestrator modules
# This ensures Settings validation passes during test collection
TEST_ACCESS_PASSWORD = "correct-horse-battery"
TEST_JWT_SECRET = "test-jwt-secret-with-at-least-32-characters"
TEST_API_KEY = "test-api-key"

os.environ.setdefault("ORCHESTRATOR_ACCESS_PASSWORD", TEST_ACCESS_PASSWORD)
os.environ.setdefault("ORCHESTRATOR_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("ORCHESTRATOR_API_KEY", TEST_API_KEY)
os.environ.setdefault("ORCHESTRATOR_DATABASE_URL", "sqlite://")
os.environ.setdefault("ORCHESTRATOR_LOG_JSON", "false")

from orchestrator.config.settings import Settings, load_settings, reset_settings  # noqa: E402
from orchestrator.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_config():
    """Reset cached settings between tests to avoid state leakage."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def access_password() -> str:
    """The access password configured for tests."""
    return TEST_ACCESS_PASSWORD


@pytest.fixture
def api_key() -> str:
    """The API key configured for tests."""
    return TEST_API_KEY


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return load_settings(
        access_password=TEST_ACCESS_PASSWORD,
        jwt_secret=TEST_JWT_SECRET,
        api_key=TEST_API_KEY,
        database_url="sqlite://",
    )


@pytest.fixture
def app(settings):
    """Application on a private in-memory database."""
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client with the lifespan running (tables created)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_token(app) -> str:
    """A valid session token for the app under test."""
    return app.state.token_service.issue().token


@pytest.fixture
def auth_headers(auth_token) -> dict[str, str]:
    """Headers accepted by the protected API."""
    return {
        "Authorization": f"Bearer {auth_token}",
        "X-API-Key": TEST_API_KEY,
    }


@pytest.fixture
def batch_payload() -> dict:
    """A valid batch logging body."""
    return {
        "holidayName": "Diwali",
        "tone": "warm",
        "audienceType": "business",
        "language": "en",
        "senderName": "Asha",
        "recipients": ["ravi@example.com", "meera@example.org"],
        "status": "sent",
    }
