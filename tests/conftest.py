"""Pytest fixtures for the Google OAuth2 login demo tests.

This module provides test fixtures that ensure:
1. No calls are made to Google (the OAuth client is replaced by a mock)
2. Isolated test environment with controlled configuration
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("ENVIRONMENT", "development")

from fastapi.testclient import TestClient

from google0auth.api.app import create_app
from google0auth.security.google import (
    AuthorizationRedirect,
    GoogleOAuth,
    GoogleUserInfo,
    get_google_oauth,
)
from google0auth.security.session import create_session_token


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset cached settings and OAuth client before each test."""
    from google0auth.config import get_settings

    get_settings.cache_clear()
    get_google_oauth.cache_clear()
    yield
    get_settings.cache_clear()
    get_google_oauth.cache_clear()


@pytest.fixture
def google_user() -> GoogleUserInfo:
    """Profile returned by the mocked Google userinfo endpoint."""
    return GoogleUserInfo(
        sub="109876543210",
        email="test@example.com",
        name="Test User",
        picture="https://example.com/photo.jpg",
        email_verified=True,
    )


@pytest.fixture
def mock_google_oauth(google_user: GoogleUserInfo):
    """Mock Google OAuth to prevent external authentication calls."""
    mock_instance = MagicMock(spec=GoogleOAuth)
    mock_instance.is_configured = True
    mock_instance.create_authorization_redirect.return_value = AuthorizationRedirect(
        url="https://accounts.google.com/o/oauth2/v2/auth?state=test-state",
        state="test-state",
        code_verifier="test-code-verifier",
    )
    mock_instance.authenticate = AsyncMock(return_value=google_user)
    return mock_instance


@pytest.fixture
def app(mock_google_oauth):
    """Application with the Google client replaced by the mock."""
    application = create_app()
    application.dependency_overrides[get_google_oauth] = lambda: mock_google_oauth
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous client that does not follow redirects."""
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def session_token(google_user: GoogleUserInfo) -> str:
    """A valid session token for the test user."""
    return create_session_token(google_user.sub, google_user.to_attributes())


@pytest.fixture
def authenticated_client(client: TestClient, session_token: str) -> TestClient:
    """Client carrying a valid session cookie."""
    client.cookies.set("google0auth_session", session_token)
    return client
