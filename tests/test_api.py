"""Tests for the API endpoints behind the security filter."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from google0auth.api.app import create_app
from google0auth.security.filter import SAVED_REQUEST_COOKIE
from google0auth.security.google import get_google_oauth
from google0auth.security.session import create_session_token

LOGIN_PAGE = "/oauth2/authorization/google"


class TestPublicEndpoint:
    """GET /api/public is reachable by anyone."""

    def test_anonymous(self, client: TestClient):
        response = client.get("/api/public")

        assert response.status_code == 200
        assert response.text == "this is the public method1"
        assert response.headers["content-type"].startswith("text/plain")

    def test_authenticated(self, authenticated_client: TestClient):
        response = authenticated_client.get("/api/public")

        assert response.status_code == 200
        assert response.text == "this is the public method1"

    def test_head(self, client: TestClient):
        response = client.head("/api/public")

        assert response.status_code == 200

    def test_invalid_session_still_public(self, client: TestClient):
        client.cookies.set("google0auth_session", "garbage")
        response = client.get("/api/public")

        assert response.status_code == 200


class TestPrivateEndpoint:
    """GET /api/private requires a session."""

    def test_anonymous_redirected_to_login(self, client: TestClient):
        response = client.get("/api/private")

        assert response.status_code == 302
        assert response.headers["location"] == LOGIN_PAGE

    def test_authenticated(self, authenticated_client: TestClient):
        response = authenticated_client.get("/api/private")

        assert response.status_code == 200
        assert response.text == "this is the public method2"

    def test_expired_session_redirected(self, client: TestClient):
        client.cookies.set(
            "google0auth_session",
            create_session_token("123", expires_delta=timedelta(seconds=-1)),
        )
        response = client.get("/api/private")

        assert response.status_code == 302
        assert response.headers["location"] == LOGIN_PAGE

    def test_xhr_gets_401(self, client: TestClient):
        response = client.get("/api/private", headers={"X-Requested-With": "XMLHttpRequest"})

        assert response.status_code == 401
        assert "location" not in response.headers

    def test_redirect_saves_request(self, client: TestClient):
        response = client.get("/api/private?tab=1")

        assert response.status_code == 302
        assert SAVED_REQUEST_COOKIE in response.cookies

    def test_post_is_not_saved(self, client: TestClient):
        response = client.post("/api/private")

        assert response.status_code == 302
        assert SAVED_REQUEST_COOKIE not in response.cookies

    def test_repeated_requests_redirect_identically(self, client: TestClient):
        responses = [client.get("/api/private") for _ in range(3)]

        assert {r.status_code for r in responses} == {302}
        assert {r.headers["location"] for r in responses} == {LOGIN_PAGE}


class TestCatchAllRule:
    """Any path other than /api/public requires authentication."""

    @pytest.mark.parametrize("path", ["/", "/api/public/", "/api/other", "/docs"])
    def test_anonymous_redirected(self, client: TestClient, path):
        response = client.get(path)

        assert response.status_code == 302
        assert response.headers["location"] == LOGIN_PAGE

    def test_non_latin1_path_redirected(self, client: TestClient):
        response = client.get("/%E6%97%A5")

        assert response.status_code == 302
        assert response.headers["location"] == LOGIN_PAGE
        assert SAVED_REQUEST_COOKIE in response.cookies

    def test_authenticated_unknown_path_is_404(self, authenticated_client: TestClient):
        response = authenticated_client.get("/api/other")

        assert response.status_code == 404


class TestConfiguredPolicy:
    """The permit list and login page come from settings."""

    def test_public_paths_from_environment(self, monkeypatch):
        monkeypatch.setenv("PUBLIC_PATHS", '["/api/**"]')

        with TestClient(create_app(), follow_redirects=False) as client:
            response = client.get("/api/private")

        # Reachable through the policy, rejected by the handler itself
        assert response.status_code == 401

    def test_custom_login_page_keeps_authorization_endpoint_open(
        self, monkeypatch, mock_google_oauth
    ):
        monkeypatch.setenv("LOGIN_PAGE", "/login")
        app = create_app()
        app.dependency_overrides[get_google_oauth] = lambda: mock_google_oauth

        with TestClient(app, follow_redirects=False) as client:
            protected = client.get("/api/private")
            authorization = client.get("/oauth2/authorization/google")

        assert protected.status_code == 302
        assert protected.headers["location"] == "/login"
        assert authorization.status_code == 302
        assert authorization.headers["location"].startswith("https://accounts.google.com/")
