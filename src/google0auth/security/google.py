"""Google OAuth 2.0 client.

Implements the client side of the OAuth 2.0 authorization code flow (with
PKCE) for Google sign-in. The protocol work itself is done by Authlib's
httpx integration; this module only holds the Google endpoints and maps the
results into small dataclasses.

## Required Setup

1. Create a project in Google Cloud Console
2. Create OAuth 2.0 credentials (Web application)
3. Add `http://localhost:8080/login/oauth2/code/google` as an authorized
   redirect URI
4. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET environment variables

## OAuth Endpoints

- Authorization: https://accounts.google.com/o/oauth2/v2/auth
- Token: https://oauth2.googleapis.com/token
- User Info: https://openidconnect.googleapis.com/v1/userinfo
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from authlib.common.security import generate_token
from authlib.integrations.httpx_client import AsyncOAuth2Client

from google0auth.config import get_settings

logger = logging.getLogger(__name__)

REGISTRATION_ID = "google"

# Google OAuth endpoints
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


@dataclass
class GoogleUserInfo:
    """User information from Google."""

    sub: str
    email: str | None
    name: str | None
    picture: str | None
    email_verified: bool

    def to_attributes(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "email_verified": self.email_verified,
        }


@dataclass
class AuthorizationRedirect:
    """Where to send the user, plus the values to check on the way back."""

    url: str
    state: str
    code_verifier: str


class GoogleOAuth:
    """Google OAuth 2.0 client.

    Example:
        ```python
        oauth = GoogleOAuth()

        redirect = oauth.create_authorization_redirect()
        # Remember redirect.state and redirect.code_verifier, send user to redirect.url

        # On callback
        user_info = await oauth.authenticate(code, code_verifier)
        ```
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        scopes: list[str] | None = None,
    ):
        settings = get_settings()

        self.client_id = client_id or settings.google_client_id
        self.client_secret = client_secret or settings.google_client_secret
        self.redirect_uri = redirect_uri or settings.google_redirect_uri
        self.scopes = scopes or settings.google_scopes

        if not self.is_configured:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET environment variables."
            )

    @property
    def is_configured(self) -> bool:
        """Check if Google OAuth is properly configured."""
        return bool(self.client_id and self.client_secret)

    def _client(self) -> AsyncOAuth2Client:
        if not self.is_configured:
            raise RuntimeError("Google OAuth not configured")

        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.scopes),
            redirect_uri=self.redirect_uri,
            code_challenge_method="S256",
        )

    def create_authorization_redirect(self) -> AuthorizationRedirect:
        """Build the Google consent-screen URL with a fresh state and PKCE verifier."""
        client = self._client()
        code_verifier = generate_token(64)

        url, state = client.create_authorization_url(
            GOOGLE_AUTHORIZE_URL,
            state=generate_token(32),
            code_verifier=code_verifier,
        )
        return AuthorizationRedirect(url=url, state=state, code_verifier=code_verifier)

    async def authenticate(self, code: str, code_verifier: str) -> GoogleUserInfo:
        """Exchange an authorization code and load the user's profile.

        Raises:
            OAuthError: If Google rejects the code exchange
            httpx.HTTPError: If a request to Google fails
        """
        async with self._client() as client:
            await client.fetch_token(
                GOOGLE_TOKEN_URL,
                code=code,
                code_verifier=code_verifier,
            )
            response = await client.get(GOOGLE_USERINFO_URL)
            response.raise_for_status()
            data = response.json()

        return GoogleUserInfo(
            sub=data["sub"],
            email=data.get("email"),
            name=data.get("name"),
            picture=data.get("picture"),
            email_verified=data.get("email_verified", False),
        )


@lru_cache
def get_google_oauth() -> GoogleOAuth:
    """Get cached Google OAuth client instance."""
    return GoogleOAuth()
