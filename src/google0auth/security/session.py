"""Session management using signed JWT tokens.

Two kinds of token are issued, each stored in its own HTTP-only cookie:

- **session**: the authenticated principal, valid for
  `session_max_age_seconds`
- **authorization request**: the pending OAuth2 login (state, PKCE code
  verifier and the URL to return to), valid for ten minutes

Keeping both in signed cookies means no server-side store is needed and any
worker can serve any request.

## Security

- Tokens are signed with the application secret key
- Cookies are HTTP-only to prevent XSS access
- Cookies are Secure in production (HTTPS only)
- SameSite=Lax so the cookie survives the redirect back from Google

## Session Token Structure

```json
{
  "sub": "google-subject-id",
  "iat": 1234567890,
  "exp": 1234596690,
  "type": "session",
  "attrs": {"email": "user@example.com", "name": "User"}
}
```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from google0auth.config import get_settings

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"
AUTHORIZATION_REQUEST_TOKEN_TYPE = "authorization_request"

AUTHORIZATION_REQUEST_COOKIE = "google0auth_authorization_request"
AUTHORIZATION_REQUEST_MAX_AGE_SECONDS = 600


@dataclass
class SessionData:
    """Data stored in the session token."""

    subject: str
    created_at: datetime
    expires_at: datetime
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def is_expired(self) -> bool:
        """Check if the session has expired."""
        return datetime.now(timezone.utc) > self.expires_at


@dataclass
class AuthorizationRequest:
    """A login that has been started but not yet completed."""

    state: str
    code_verifier: str
    redirect_to: str = "/"


def _encode(payload: dict[str, Any], expires_delta: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        **payload,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def _decode(token: str, token_type: str) -> dict[str, Any] | None:
    settings = get_settings()

    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token verification failed: {e}")
        return None

    if payload.get("type") != token_type:
        logger.debug(f"Invalid token type, expected {token_type}")
        return None

    return payload


def create_session_token(
    subject: str,
    attributes: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session token for an authenticated principal.

    Args:
        subject: Stable identifier of the principal (Google `sub`)
        attributes: User attributes to carry in the session (email, name, ...)
        expires_delta: Custom expiration time (or use default from settings)

    Returns:
        Signed JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=get_settings().session_max_age_seconds)

    return _encode(
        {
            "sub": subject,
            "type": SESSION_TOKEN_TYPE,
            "attrs": attributes or {},
        },
        expires_delta,
    )


def verify_session_token(token: str) -> SessionData | None:
    """Verify and decode a session token.

    Args:
        token: The JWT token string

    Returns:
        SessionData if valid, None if invalid or expired
    """
    payload = _decode(token, SESSION_TOKEN_TYPE)
    if payload is None:
        return None

    try:
        session = SessionData(
            subject=str(payload["sub"]),
            created_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            attributes=dict(payload.get("attrs") or {}),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"Invalid token payload: {e}")
        return None

    if session.is_expired:
        logger.debug("Session token expired")
        return None

    return session


def create_authorization_request_token(request: AuthorizationRequest) -> str:
    """Sign a pending authorization request for the login cookie."""
    return _encode(
        {
            "type": AUTHORIZATION_REQUEST_TOKEN_TYPE,
            "state": request.state,
            "cv": request.code_verifier,
            "redirect_to": request.redirect_to,
        },
        timedelta(seconds=AUTHORIZATION_REQUEST_MAX_AGE_SECONDS),
    )


def verify_authorization_request_token(token: str) -> AuthorizationRequest | None:
    """Decode a pending authorization request, or None if invalid or expired."""
    payload = _decode(token, AUTHORIZATION_REQUEST_TOKEN_TYPE)
    if payload is None:
        return None

    try:
        return AuthorizationRequest(
            state=payload["state"],
            code_verifier=payload["cv"],
            redirect_to=payload.get("redirect_to") or "/",
        )
    except KeyError as e:
        logger.debug(f"Invalid authorization request payload: {e}")
        return None
