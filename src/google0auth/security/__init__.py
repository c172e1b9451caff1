"""Security configuration for the demo service.

Declares which requests need a logged-in user and wires in Google OAuth2
login.

## Policy

- `/api/public` is reachable by anyone
- every other request requires an authenticated session
- unauthenticated requests are redirected to `/oauth2/authorization/google`

## OAuth Flow

1. Security filter redirects an anonymous request to the login page
2. Login page redirects to Google's consent screen (state + PKCE)
3. Google redirects back to `/login/oauth2/code/google` with a code
4. Code is exchanged for tokens and the user profile is fetched
5. A signed session cookie is set and the user is sent back to the saved URL

The protocol work in steps 2-4 is delegated to Authlib.
"""

from google0auth.security.context import Authentication
from google0auth.security.dependencies import (
    get_authentication,
    require_authentication,
)
from google0auth.security.filter import SecurityFilter, resolve_authentication
from google0auth.security.google import GoogleOAuth, get_google_oauth
from google0auth.security.policy import AccessPolicy, AccessRule, RequestMatcher
from google0auth.security.session import (
    SessionData,
    create_session_token,
    verify_session_token,
)

__all__ = [
    "AccessPolicy",
    "AccessRule",
    "Authentication",
    "GoogleOAuth",
    "RequestMatcher",
    "SecurityFilter",
    "SessionData",
    "create_session_token",
    "get_authentication",
    "get_google_oauth",
    "require_authentication",
    "resolve_authentication",
    "verify_session_token",
]
