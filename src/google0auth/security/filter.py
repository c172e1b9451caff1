"""Security filter chain.

A single Starlette middleware that runs in front of every route:

1. Resolve the session cookie into an `Authentication` and attach it to
   `request.state.authentication`
2. Let the OAuth2 login and logout endpoints through untouched
3. Evaluate the access policy for the request path
4. Forward the request, or start authentication via the entry point

## Entry Point

Unauthenticated requests to protected paths are redirected (302) to the
login page. Requests sent with `X-Requested-With: XMLHttpRequest` get a bare
401 instead, since a script cannot follow a redirect into Google's consent
screen. Before redirecting a GET request, its URL is saved in a cookie so
the login callback can send the user back to it.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import Request, status
from fastapi.responses import RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from google0auth.config import get_settings
from google0auth.security.context import Authentication
from google0auth.security.policy import AccessPolicy
from google0auth.security.session import verify_session_token

logger = logging.getLogger(__name__)

SAVED_REQUEST_COOKIE = "google0auth_saved_request"

AUTHORIZATION_PATH = "/oauth2/authorization/google"
LOGIN_CALLBACK_PATH = "/login/oauth2/code/google"
LOGOUT_PATH = "/logout"


def resolve_authentication(request: Request) -> Authentication:
    """Turn the session cookie (if any) into an Authentication."""
    settings = get_settings()

    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return Authentication.anonymous()

    session = verify_session_token(token)
    if session is None:
        return Authentication.anonymous()

    return Authentication.for_principal(session.subject, session.attributes)


def is_safe_redirect(url: str | None) -> bool:
    """Only same-origin absolute paths may be used as a post-login target."""
    return bool(url) and url.startswith("/") and not url.startswith("//") and "\\" not in url


def request_url(request: Request) -> str:
    """Path plus query string of the request, percent-encoded as received."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = quote(request.url.path)

    if request.url.query:
        return f"{path}?{request.url.query}"
    return path


class SecurityFilter(BaseHTTPMiddleware):
    """Enforces the access policy before a request reaches a handler."""

    def __init__(
        self,
        app: ASGIApp,
        policy: AccessPolicy,
        login_page: str,
    ):
        super().__init__(app)
        self.policy = policy
        self.login_page = login_page
        # Handled ahead of the policy whatever the login page is
        self.login_processing_paths = frozenset(
            {login_page, AUTHORIZATION_PATH, LOGIN_CALLBACK_PATH, LOGOUT_PATH}
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        authentication = resolve_authentication(request)
        request.state.authentication = authentication

        path = request.url.path
        if path in self.login_processing_paths:
            return await call_next(request)

        if not self.policy.requires_authentication(path) or authentication.authenticated:
            return await call_next(request)

        return self.commence(request)

    def commence(self, request: Request) -> Response:
        """Start authentication for an unauthenticated request."""
        if request.headers.get("x-requested-with") == "XMLHttpRequest":
            logger.debug(f"Rejecting unauthenticated XHR to {request.url.path}")
            return Response(status_code=status.HTTP_401_UNAUTHORIZED)

        logger.debug(f"Redirecting unauthenticated request for {request.url.path} to login")
        response = RedirectResponse(url=self.login_page, status_code=status.HTTP_302_FOUND)

        if request.method == "GET":
            settings = get_settings()
            response.set_cookie(
                key=SAVED_REQUEST_COOKIE,
                value=request_url(request),
                httponly=True,
                secure=settings.is_production,
                samesite="lax",
            )

        return response
