"""OAuth2 login routes.

Handles the Google OAuth login flow and session lifecycle.

## OAuth Flow

1. GET /oauth2/authorization/google - Redirect to Google consent screen
2. GET /login/oauth2/code/google - Handle OAuth callback, set session
3. GET|POST /logout - Clear session

These paths are let through by the security filter without evaluating the
access policy.

## Session Management

The pending login (state, PKCE verifier, return URL) and the session itself
are both kept in signed HTTP-only cookies.
"""

from __future__ import annotations

import logging

import httpx
from authlib.integrations.httpx_client import OAuthError
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from google0auth.config import get_settings
from google0auth.security.context import Authentication
from google0auth.security.dependencies import get_authentication
from google0auth.security.filter import (
    AUTHORIZATION_PATH,
    LOGIN_CALLBACK_PATH,
    LOGOUT_PATH,
    SAVED_REQUEST_COOKIE,
    is_safe_redirect,
)
from google0auth.security.google import GoogleOAuth, get_google_oauth
from google0auth.security.session import (
    AUTHORIZATION_REQUEST_COOKIE,
    AUTHORIZATION_REQUEST_MAX_AGE_SECONDS,
    AuthorizationRequest,
    create_authorization_request_token,
    create_session_token,
    verify_authorization_request_token,
)

logger = logging.getLogger(__name__)

router = APIRouter()

LOGOUT_SUCCESS_URL = "/api/public"


@router.get(AUTHORIZATION_PATH)
async def login(
    request: Request,
    oauth: GoogleOAuth = Depends(get_google_oauth),
) -> RedirectResponse:
    """Initiate Google OAuth login.

    Redirects the user to Google's consent screen. After consent, Google
    redirects back to /login/oauth2/code/google.
    """
    settings = get_settings()

    if not oauth.is_configured:
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Google OAuth not configured",
        )

    saved = request.cookies.get(SAVED_REQUEST_COOKIE)
    redirect_to = saved if is_safe_redirect(saved) else "/"

    authorization = oauth.create_authorization_redirect()
    token = create_authorization_request_token(
        AuthorizationRequest(
            state=authorization.state,
            code_verifier=authorization.code_verifier,
            redirect_to=redirect_to,
        )
    )

    response = RedirectResponse(url=authorization.url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=AUTHORIZATION_REQUEST_COOKIE,
        value=token,
        max_age=AUTHORIZATION_REQUEST_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    response.delete_cookie(SAVED_REQUEST_COOKIE)

    return response


@router.get(LOGIN_CALLBACK_PATH)
async def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oauth: GoogleOAuth = Depends(get_google_oauth),
) -> RedirectResponse:
    """Handle Google OAuth callback.

    Exchanges the authorization code, fetches the user's profile, sets the
    session cookie and returns the user to the page that required login.
    """
    settings = get_settings()

    if error:
        logger.info(f"Google returned an authorization error: {error}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authorization failed: {error}",
        )

    # Verify state
    token = request.cookies.get(AUTHORIZATION_REQUEST_COOKIE)
    pending = verify_authorization_request_token(token) if token else None
    if pending is None or not state or state != pending.state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired state token",
        )

    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing authorization code",
        )

    if not oauth.is_configured:
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Google OAuth not configured",
        )

    try:
        user_info = await oauth.authenticate(code, pending.code_verifier)
    except (OAuthError, httpx.HTTPError, KeyError) as e:
        logger.error(f"Google authentication failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
        )

    session_token = create_session_token(user_info.sub, user_info.to_attributes())

    redirect_to = pending.redirect_to if is_safe_redirect(pending.redirect_to) else "/"
    redirect = RedirectResponse(url=redirect_to, status_code=status.HTTP_302_FOUND)
    redirect.set_cookie(
        key=settings.session_cookie_name,
        value=session_token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    redirect.delete_cookie(AUTHORIZATION_REQUEST_COOKIE)

    logger.info(f"User {user_info.email or user_info.sub} logged in")

    return redirect


@router.api_route(LOGOUT_PATH, methods=["GET", "POST"])
async def logout(
    authentication: Authentication = Depends(get_authentication),
) -> RedirectResponse:
    """Log out the current user.

    Clears the session cookie.
    """
    settings = get_settings()

    if authentication.authenticated:
        logger.info(f"User {authentication.email or authentication.principal} logged out")

    response = RedirectResponse(url=LOGOUT_SUCCESS_URL, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return response
