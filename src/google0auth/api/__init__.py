"""FastAPI application and routes.

## API Structure

- /api/public - Public endpoint
- /api/private - Endpoint requiring a logged-in user
- /oauth2/authorization/google - Start Google login
- /login/oauth2/code/google - Google OAuth callback
- /logout - Clear the session

## Authentication

Every path except /api/public requires a session cookie. Sessions are
created at the end of the Google login flow.
"""

from google0auth.api.app import create_app

__all__ = ["create_app"]
