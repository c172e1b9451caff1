"""FastAPI application factory.

Creates and configures the FastAPI application with all routes and the
security filter.

## Usage

```python
from google0auth.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8080)
```

## Configuration

The app is configured via environment variables. See `google0auth.config`
for available settings.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from google0auth.config import get_settings
from google0auth.security.filter import SecurityFilter
from google0auth.security.policy import AccessPolicy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    if not settings.google_oauth_configured:
        logger.warning("Google OAuth is not configured; login will return 501")

    yield

    logger.info("Shutting down")


def build_access_policy() -> AccessPolicy:
    """Access policy from settings: public paths first, then everything else."""
    settings = get_settings()
    return AccessPolicy.build(public_paths=settings.public_paths)


def create_app(policy: AccessPolicy | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        policy: Access policy to enforce (default: built from settings)

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Two endpoints secured with Google OAuth2 login",
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.access_policy = policy or build_access_policy()

    app.add_middleware(
        SecurityFilter,
        policy=app.state.access_policy,
        login_page=settings.login_page,
    )

    # Include routers
    from google0auth.api.routes import api, oauth2

    app.include_router(oauth2.router, tags=["OAuth2 Login"])
    app.include_router(api.router, prefix="/api", tags=["API"])

    return app
