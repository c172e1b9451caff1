"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
All sensitive values (secrets, client credentials) should be provided via
environment variables, not config files.

## Required Environment Variables

- SECRET_KEY: Application secret for signing session cookies

## Optional Environment Variables

- GOOGLE_CLIENT_ID: Google OAuth client ID
- GOOGLE_CLIENT_SECRET: Google OAuth client secret
- GOOGLE_REDIRECT_URI: OAuth callback URL registered with Google
- PUBLIC_PATHS: JSON list of paths that bypass authentication
- LOG_LEVEL: Logging level for the CLI (default: INFO)
- DEBUG: Enable debug mode (default: false)

## Example .env file

```
SECRET_KEY=your-secret-key-at-least-32-characters
GOOGLE_CLIENT_ID=your-google-client-id.apps.googleusercontent.com
GOOGLE_CLIENT_SECRET=your-google-client-secret
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Google OAuth2 Login Demo"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Security
    secret_key: str = Field(
        ...,
        min_length=32,
        description="Secret key for signing session cookies (min 32 chars)",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"

    # Google OAuth
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_redirect_uri: str = "http://localhost:8080/login/oauth2/code/google"
    google_scopes: list[str] = Field(
        default=["openid", "email", "profile"],
        description="OAuth scopes requested from Google",
    )

    # Access policy
    public_paths: list[str] = Field(
        default=["/api/public"],
        description="Paths reachable without authentication",
    )
    login_page: str = "/oauth2/authorization/google"

    # Session
    session_cookie_name: str = "google0auth_session"
    session_max_age_seconds: int = Field(default=60 * 60 * 8, ge=60)  # 8 hours

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def google_oauth_configured(self) -> bool:
        """Check if Google OAuth is configured."""
        return bool(self.google_client_id and self.google_client_secret)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()
