"""Google OAuth2 login demo service."""

__version__ = "0.1.0"
