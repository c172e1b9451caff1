"""Demo API routes.

- GET /api/public - reachable without logging in
- GET /api/private - only reached once the security filter has
  authenticated the request
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from google0auth.security.context import Authentication
from google0auth.security.dependencies import require_authentication

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_MESSAGE = "this is the public method1"
PRIVATE_MESSAGE = "this is the public method2"


@router.api_route("/public", methods=["GET", "HEAD"], response_class=PlainTextResponse)
async def public_method() -> str:
    return PUBLIC_MESSAGE


@router.api_route("/private", methods=["GET", "HEAD"], response_class=PlainTextResponse)
async def private_method(
    authentication: Authentication = Depends(require_authentication),
) -> str:
    logger.debug(f"Private endpoint served to {authentication.principal}")
    return PRIVATE_MESSAGE
