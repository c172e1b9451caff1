"""FastAPI dependencies for authentication.

The security filter has already decided whether a request may proceed;
these dependencies hand its result to the route handler as an explicit
parameter.

## Usage

```python
from fastapi import Depends
from google0auth.security import Authentication, require_authentication

@router.get("/profile")
async def profile(auth: Authentication = Depends(require_authentication)):
    return {"email": auth.email}
```
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from google0auth.security.context import Authentication
from google0auth.security.filter import resolve_authentication


def get_authentication(request: Request) -> Authentication:
    """Return the Authentication attached by the security filter.

    Falls back to resolving the session cookie directly when the app is
    mounted without the filter.
    """
    authentication = getattr(request.state, "authentication", None)
    if authentication is None:
        authentication = resolve_authentication(request)
    return authentication


def require_authentication(
    authentication: Authentication = Depends(get_authentication),
) -> Authentication:
    """Get the current Authentication, raising 401 if anonymous."""
    if not authentication.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    return authentication
