"""
Admin authentication for the import endpoints.

Callers send the shared secret from CATALOG_ADMIN_TOKEN in the X-Admin-Token
header. When the variable is unset every admin request is refused.
"""

from __future__ import annotations

import logging
import os
import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException

logger = logging.getLogger(__name__)


def get_admin_token() -> str | None:
    token = (os.getenv("CATALOG_ADMIN_TOKEN") or "").strip()
    return token or None


def require_admin(x_admin_token: Annotated[str | None, Header()] = None) -> str:
    """
    Dependency that requires a valid admin token.

    Raises 401 if the header is missing or does not match.
    """
    expected = get_admin_token()
    if expected is None:
        logger.warning("Rejecting admin request: CATALOG_ADMIN_TOKEN is not set")
        raise HTTPException(status_code=401, detail="Admin access is not configured.")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=401, detail="Invalid or missing admin token.")
    return x_admin_token


# Type alias for dependency injection
AdminToken = Annotated[str, Depends(require_admin)]
