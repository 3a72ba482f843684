"""Service layer – bearer-token check for protected upload routes.

Tokens are issued by the main QuickCourt backend; this service only verifies
the signature and expiry and hands the claims to the route.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.quickcourt.config import settings
from src.quickcourt.errors import AuthError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def require_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict[str, Any]:
    """Return the verified token claims or raise a 401."""
    if credentials is None:
        raise AuthError("No token, authorization denied")
    if not settings.jwt_configured:
        logger.error("JWT_SECRET is not set; rejecting bearer token.")
        raise AuthError("Token is not valid")
    try:
        return jwt.decode(
            credentials.credentials,
            settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise AuthError("Token is not valid") from exc


CurrentUser = Annotated[dict[str, Any], Depends(require_user)]
