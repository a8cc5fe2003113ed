"""Access-tier dependencies applied at the router boundary."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog.core.config import get_settings
from catalog.core.security import InvalidTokenError, Principal, decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the caller from the Authorization header; 401 when absent or invalid."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None or not credentials.credentials:
        raise credentials_exception
    try:
        return decode_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise credentials_exception from e


def require_editor(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Allow callers holding any of the configured editor roles."""
    if not principal.has_any_role(get_settings().editor_roles):
        logger.warning(f"User {principal.subject} lacks editor role")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Editor privileges required",
        )
    return principal


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.has_any_role([get_settings().admin_role]):
        logger.warning(f"User {principal.subject} lacks admin role")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return principal
