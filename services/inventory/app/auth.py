"""
Authentication and authorization utilities for the Inventory service.

Validates JWT tokens issued by the Users service and compares the role claim
against the privilege an endpoint needs.
"""
import logging
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from .config import SECRET_KEY, ALGORITHM

logger = logging.getLogger(__name__)

# Roles ordered from least to most privileged
ROLES = ("guest", "user", "admin")

# Security scheme for JWT bearer tokens
security = HTTPBearer()


class CurrentUser(BaseModel):
    """Current authenticated user information."""
    id: int
    username: str
    role: str
    token: str


def has_role(role: Optional[str], minimum: str) -> bool:
    """True if ``role`` is at least as privileged as ``minimum``; unknown roles never are."""
    if role not in ROLES:
        return False
    return ROLES.index(role) >= ROLES.index(minimum)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> CurrentUser:
    """
    FastAPI dependency to get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Authorization credentials (injected)

    Returns:
        Current authenticated user information

    Raises:
        HTTPException: 401 if token is invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        token = credentials.credentials
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id_str: str = payload.get("sub")
        username: str = payload.get("username")
        role: str = payload.get("role")

        if user_id_str is None or username is None or role is None:
            raise credentials_exception

        return CurrentUser(id=int(user_id_str), username=username, role=role, token=token)
    except (JWTError, ValueError) as e:
        logger.error(f"JWT validation error: {e}")
        raise credentials_exception


def require_role(minimum: str):
    """Build a dependency admitting callers whose role ranks at or above ``minimum``."""
    def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not has_role(current_user.role, minimum):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{minimum.capitalize()} privileges required"
            )
        return current_user
    return dependency


require_guest = require_role("guest")
require_user = require_role("user")
require_admin = require_role("admin")
