"""Authentication dependencies for FastAPI."""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from prodstack.core.errors import ApiError
from prodstack.db.supabase_client import get_supabase

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for Authorization header
security = HTTPBearer(auto_error=False)


class AuthContext:
    """Context object containing authenticated user info."""

    def __init__(self, user_id: str, token: str, email: Optional[str] = None):
        self.user_id = user_id
        self.token = token
        self.email = email


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthContext]:
    """
    Resolve the caller from a Supabase JWT in the Authorization header.

    Returns None if no valid auth is present.
    """
    if not credentials:
        return None

    token = credentials.credentials

    try:
        # Validates the JWT signature and expiration
        auth_response = get_supabase().auth.get_user(token)
    except Exception as e:
        logger.warning(f"Auth error: {e}")
        return None

    if not auth_response or not auth_response.user:
        return None

    user = auth_response.user
    return AuthContext(user_id=str(user.id), token=token, email=getattr(user, "email", None))


async def require_auth(
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> AuthContext:
    """Require authentication. Raises 401 if not authenticated."""
    if not auth:
        raise ApiError(401, "Unauthorized")
    return auth
