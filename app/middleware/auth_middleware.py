"""
Authentication dependency for protecting routes with JWT verification.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from app.utils.auth import verify_token
from app.utils.errors import Unauthenticated
from app.models.user import TokenData

# auto_error is off so a missing header maps to 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenData:
    """
    Resolve the caller's identity from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent

    Returns:
        TokenData with the user id and email from the token

    Raises:
        Unauthenticated: If no bearer token was sent (401)
        InvalidToken: If the token is malformed, badly signed or expired (403)
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    return verify_token(credentials.credentials)
