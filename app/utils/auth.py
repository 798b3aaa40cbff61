"""
Password hashing and JWT helpers.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi.concurrency import run_in_threadpool
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.models.user import TokenData
from app.utils.errors import ExpiredToken, InvalidToken


def get_password_hash(password: str) -> str:
    """Hash password with BCRYPT_ROUNDS rounds."""
    # Bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def hash_password(password: str) -> str:
    """Hash off the event loop; bcrypt is deliberately slow."""
    return await run_in_threadpool(get_password_hash, password)


async def check_password(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


def create_access_token(
    user_id: str,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: Owner id put in the ``userId`` claim
        email: User email, also used as ``sub``
        expires_delta: Lifetime, defaults to JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": email,
        "userId": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenData:
    """
    Decode and validate an access token.

    Raises:
        ExpiredToken: If the ``exp`` claim is in the past
        InvalidToken: If the signature or payload is bad
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise ExpiredToken()
    except JWTError:
        raise InvalidToken()

    user_id = payload.get("userId")
    email = payload.get("email") or payload.get("sub")

    if not user_id or not email:
        raise InvalidToken()

    return TokenData(user_id=user_id, email=email)
