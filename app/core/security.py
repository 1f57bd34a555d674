"""
app/core/security.py

Purpose: Password hashing and session tokens

- bcrypt salted hashes for stored passwords
- Stateless signed JWT session tokens bound to a user id
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ValidationError

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Returns a salted bcrypt hash of the password."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    """Checks a plaintext password against a stored hash."""
    if not password or not hashed_password:
        return False
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issues a session token for the given user id.

    Args:
        user_id: String form of the user's ObjectId
        expires_delta: Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_DAYS)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    payload = {
        "userId": user_id,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Decodes a session token and returns the user id it is bound to.

    Raises:
        AuthenticationError: If the token is malformed, expired or tampered with
    """
    if not token:
        raise AuthenticationError("Not authorized, token missing")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Not authorized, invalid token")

    user_id = payload.get("userId")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Not authorized, invalid token")
    return user_id
