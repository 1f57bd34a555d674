"""
app/services/auth_service.py

Purpose: Authentication

- Signup with duplicate-email detection
- Login with bcrypt verification
- Session token issuance and resolution
"""

from typing import Dict, Any, Tuple

from app.core.exceptions import ValidationError, ConflictError, AuthenticationError
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password, create_access_token, decode_access_token
from app.services import user_service
from app.models.user import PRIVATE_FIELDS
from utils.validation_utils import is_blank, normalize_email, validate_email, to_object_id

logger = get_logger(__name__)


def _public(user: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in user.items() if key not in PRIVATE_FIELDS}


async def signup(full_name: str, email: str, password: str, bio: str) -> Tuple[Dict[str, Any], str]:
    """
    Registers a new account.

    Returns:
        (user document without password, session token)

    Raises:
        ValidationError: Missing details or malformed email
        ConflictError: Email already registered
    """
    if is_blank(full_name) or is_blank(email) or not password or is_blank(bio):
        raise ValidationError("Missing Details")

    email = normalize_email(email)
    if not validate_email(email):
        raise ValidationError("Invalid email address")

    if await user_service.get_user_by_email(email):
        logger.info("Signup rejected: email already registered")
        raise ConflictError("Account already exists")

    password_hash = hash_password(password)
    user = await user_service.create_user(full_name.strip(), email, password_hash, bio.strip())

    token = create_access_token(str(user["_id"]))
    return _public(user), token


async def login(email: str, password: str) -> Tuple[Dict[str, Any], str]:
    """
    Verifies credentials.

    Returns:
        (user document without password, session token)

    Raises:
        AuthenticationError: Unknown email or wrong password
    """
    if is_blank(email) or not password:
        raise AuthenticationError("Invalid credentials")

    user = await user_service.get_user_by_email(normalize_email(email))
    if not user or not verify_password(password, user.get("password")):
        logger.info("Login failed")
        raise AuthenticationError("Invalid credentials")

    logger.info("Login successful", extra={"user_id": str(user["_id"])})
    return _public(user), create_access_token(str(user["_id"]))


async def resolve_session(token: str) -> Dict[str, Any]:
    """
    Returns the user a session token belongs to.

    Raises:
        AuthenticationError: Invalid/expired token or the user no longer exists
    """
    user_id = to_object_id(decode_access_token(token))
    if user_id is None:
        raise AuthenticationError("Not authorized, invalid token")

    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise AuthenticationError("User not found")
    return user
