"""
app/api/deps.py

Purpose: Shared route dependencies

- Resolves the caller from the session token on protected routes
"""

from typing import Optional, Dict, Any

from fastapi import Header

from app.core.exceptions import AuthenticationError
from app.services.auth_service import resolve_session


def extract_token(authorization: Optional[str], token: Optional[str]) -> Optional[str]:
    """
    Picks the session token from `Authorization: Bearer <jwt>` or the bare
    `token` header older clients send.
    """
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    if token:
        return token.strip()
    return None


async def get_current_user(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Header(None),
) -> Dict[str, Any]:
    session_token = extract_token(authorization, token)
    if not session_token:
        raise AuthenticationError("Not authorized, token missing")
    return await resolve_session(session_token)
