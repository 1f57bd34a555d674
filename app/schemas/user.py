"""
app/schemas/user.py

Purpose: Auth and profile payload schemas

- Signup/login request bodies (camelCase on the wire)
- Public user representation (never includes the password hash)
- Auth responses carrying the session token
"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime, timezone

from app.schemas.response import CamelModel


class SignupRequest(CamelModel):
    # Presence is checked by the auth service so missing fields share one error
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    bio: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(CamelModel):
    """
    User as returned to clients.
    """
    id: str = Field(alias="_id")
    email: str
    full_name: str
    bio: str = ""
    profile_pic: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)

    @field_validator("bio", "profile_pic", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None or v.tzinfo:
            return v
        return v.replace(tzinfo=timezone.utc)


class AuthResponse(CamelModel):
    success: bool = True
    user_data: UserPublic
    token: str
    message: str


class UserResponse(CamelModel):
    success: bool = True
    user: UserPublic
