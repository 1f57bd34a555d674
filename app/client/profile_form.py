"""
app/client/profile_form.py

Purpose: Client-side profile form

- Holds the user's edits to name, bio and avatar
- Validates the avatar before anything is sent
- Submits only the fields that changed, as multipart, to the update endpoint
"""

from typing import Optional, Dict, Any, Tuple

import httpx
from pydantic import BaseModel

from app.core.exceptions import (
    QuickChatError,
    ValidationError,
    AuthenticationError,
    ResourceNotFoundError,
    UploadError,
)
from utils.validation_utils import validate_image_upload

MAX_AVATAR_BYTES = 2 * 1024 * 1024
UPDATE_PROFILE_PATH = "/api/auth/update-profile"

_ERRORS_BY_CODE = {
    "VALIDATION_ERROR": ValidationError,
    "AUTHENTICATION_FAILED": AuthenticationError,
    "NOT_FOUND": ResourceNotFoundError,
    "UPLOAD_FAILED": UploadError,
}


class SelectedAvatar(BaseModel):
    filename: str
    content: bytes
    content_type: str


class ProfileForm:
    """
    Form state for editing the signed-in user's profile.

    Usage:
        form = ProfileForm(auth_user)
        form.bio = "New bio"
        user = await form.submit(client, token)
    """

    def __init__(self, auth_user: Dict[str, Any], max_avatar_bytes: int = MAX_AVATAR_BYTES):
        self.auth_user = auth_user
        self.name: str = auth_user.get("fullName") or ""
        self.bio: str = auth_user.get("bio") or ""
        self.avatar: Optional[SelectedAvatar] = None
        self.max_avatar_bytes = max_avatar_bytes

    def select_avatar(self, filename: str, content: bytes, content_type: str) -> SelectedAvatar:
        """
        Validates and stages a new profile picture.

        Raises:
            ValidationError: Too large, or not JPEG/PNG/WEBP
        """
        validate_image_upload(content, content_type, self.max_avatar_bytes)
        self.avatar = SelectedAvatar(filename=filename, content=content, content_type=content_type)
        return self.avatar

    def clear_avatar(self):
        self.avatar = None

    @property
    def preview_url(self) -> Optional[str]:
        """Existing picture until a new one is uploaded."""
        return self.auth_user.get("profilePic") or None

    @property
    def has_changes(self) -> bool:
        return (
            self.name != (self.auth_user.get("fullName") or "")
            or self.bio != (self.auth_user.get("bio") or "")
            or self.avatar is not None
        )

    def changed_fields(self) -> Tuple[Dict[str, str], Dict[str, Tuple[str, bytes, str]]]:
        """
        Returns (form data, files) holding only what differs from the current user.
        """
        data: Dict[str, str] = {}
        if self.name != (self.auth_user.get("fullName") or ""):
            data["fullName"] = self.name
        if self.bio != (self.auth_user.get("bio") or ""):
            data["bio"] = self.bio

        files: Dict[str, Tuple[str, bytes, str]] = {}
        if self.avatar is not None:
            files["profilePic"] = (self.avatar.filename, self.avatar.content, self.avatar.content_type)
        return data, files

    async def submit(self, client: httpx.AsyncClient, token: str) -> Dict[str, Any]:
        """
        Sends the changed fields and returns the updated user.

        Args:
            client: HTTP client whose base_url points at the API host
            token: Session token

        Raises:
            ValidationError: Nothing changed
            QuickChatError: The server answered with success=false
        """
        if not self.has_changes:
            raise ValidationError("No changes to save")

        data, files = self.changed_fields()
        response = await client.patch(
            UPDATE_PROFILE_PATH,
            data=data,
            files=files or None,
            headers={"Authorization": f"Bearer {token}"},
        )

        try:
            body = response.json()
        except ValueError:
            raise QuickChatError(f"Failed to update profile (HTTP {response.status_code})")

        if not body.get("success"):
            error_cls = _ERRORS_BY_CODE.get(body.get("code"))
            message = body.get("message") or "Failed to update profile"
            if error_cls is not None:
                raise error_cls(message)
            raise QuickChatError(message, code=body.get("code") or "INTERNAL_ERROR", status_code=response.status_code)

        user = body["user"]
        self.auth_user = user
        self.name = user.get("fullName") or ""
        self.bio = user.get("bio") or ""
        self.avatar = None
        return user
