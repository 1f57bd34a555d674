"""
app/services/profile_service.py

Purpose: Profile updates

- Sparse updates of full name and bio
- Avatar validation and upload before anything is written
- All-or-nothing: text fields are only committed once the upload succeeded
"""

from pydantic import BaseModel
from typing import Optional, Dict, Any

from bson import ObjectId

from app.core.config import settings
from app.core.exceptions import ValidationError, ResourceNotFoundError
from app.core.logging import get_logger, LogContext
from app.services import user_service
from app.services.media_service import get_media_service
from utils.validation_utils import is_blank, validate_image_upload

logger = get_logger(__name__)


class AvatarUpload(BaseModel):
    """Already-read avatar bytes plus the MIME type the client declared."""
    content: bytes
    content_type: str
    filename: Optional[str] = None


async def update_profile(
    user_id: ObjectId,
    full_name: Optional[str] = None,
    bio: Optional[str] = None,
    avatar: Optional[AvatarUpload] = None
) -> Dict[str, Any]:
    """
    Updates the supplied profile fields.

    Absent and empty values leave the stored field untouched; fields cannot be
    cleared through this operation.

    Args:
        user_id: User to update
        full_name: New display name
        bio: New bio
        avatar: New profile picture

    Returns:
        Updated user document (without password)

    Raises:
        ValidationError: Nothing to change, or the avatar failed validation
        UploadError: The image host failed; nothing is written
        ResourceNotFoundError: The user no longer exists
    """
    with LogContext(user_id=str(user_id)):
        update_fields: Dict[str, Any] = {}

        if not is_blank(full_name):
            update_fields["full_name"] = full_name.strip()
        if not is_blank(bio):
            update_fields["bio"] = bio.strip()

        if avatar is None and not update_fields:
            raise ValidationError("No changes to save")

        if avatar is not None:
            content_type = validate_image_upload(avatar.content, avatar.content_type, settings.MAX_AVATAR_BYTES)

            logger.info(
                f"Uploading profile picture ({avatar.filename or 'unnamed'}, {len(avatar.content)} bytes)"
            )
            update_fields["profile_pic"] = await get_media_service().upload(
                avatar.content,
                content_type,
                folder=settings.CLOUDINARY_PROFILE_FOLDER
            )

        updated = await user_service.update_user_fields(user_id, update_fields)
        if updated is None:
            raise ResourceNotFoundError("User not found")

        logger.info(f"Profile updated: {', '.join(sorted(update_fields))}")
        return updated
