"""
app/api/auth.py

Purpose: Account endpoints

- Signup and login (issue session tokens)
- Session check
- Multipart profile update; the file is read here and handed to the
  profile service as plain bytes
"""

from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_current_user
from app.core.config import settings
from app.core.logging import get_logger
from app.schemas.user import SignupRequest, LoginRequest, AuthResponse, UserResponse, UserPublic
from app.services import auth_service, profile_service
from app.services.profile_service import AvatarUpload

logger = get_logger(__name__)
router = APIRouter(prefix="/auth")


async def read_avatar(upload: UploadFile, max_bytes: int) -> AvatarUpload:
    """
    Reads at most one byte past the limit, so oversized files are rejected by
    validation without being buffered whole.
    """
    try:
        content = await upload.read(max_bytes + 1)
    finally:
        await upload.close()
    return AvatarUpload(
        content=content,
        content_type=upload.content_type or "",
        filename=upload.filename
    )


@router.post("/signup", response_model=AuthResponse)
async def signup(body: SignupRequest):
    user, token = await auth_service.signup(body.full_name, body.email, body.password, body.bio)
    return AuthResponse(
        user_data=UserPublic.model_validate(user),
        token=token,
        message="Account created successfully"
    )


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest):
    user, token = await auth_service.login(body.email, body.password)
    return AuthResponse(
        user_data=UserPublic.model_validate(user),
        token=token,
        message="Login successful"
    )


@router.get("/check", response_model=UserResponse)
async def check_auth(current_user: Dict[str, Any] = Depends(get_current_user)):
    return UserResponse(user=UserPublic.model_validate(current_user))


@router.patch("/update-profile", response_model=UserResponse)
async def update_profile(
    full_name: Optional[str] = Form(None, alias="fullName"),
    bio: Optional[str] = Form(None),
    profile_pic: Optional[UploadFile] = File(None, alias="profilePic"),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    avatar = None
    if profile_pic is not None:
        avatar = await read_avatar(profile_pic, settings.MAX_AVATAR_BYTES)

    logger.info(
        f"Update profile request (file: {avatar.filename if avatar else None})",
        extra={"user_id": str(current_user["_id"])}
    )

    updated = await profile_service.update_profile(
        current_user["_id"],
        full_name=full_name,
        bio=bio,
        avatar=avatar
    )
    return UserResponse(user=UserPublic.model_validate(updated))
