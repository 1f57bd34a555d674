import asyncio
import io

import pytest
from bson import ObjectId
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.api.auth import read_avatar
from app.core.exceptions import UploadError, ValidationError, ResourceNotFoundError
from app.services import profile_service
from app.services.profile_service import AvatarUpload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def update(client, headers, data=None, files=None):
    return client.patch("/api/auth/update-profile", data=data or {}, files=files, headers=headers)


def test_bio_only_leaves_other_fields(client, make_user, database):
    user, headers = make_user("Alice", bio="old bio")
    asyncio.run(database["users"].update_one(
        {"_id": ObjectId(user["_id"])},
        {"$set": {"profile_pic": "https://res.cloudinary.com/demo/old.png"}}
    ))

    response = update(client, headers, data={"bio": "new bio"})
    assert response.status_code == 200
    updated = response.json()["user"]
    assert updated["bio"] == "new bio"
    assert updated["fullName"] == "Alice"
    assert updated["profilePic"] == "https://res.cloudinary.com/demo/old.png"


def test_update_name_and_avatar(client, make_user, media):
    _, headers = make_user("Alice")

    response = update(
        client,
        headers,
        data={"fullName": "Alice Cooper"},
        files={"profilePic": ("me.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 200
    updated = response.json()["user"]
    assert updated["fullName"] == "Alice Cooper"
    assert updated["profilePic"].startswith("https://res.cloudinary.com/demo/image/upload/profile_pics/")
    assert media.uploads[0]["folder"] == "profile_pics"
    assert media.uploads[0]["content"] == PNG_BYTES


def test_oversized_avatar_rejected_before_upload(client, make_user, media, database):
    user, headers = make_user("Alice", bio="old bio")
    too_big = b"\x00" * (2 * 1024 * 1024 + 1)

    response = update(
        client,
        headers,
        data={"bio": "new bio"},
        files={"profilePic": ("big.png", too_big, "image/png")},
    )
    assert response.status_code == 422
    assert response.json()["message"] == "File size too large (max 2MB)"
    assert media.uploads == []

    stored = asyncio.run(database["users"].find_one({"_id": ObjectId(user["_id"])}))
    assert stored["bio"] == "old bio"


def test_wrong_avatar_type_rejected(client, make_user, media):
    _, headers = make_user("Alice")

    response = update(client, headers, files={"profilePic": ("doc.gif", b"GIF89a", "image/gif")})
    assert response.status_code == 422
    assert response.json()["message"] == "Only JPEG, JPG, PNG or WEBP files are allowed"
    assert media.uploads == []


def test_upload_failure_commits_nothing(client, make_user, media, database):
    user, headers = make_user("Alice", bio="old bio")
    media.fail_with = UploadError("Image upload failed: provider rejected file")

    response = update(
        client,
        headers,
        data={"bio": "new bio", "fullName": "New Name"},
        files={"profilePic": ("me.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 502
    assert response.json()["message"] == "Image upload failed: provider rejected file"

    stored = asyncio.run(database["users"].find_one({"_id": ObjectId(user["_id"])}))
    assert stored["bio"] == "old bio"
    assert stored["full_name"] == "Alice"


def test_no_changes_rejected(client, make_user):
    _, headers = make_user("Alice")

    response = update(client, headers, data={})
    assert response.status_code == 422
    assert response.json()["message"] == "No changes to save"


def test_update_requires_session(client):
    assert update(client, {}, data={"bio": "x"}).status_code == 401


async def test_empty_values_do_not_clear_fields(make_user):
    user, _ = make_user("Alice", bio="keep me")

    updated = await profile_service.update_profile(ObjectId(user["_id"]), full_name="Alicia", bio="   ")
    assert updated["full_name"] == "Alicia"
    assert updated["bio"] == "keep me"


async def test_update_missing_user():
    with pytest.raises(ResourceNotFoundError):
        await profile_service.update_profile(ObjectId(), bio="hello")


async def test_avatar_without_type_is_rejected(make_user, media):
    user, _ = make_user("Alice")

    with pytest.raises(ValidationError):
        await profile_service.update_profile(
            ObjectId(user["_id"]),
            avatar=AvatarUpload(content=PNG_BYTES, content_type="")
        )
    assert media.uploads == []


async def test_read_avatar_stops_past_limit():
    upload = UploadFile(
        file=io.BytesIO(b"\x00" * (3 * 1024 * 1024)),
        filename="huge.png",
        headers=Headers({"content-type": "image/png"}),
    )

    avatar = await read_avatar(upload, max_bytes=1024)

    assert len(avatar.content) == 1025
    assert avatar.content_type == "image/png"
    assert avatar.filename == "huge.png"


def test_much_larger_avatar_rejected(client, make_user, media):
    _, headers = make_user("Alice")

    response = update(client, headers, files={"profilePic": ("huge.png", b"\x00" * (6 * 1024 * 1024), "image/png")})
    assert response.status_code == 422
    assert response.json()["message"] == "File size too large (max 2MB)"
    assert media.uploads == []


async def test_avatar_uploaded_with_bare_mime_type(make_user, media):
    user, _ = make_user("Alice")

    await profile_service.update_profile(
        ObjectId(user["_id"]),
        avatar=AvatarUpload(content=PNG_BYTES, content_type="Image/PNG; charset=binary")
    )
    assert media.uploads[0]["content_type"] == "image/png"
