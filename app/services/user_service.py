"""
app/services/user_service.py

Purpose: Credential store

- Create user records
- Look users up by id or email
- List conversation partners
- Apply field updates to a user
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.db.mongo import get_users_collection
from app.models.user import new_user_document, public_projection
from app.core.exceptions import ConflictError
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_user(full_name: str, email: str, password_hash: str, bio: str) -> Dict[str, Any]:
    """
    Inserts a new user.

    Args:
        full_name: Display name
        email: Normalised (lower-cased) email
        password_hash: bcrypt hash, never the plaintext
        bio: Free-text bio

    Returns:
        Inserted user document (including _id)

    Raises:
        ConflictError: If the email is already registered
    """
    users = get_users_collection()
    user = new_user_document(full_name, email, password_hash, bio)

    try:
        result = await users.insert_one(user)
    except DuplicateKeyError:
        logger.warning("Duplicate signup rejected by unique index")
        raise ConflictError("Account already exists")

    user["_id"] = result.inserted_id
    logger.info("New user created", extra={"user_id": str(result.inserted_id)})
    return user


async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """
    Retrieves a user by email, including the password hash.
    Only the auth service should call this.
    """
    users = get_users_collection()
    return await users.find_one({"email": email})


async def get_user_by_id(user_id: ObjectId) -> Optional[Dict[str, Any]]:
    """
    Retrieves a user by id without the password hash.

    Returns:
        User document or None if not found
    """
    users = get_users_collection()
    return await users.find_one({"_id": user_id}, public_projection())


async def user_exists(user_id: ObjectId) -> bool:
    users = get_users_collection()
    return await users.count_documents({"_id": user_id}, limit=1) > 0


async def list_users_except(user_id: ObjectId) -> List[Dict[str, Any]]:
    """
    Returns every user other than `user_id`, oldest account first.
    """
    users = get_users_collection()
    cursor = users.find({"_id": {"$ne": user_id}}, public_projection(), sort=[("created_at", 1), ("_id", 1)])
    return [user async for user in cursor]


async def update_user_fields(user_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Applies a single $set to the user and returns the updated document.

    Args:
        user_id: User id
        fields: Document fields to overwrite

    Returns:
        Updated user (without password) or None if the user does not exist
    """
    users = get_users_collection()

    return await users.find_one_and_update(
        {"_id": user_id},
        {"$set": {**fields, "updated_at": datetime.now(timezone.utc)}},
        projection=public_projection(),
        return_document=ReturnDocument.AFTER
    )
