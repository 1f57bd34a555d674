"""
app/services/message_service.py

Purpose: Direct messaging

- Conversation partners with unseen-message counts
- Conversation history (marks the partner's messages as seen)
- Sending text and/or image messages
- Marking single messages as seen
"""

from typing import Optional, Dict, Any, List, Tuple

from bson import ObjectId

from app.core.config import settings
from app.core.exceptions import ValidationError, ResourceNotFoundError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_messages_collection
from app.models.message import new_message_document, conversation_filter
from app.schemas.message import MessagePublic
from app.services import user_service
from app.services.connection_registry import get_connection_registry
from app.services.media_service import get_media_service
from utils.validation_utils import is_blank, to_object_id, parse_data_uri, validate_image_upload

logger = get_logger(__name__)

MESSAGE_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif")


async def count_unseen_by_sender(receiver_id: ObjectId) -> Dict[ObjectId, int]:
    """
    Counts unseen messages addressed to `receiver_id`, grouped by sender.
    """
    messages = get_messages_collection()
    pipeline = [
        {"$match": {"receiver_id": receiver_id, "seen": False}},
        {"$group": {"_id": "$sender_id", "count": {"$sum": 1}}},
    ]
    counts: Dict[ObjectId, int] = {}
    async for row in messages.aggregate(pipeline):
        counts[row["_id"]] = row["count"]
    return counts


async def list_conversation_partners(current_user_id: ObjectId) -> List[Tuple[Dict[str, Any], int]]:
    """
    Lists every other user with the number of their messages the caller has not seen.

    The counts are a point-in-time snapshot; a send racing this call is not reflected.

    Returns:
        List of (user document, unseen count) in account-creation order
    """
    partners = await user_service.list_users_except(current_user_id)
    unseen = await count_unseen_by_sender(current_user_id)
    return [(partner, unseen.get(partner["_id"], 0)) for partner in partners]


async def fetch_conversation(current_user_id: ObjectId, partner_id: str) -> List[Dict[str, Any]]:
    """
    Returns the conversation between the caller and a partner, oldest first,
    after marking everything the partner sent to the caller as seen.

    Raises:
        ResourceNotFoundError: If the partner does not exist
    """
    partner_oid = to_object_id(partner_id)
    if partner_oid is None or not await user_service.user_exists(partner_oid):
        raise ResourceNotFoundError("User not found")

    with LogContext(user_id=str(current_user_id), partner_id=partner_id):
        messages = get_messages_collection()

        result = await messages.update_many(
            {"sender_id": partner_oid, "receiver_id": current_user_id, "seen": False},
            {"$set": {"seen": True}}
        )
        if result.modified_count:
            logger.debug(f"Marked {result.modified_count} messages as seen")

        cursor = messages.find(
            conversation_filter(current_user_id, partner_oid),
            sort=[("created_at", 1), ("_id", 1)]
        )
        return [message async for message in cursor]


async def _upload_message_image(image: str) -> str:
    content, content_type = parse_data_uri(image)
    content_type = validate_image_upload(
        content,
        content_type,
        settings.MAX_MESSAGE_IMAGE_BYTES,
        allowed_types=MESSAGE_IMAGE_TYPES
    )
    return await get_media_service().upload(
        content,
        content_type,
        folder=settings.CLOUDINARY_MESSAGE_FOLDER
    )


async def send_message(
    sender_id: ObjectId,
    receiver_id: str,
    text: Optional[str] = None,
    image: Optional[str] = None
) -> Dict[str, Any]:
    """
    Stores a new message and pushes it to the receiver if they are online.

    Args:
        sender_id: Caller
        receiver_id: Partner id from the request path
        text: Optional text body
        image: Optional base64 data URI

    Returns:
        Inserted message document

    Raises:
        ValidationError: Neither text nor image, or a bad image payload
        ResourceNotFoundError: Receiver does not exist
        UploadError: Image host failed; nothing is persisted
    """
    has_text = not is_blank(text)
    has_image = not is_blank(image)
    if not has_text and not has_image:
        raise ValidationError("Message must contain text or an image")

    receiver_oid = to_object_id(receiver_id)
    if receiver_oid is None or not await user_service.user_exists(receiver_oid):
        raise ResourceNotFoundError("User not found")

    with LogContext(user_id=str(sender_id), partner_id=receiver_id):
        image_url = await _upload_message_image(image) if has_image else None

        message = new_message_document(
            sender_id,
            receiver_oid,
            text=text if has_text else None,
            image=image_url
        )
        result = await get_messages_collection().insert_one(message)
        message["_id"] = result.inserted_id
        logger.info("Message sent")

    delivered = await get_connection_registry().send_to_user(
        str(receiver_oid),
        {
            "event": "newMessage",
            "data": MessagePublic.model_validate(message).model_dump(mode="json", by_alias=True)
        }
    )
    if delivered:
        logger.debug(f"Pushed new message to {delivered} live connections")

    return message


async def mark_seen(message_id: str) -> None:
    """
    Sets the seen flag on a single message. Idempotent.

    Raises:
        ResourceNotFoundError: If the message does not exist
    """
    message_oid = to_object_id(message_id)
    if message_oid is None:
        raise ResourceNotFoundError("Message not found")

    result = await get_messages_collection().update_one(
        {"_id": message_oid},
        {"$set": {"seen": True}}
    )
    if result.matched_count == 0:
        raise ResourceNotFoundError("Message not found")

    logger.debug("Message marked as seen", extra={"message_id": message_id})
