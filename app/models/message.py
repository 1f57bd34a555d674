"""
app/models/message.py

Purpose: Direct message document model

- Sender and receiver user ids
- Text and/or hosted image URL
- Seen flag flipped when the receiver reads the conversation
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any

from bson import ObjectId


def new_message_document(
    sender_id: ObjectId,
    receiver_id: ObjectId,
    text: Optional[str] = None,
    image: Optional[str] = None
) -> Dict[str, Any]:
    """Builds the document inserted on send. Caller guarantees text or image."""
    return {
        "sender_id": sender_id,
        "receiver_id": receiver_id,
        "text": text,
        "image": image,
        "seen": False,
        "created_at": datetime.now(timezone.utc),
    }


def conversation_filter(user_a: ObjectId, user_b: ObjectId) -> Dict[str, Any]:
    """Matches every message exchanged between two users, either direction."""
    return {
        "$or": [
            {"sender_id": user_a, "receiver_id": user_b},
            {"sender_id": user_b, "receiver_id": user_a},
        ]
    }
