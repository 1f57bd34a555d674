from pydantic import Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime, timezone

from app.schemas.response import CamelModel
from app.schemas.user import UserPublic


class SendMessageRequest(CamelModel):
    text: Optional[str] = None
    image: Optional[str] = Field(default=None, description="base64 data URI")


class MessagePublic(CamelModel):
    id: str = Field(alias="_id")
    sender_id: str
    receiver_id: str
    text: Optional[str] = None
    image: Optional[str] = None
    seen: bool = False
    created_at: datetime

    @field_validator("id", "sender_id", "receiver_id", mode="before")
    @classmethod
    def stringify_ids(cls, v):
        return str(v)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Mongo hands back naive UTC datetimes
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class ConversationPartnersResponse(CamelModel):
    success: bool = True
    users: List[UserPublic]
    unseen_messages: Dict[str, int]


class MessagesResponse(CamelModel):
    success: bool = True
    messages: List[MessagePublic]


class NewMessageResponse(CamelModel):
    success: bool = True
    new_message: MessagePublic
