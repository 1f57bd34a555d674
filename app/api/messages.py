"""
app/api/messages.py

Purpose: Messaging endpoints

- Sidebar users with unseen counts
- Conversation history
- Mark as seen
- Send text/image messages
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.schemas.message import (
    SendMessageRequest,
    MessagePublic,
    ConversationPartnersResponse,
    MessagesResponse,
    NewMessageResponse,
)
from app.schemas.response import SuccessResponse
from app.schemas.user import UserPublic
from app.services import message_service

router = APIRouter(prefix="/messages")


@router.get("/users", response_model=ConversationPartnersResponse)
async def get_users_for_sidebar(current_user: Dict[str, Any] = Depends(get_current_user)):
    partners = await message_service.list_conversation_partners(current_user["_id"])
    return ConversationPartnersResponse(
        users=[UserPublic.model_validate(user) for user, _ in partners],
        unseen_messages={str(user["_id"]): count for user, count in partners if count > 0}
    )


@router.put("/seen/{message_id}", response_model=SuccessResponse)
async def mark_message_as_seen(message_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    await message_service.mark_seen(message_id)
    return SuccessResponse()


@router.post("/send/{partner_id}", response_model=NewMessageResponse)
async def send_message(
    partner_id: str,
    body: SendMessageRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    message = await message_service.send_message(
        current_user["_id"],
        partner_id,
        text=body.text,
        image=body.image
    )
    return NewMessageResponse(new_message=MessagePublic.model_validate(message))


@router.get("/{partner_id}", response_model=MessagesResponse)
async def get_messages(partner_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    messages = await message_service.fetch_conversation(current_user["_id"], partner_id)
    return MessagesResponse(messages=[MessagePublic.model_validate(m) for m in messages])
