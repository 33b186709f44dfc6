"""
Message Routes

POST /messages - Send a message
GET /messages/conversations - My conversations, most recent first
GET /messages/conversations/{user_id} - Conversation with one user
PUT /messages/conversations/{user_id}/read - Mark it read
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from collabhub.core.auth import get_current_session
from collabhub.services.container import Services, get_services
from collabhub.services.identity_service import Session
from collabhub.schemas.schemas import (
    Conversation, ConversationSummary, Message, MessageResponse, SendMessageInput
)

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=Message, status_code=201)
async def send_message(
    data: SendMessageInput,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    return services.messaging.send(session, data.receiver_id, data.content)


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    return services.messaging.list_conversations(session)


@router.get("/conversations/{user_id}", response_model=Conversation)
async def get_conversation(
    user_id: str,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    conversation = services.messaging.get_conversation(session, user_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="No conversation with this user")
    return conversation


@router.put("/conversations/{user_id}/read", response_model=MessageResponse)
async def mark_conversation_read(
    user_id: str,
    session: Session = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    count = services.messaging.mark_read(session, user_id)
    return MessageResponse(message=f"Marked {count} message(s) as read")
