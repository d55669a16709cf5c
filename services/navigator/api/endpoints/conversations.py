"""
Conversations API Endpoints Module
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_actor_id, get_gateway
from schemas import MessageResponse

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def get_conversation_messages(
    conversation_id: uuid.UUID,
    actor_id: str = Depends(get_actor_id),
    gateway=Depends(get_gateway),
):
    """Messages of one of the actor's conversations, in chronological order"""
    return await gateway.list_messages(actor_id, conversation_id)
