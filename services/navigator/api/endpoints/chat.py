"""
Chat API Endpoints Module
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_actor_id, get_chat_orchestrator
from chat_orchestrator import ChatOrchestrator
from schemas import ChatRequest, ChatResponse

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    req: ChatRequest,
    actor_id: str = Depends(get_actor_id),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    """
    Send a message and get the navigator's reply.

    A new conversation is opened when conversationId is omitted. When the
    model is rate limited the stored reply is a canned notice, still 200.
    """
    reply = await orchestrator.handle_chat(actor_id, req.message, req.conversation_id)
    return ChatResponse(message=reply.reply_text, conversation_id=reply.conversation_id)
