"""
Chat Orchestrator

message -> conversation -> persist user turn -> history -> model -> persist reply

The user turn is committed before the model is called, so it survives any
model failure. Capacity exhaustion is answered with a canned reply that is
stored and returned like a real one (flagged degraded on the record).
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from conversation_assembler import assemble_turns
from exceptions import ChatFailed, InvalidInput
from fallbacks import CHAT_FALLBACK_MESSAGE
from llm_client import ModelInvocationClient, ModelStatus
from logging_config import get_logger, log_degraded_response
from navigator_config import (
    CHAT_MODEL,
    CHAT_SYSTEM_INSTRUCTION,
    CONVERSATION_TITLE_LENGTH,
    CONVERSATION_TITLE_SUFFIX,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChatReply:
    reply_text: str
    conversation_id: uuid.UUID
    degraded: bool = False
    conversation_created: bool = False


def conversation_title(message: str) -> str:
    return message[:CONVERSATION_TITLE_LENGTH] + CONVERSATION_TITLE_SUFFIX


def parse_conversation_id(raw) -> Optional[uuid.UUID]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise InvalidInput("conversationId must be a UUID") from None


class ChatOrchestrator:
    def __init__(self, gateway, model_client: ModelInvocationClient, model: str = CHAT_MODEL):
        self.gateway = gateway
        self.model_client = model_client
        self.model = model

    async def handle_chat(self, actor_id: str, message: Optional[str], conversation_id=None) -> ChatReply:
        if not message:
            raise InvalidInput("Message is required")

        resolved = await self.gateway.get_or_create_conversation(
            actor_id,
            parse_conversation_id(conversation_id),
            conversation_title(message),
        )
        conversation = resolved.value

        await self.gateway.create_message(conversation.id, "user", message)

        history = await self.gateway.list_messages(actor_id, conversation.id)
        turns = assemble_turns(history)

        result = await self.model_client.generate_text(self.model, CHAT_SYSTEM_INSTRUCTION, turns)

        if result.status is ModelStatus.OK:
            await self.gateway.create_message(conversation.id, "assistant", result.text)
            logger.info(
                "chat_reply_persisted",
                conversation_id=str(conversation.id),
                history_turns=len(turns),
            )
            return ChatReply(result.text, conversation.id, conversation_created=resolved.created)

        if result.status is ModelStatus.CAPACITY_EXHAUSTED:
            await self.gateway.create_message(
                conversation.id, "assistant", CHAT_FALLBACK_MESSAGE, degraded=True
            )
            log_degraded_response("chat", str(conversation.id), result.error or "capacity exhausted")
            return ChatReply(
                CHAT_FALLBACK_MESSAGE,
                conversation.id,
                degraded=True,
                conversation_created=resolved.created,
            )

        logger.error("chat_failed", conversation_id=str(conversation.id), error=result.error)
        raise ChatFailed(result.error)
