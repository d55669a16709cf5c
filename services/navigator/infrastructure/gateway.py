"""
Persistence Gateway
===================

The only storage surface the orchestrators see. Each operation runs in its
own UnitOfWork, so a write is durable as soon as the call returns. Storage
errors surface as GatewayFailure; retrying is left to the caller.

Lookups by id are scoped to the calling actor: a record owned by someone
else reads exactly like a missing one.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from database import AsyncSessionLocal
from exceptions import ConversationNotFound, GatewayFailure
from infrastructure.uow import UnitOfWork
from logging_config import get_logger, log_gateway_failure
from models import Conversation, Decision, Goal, LifeMetrics, Message

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """Result of a get-or-create: the entity plus which branch produced it"""
    value: T
    created: bool


class PersistenceGateway:
    def __init__(self, session_factory=AsyncSessionLocal):
        self._session_factory = session_factory

    def _uow(self) -> UnitOfWork:
        return UnitOfWork(self._session_factory)

    def _failure(self, operation: str, error: SQLAlchemyError) -> GatewayFailure:
        log_gateway_failure(operation, error)
        return GatewayFailure(operation)

    # ------------------------------------------------------------------
    # Conversations & messages
    # ------------------------------------------------------------------

    async def get_or_create_conversation(
        self,
        actor_id: str,
        conversation_id: Optional[uuid.UUID],
        title: str,
    ) -> Resolved[Conversation]:
        try:
            async with self._uow() as uow:
                if conversation_id is not None:
                    conversation = await uow.conversations.get(uow.session, conversation_id, actor_id)
                    if conversation is None:
                        raise ConversationNotFound(conversation_id)
                    return Resolved(conversation, created=False)

                conversation = Conversation(user_id=actor_id, title=title)
                await uow.conversations.save(uow.session, conversation)
        except SQLAlchemyError as e:
            raise self._failure("get_or_create_conversation", e) from e

        logger.info("conversation_created", conversation_id=str(conversation.id), actor_id=actor_id)
        return Resolved(conversation, created=True)

    async def create_message(
        self,
        conversation_id: uuid.UUID,
        role: str,
        content: str,
        degraded: bool = False,
    ) -> Message:
        try:
            async with self._uow() as uow:
                message = Message(
                    conversation_id=conversation_id,
                    role=role,
                    content=content,
                    degraded=degraded,
                )
                await uow.messages.save(uow.session, message)
        except SQLAlchemyError as e:
            raise self._failure("create_message", e) from e
        return message

    async def list_messages(self, actor_id: str, conversation_id: uuid.UUID) -> List[Message]:
        """Raises ConversationNotFound unless actor_id owns the conversation"""
        try:
            async with self._uow() as uow:
                conversation = await uow.conversations.get(uow.session, conversation_id, actor_id)
                if conversation is None:
                    raise ConversationNotFound(conversation_id)
                return await uow.messages.list_for_conversation(uow.session, conversation_id)
        except SQLAlchemyError as e:
            raise self._failure("list_messages", e) from e

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    async def list_goals(self, actor_id: str) -> List[Goal]:
        try:
            async with self._uow() as uow:
                return await uow.goals.list_for_user(uow.session, actor_id)
        except SQLAlchemyError as e:
            raise self._failure("list_goals", e) from e

    async def create_goal(self, actor_id: str, fields: Dict[str, Any]) -> Goal:
        try:
            async with self._uow() as uow:
                goal = Goal(user_id=actor_id, **fields)
                await uow.goals.save(uow.session, goal)
        except SQLAlchemyError as e:
            raise self._failure("create_goal", e) from e
        logger.info("goal_created", goal_id=str(goal.id), actor_id=actor_id)
        return goal

    async def update_goal_progress(self, actor_id: str, goal_id: uuid.UUID, progress: int) -> Optional[Goal]:
        """Returns None when actor_id has no goal with this id"""
        try:
            async with self._uow() as uow:
                goal = await uow.goals.get_for_update(uow.session, goal_id, actor_id)
                if goal is None:
                    return None
                goal.progress = progress
                await uow.goals.update(uow.session, goal)
        except SQLAlchemyError as e:
            raise self._failure("update_goal_progress", e) from e
        return goal

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    async def create_decision(
        self,
        actor_id: str,
        context: str,
        option_a: str,
        option_b: str,
        analysis: Dict[str, Any],
        schema_version: str,
        degraded: bool = False,
    ) -> Decision:
        try:
            async with self._uow() as uow:
                decision = Decision(
                    user_id=actor_id,
                    context=context,
                    option_a=option_a,
                    option_b=option_b,
                    analysis=analysis,
                    schema_version=schema_version,
                    degraded=degraded,
                )
                await uow.decisions.save(uow.session, decision)
        except SQLAlchemyError as e:
            raise self._failure("create_decision", e) from e
        return decision

    async def get_decision(self, actor_id: str, decision_id: uuid.UUID) -> Optional[Decision]:
        try:
            async with self._uow() as uow:
                return await uow.decisions.get(uow.session, decision_id, actor_id)
        except SQLAlchemyError as e:
            raise self._failure("get_decision", e) from e

    async def list_decisions(self, actor_id: str) -> List[Decision]:
        try:
            async with self._uow() as uow:
                return await uow.decisions.list_for_user(uow.session, actor_id)
        except SQLAlchemyError as e:
            raise self._failure("list_decisions", e) from e

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    async def get_or_create_latest_metrics(
        self,
        actor_id: str,
        defaults: Dict[str, int],
    ) -> Resolved[LifeMetrics]:
        try:
            async with self._uow() as uow:
                metrics = await uow.metrics.latest_for_user(uow.session, actor_id)
                if metrics is not None:
                    return Resolved(metrics, created=False)

                metrics = LifeMetrics(
                    user_id=actor_id,
                    date=datetime.now(timezone.utc),
                    **defaults,
                )
                await uow.metrics.save(uow.session, metrics)
        except SQLAlchemyError as e:
            raise self._failure("get_or_create_latest_metrics", e) from e

        logger.info("metrics_seeded", actor_id=actor_id)
        return Resolved(metrics, created=True)
