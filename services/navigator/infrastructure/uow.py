"""
Unit of Work Pattern + Repositories - Infrastructure Layer
=========================================================
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from models import Conversation, Decision, Goal, LifeMetrics, Message


class UnitOfWork:
    """
    Thin Unit of Work for transaction management.

    Usage:
        async with UnitOfWork(session_factory) as uow:
            goal = await uow.goals.get(uow.session, goal_id)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self.conversations = ConversationRepository()
        self.messages = MessageRepository()
        self.goals = GoalRepository()
        self.decisions = DecisionRepository()
        self.metrics = MetricsRepository()

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Commit or rollback, then close the session"""
        try:
            if exc_type is None:
                if self._session:
                    await self._session.commit()
            else:
                if self._session:
                    await self._session.rollback()
        finally:
            if self._session:
                await self._session.close()
                self._session = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError(
                "Session not available. Use 'async with UnitOfWork() as uow:' pattern."
            )
        return self._session


class ConversationRepository:
    async def get(self, session, conversation_id, user_id) -> Optional[Conversation]:
        """Only returns the conversation if user_id owns it"""
        stmt = select(Conversation).where(
            Conversation.id == conversation_id,
            Conversation.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, session, conversation) -> None:
        session.add(conversation)
        await session.flush()  # Flush to get generated ID


class MessageRepository:
    async def list_for_conversation(self, session, conversation_id) -> list:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.seq)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, session, message) -> None:
        session.add(message)
        await session.flush()


class GoalRepository:
    async def get(self, session, goal_id, user_id) -> Optional[Goal]:
        stmt = select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_update(self, session, goal_id, user_id) -> Optional[Goal]:
        """SELECT ... FOR UPDATE, scoped to the owner"""
        stmt = (
            select(Goal)
            .where(Goal.id == goal_id, Goal.user_id == user_id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, session, user_id) -> list:
        stmt = (
            select(Goal)
            .where(Goal.user_id == user_id)
            .order_by(Goal.created_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, session, goal) -> None:
        session.add(goal)
        await session.flush()

    async def update(self, session, goal) -> None:
        await session.flush()


class DecisionRepository:
    async def get(self, session, decision_id, user_id) -> Optional[Decision]:
        stmt = select(Decision).where(Decision.id == decision_id, Decision.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, session, user_id) -> list:
        stmt = (
            select(Decision)
            .where(Decision.user_id == user_id)
            .order_by(Decision.created_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, session, decision) -> None:
        session.add(decision)
        await session.flush()


class MetricsRepository:
    async def latest_for_user(self, session, user_id) -> Optional[LifeMetrics]:
        stmt = (
            select(LifeMetrics)
            .where(LifeMetrics.user_id == user_id)
            .order_by(LifeMetrics.date.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, session, metrics) -> None:
        session.add(metrics)
        await session.flush()
