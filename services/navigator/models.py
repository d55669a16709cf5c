from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Integer, BigInteger, Boolean, Identity, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid
from database import Base


class Conversation(Base):
    __tablename__ = "conversations"
    __mapper_args__ = {"eager_defaults": True}
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Message(Base):
    __tablename__ = "messages"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id = Column(UUID(as_uuid=True), ForeignKey("conversations.id"), nullable=False)
    role = Column(String, nullable=False)  # user | assistant
    content = Column(Text, nullable=False)

    # Insertion order is the chronological order of a conversation
    seq = Column(BigInteger, Identity(), nullable=False)

    # True for canned fallback replies stored while the model was unavailable
    degraded = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_messages_conversation_seq", "conversation_id", "seq"),
    )
    __mapper_args__ = {"eager_defaults": True}


class Goal(Base):
    __tablename__ = "goals"
    __mapper_args__ = {"eager_defaults": True}
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    target_date = Column(DateTime(timezone=True), nullable=True)

    # 0..100, checked by goal_service before any write
    progress = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Decision(Base):
    __tablename__ = "decisions"
    __mapper_args__ = {"eager_defaults": True}
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    context = Column(Text, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)

    # Always populated before insert (model output or canned fallback)
    analysis = Column(JSONB, nullable=False)
    schema_version = Column(String, nullable=False)
    degraded = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LifeMetrics(Base):
    __tablename__ = "life_metrics"
    __mapper_args__ = {"eager_defaults": True}
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)
    productivity = Column(Integer, nullable=False)
    decision_quality = Column(Integer, nullable=False)
    stress_level = Column(Integer, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
