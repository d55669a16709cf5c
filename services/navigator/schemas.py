from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
from datetime import datetime
import uuid


def camel(name: str, wire: str):
    """Field accepting both snake_case and the camelCase wire name, emitted as camelCase"""
    return Field(
        validation_alias=AliasChoices(name, wire),
        serialization_alias=wire,
    )


class WireModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# =============================================================================
# Chat
# =============================================================================

class ChatRequest(WireModel):
    # Emptiness is checked by the orchestrator so it maps to InvalidInput
    message: Optional[str] = None
    conversation_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("conversation_id", "conversationId"),
        serialization_alias="conversationId",
    )


class ChatResponse(WireModel):
    message: str
    conversation_id: uuid.UUID = camel("conversation_id", "conversationId")


class MessageResponse(WireModel):
    id: uuid.UUID
    conversation_id: uuid.UUID = camel("conversation_id", "conversationId")
    role: str
    content: str
    degraded: bool = False
    created_at: Optional[datetime] = camel("created_at", "createdAt")


# =============================================================================
# Goals
# =============================================================================

class GoalCreate(WireModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    target_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("target_date", "targetDate"),
    )
    progress: int = Field(default=0, ge=0, le=100, strict=True)


class GoalProgressUpdate(WireModel):
    # Validated by goal_service: whole number in [0, 100]
    progress: Any = None


class GoalResponse(WireModel):
    id: uuid.UUID
    user_id: str = camel("user_id", "userId")
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    target_date: Optional[datetime] = camel("target_date", "targetDate")
    progress: int
    created_at: Optional[datetime] = camel("created_at", "createdAt")


# =============================================================================
# Decisions
# =============================================================================

class DecisionCreate(WireModel):
    context: str = Field(min_length=1)
    option_a: str = Field(
        min_length=1,
        validation_alias=AliasChoices("option_a", "optionA"),
    )
    option_b: str = Field(
        min_length=1,
        validation_alias=AliasChoices("option_b", "optionB"),
    )


class DecisionResponse(WireModel):
    id: uuid.UUID
    user_id: str = camel("user_id", "userId")
    context: str
    option_a: str = camel("option_a", "optionA")
    option_b: str = camel("option_b", "optionB")
    analysis: Dict[str, Any]
    schema_version: str = camel("schema_version", "schemaVersion")
    degraded: bool = False
    created_at: Optional[datetime] = camel("created_at", "createdAt")


# =============================================================================
# Metrics
# =============================================================================

class MetricsResponse(WireModel):
    id: uuid.UUID
    user_id: str = camel("user_id", "userId")
    productivity: int
    decision_quality: int = camel("decision_quality", "decisionQuality")
    stress_level: int = camel("stress_level", "stressLevel")
    date: datetime
