"""
FastAPI dependencies: actor identity, gateway, model client, services.

Tests swap the collaborators through app.dependency_overrides on
get_gateway / get_model_client.
"""
from typing import Optional

from fastapi import Depends, Header

from chat_orchestrator import ChatOrchestrator
from decision_orchestrator import DecisionAnalysisOrchestrator
from goal_service import GoalService
from infrastructure.gateway import PersistenceGateway
from llm_client import ModelInvocationClient
from metrics_service import MetricsService
from navigator_config import DEFAULT_ACTOR_ID

_gateway = PersistenceGateway()
_model_client = ModelInvocationClient()


def get_actor_id(x_actor_id: Optional[str] = Header(default=None)) -> str:
    """Actor from the X-Actor-Id header, else the configured default"""
    if x_actor_id and x_actor_id.strip():
        return x_actor_id.strip()
    return DEFAULT_ACTOR_ID


def get_gateway() -> PersistenceGateway:
    return _gateway


def get_model_client() -> ModelInvocationClient:
    return _model_client


def get_chat_orchestrator(
    gateway=Depends(get_gateway),
    model_client=Depends(get_model_client),
) -> ChatOrchestrator:
    return ChatOrchestrator(gateway, model_client)


def get_decision_orchestrator(
    gateway=Depends(get_gateway),
    model_client=Depends(get_model_client),
) -> DecisionAnalysisOrchestrator:
    return DecisionAnalysisOrchestrator(gateway, model_client)


def get_goal_service(gateway=Depends(get_gateway)) -> GoalService:
    return GoalService(gateway)


def get_metrics_service(gateway=Depends(get_gateway)) -> MetricsService:
    return MetricsService(gateway)
