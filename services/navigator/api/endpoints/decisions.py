"""
Decisions API Endpoints Module
"""
import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_actor_id, get_decision_orchestrator, get_gateway
from decision_orchestrator import DecisionAnalysisOrchestrator
from exceptions import DecisionNotFound
from schemas import DecisionResponse

router = APIRouter(prefix="/api/decisions", tags=["decisions"])


@router.post("/analyze", response_model=DecisionResponse)
async def analyze_decision(
    payload: Dict[str, Any] = Body(...),
    actor_id: str = Depends(get_actor_id),
    orchestrator: DecisionAnalysisOrchestrator = Depends(get_decision_orchestrator),
):
    """
    Compare two options and store the analysis.

    Rate-limited upstream still yields 200 with the canned analysis.
    """
    return await orchestrator.analyze_decision(actor_id, payload)


@router.get("", response_model=List[DecisionResponse])
async def list_decisions(actor_id: str = Depends(get_actor_id), gateway=Depends(get_gateway)):
    return await gateway.list_decisions(actor_id)


@router.get("/{decision_id}", response_model=DecisionResponse)
async def get_decision(
    decision_id: uuid.UUID,
    actor_id: str = Depends(get_actor_id),
    gateway=Depends(get_gateway),
):
    decision = await gateway.get_decision(actor_id, decision_id)
    if decision is None:
        raise DecisionNotFound(decision_id)
    return decision
