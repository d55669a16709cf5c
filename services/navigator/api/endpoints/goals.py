"""
Goals API Endpoints Module
"""
import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_actor_id, get_goal_service
from goal_service import GoalService
from schemas import GoalProgressUpdate, GoalResponse

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=List[GoalResponse])
async def list_goals(
    actor_id: str = Depends(get_actor_id),
    service: GoalService = Depends(get_goal_service),
):
    return await service.list_goals(actor_id)


@router.post("", response_model=GoalResponse)
async def create_goal(
    payload: Dict[str, Any] = Body(...),
    actor_id: str = Depends(get_actor_id),
    service: GoalService = Depends(get_goal_service),
):
    """Create a goal; 400 with the field-level error list on invalid data"""
    return await service.create_goal(actor_id, payload)


@router.patch("/{goal_id}/progress", response_model=GoalResponse)
async def update_goal_progress(
    goal_id: uuid.UUID,
    req: GoalProgressUpdate,
    actor_id: str = Depends(get_actor_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    Set goal progress.

    400 unless progress is a whole number in [0, 100]; 404 if the actor has
    no such goal.
    """
    return await service.update_goal_progress(actor_id, goal_id, req.progress)
