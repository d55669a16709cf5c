"""
Goal Service

Business logic for goals. Controllers stay thin; every rule is checked here
before the gateway is touched.
"""
import numbers
import uuid
from typing import Any, Dict

from pydantic import ValidationError

from exceptions import GoalNotFound, InvalidInput
from logging_config import get_logger
from navigator_config import GOAL_PROGRESS_MAX, GOAL_PROGRESS_MIN
from schemas import GoalCreate

logger = get_logger(__name__)

PROGRESS_ERROR = f"Progress must be a whole number between {GOAL_PROGRESS_MIN} and {GOAL_PROGRESS_MAX}"


def validate_progress(progress: Any) -> int:
    """
    Accept integers (and integral floats such as 40.0) in [0, 100].

    Booleans, strings, None and fractional values are rejected.
    """
    if isinstance(progress, bool) or not isinstance(progress, numbers.Real):
        raise InvalidInput(PROGRESS_ERROR)
    if isinstance(progress, float) and not progress.is_integer():
        raise InvalidInput(PROGRESS_ERROR)
    if int(progress) != progress:
        raise InvalidInput(PROGRESS_ERROR)
    if not GOAL_PROGRESS_MIN <= progress <= GOAL_PROGRESS_MAX:
        raise InvalidInput(PROGRESS_ERROR)
    return int(progress)


class GoalService:
    def __init__(self, gateway):
        self.gateway = gateway

    async def list_goals(self, actor_id: str):
        return await self.gateway.list_goals(actor_id)

    async def create_goal(self, actor_id: str, payload: Dict[str, Any]):
        try:
            request = GoalCreate.model_validate(payload)
        except ValidationError as e:
            raise InvalidInput(
                "Invalid goal data",
                errors=e.errors(include_url=False, include_context=False),
            ) from e
        return await self.gateway.create_goal(actor_id, request.model_dump())

    async def update_goal_progress(self, actor_id: str, goal_id: uuid.UUID, progress: Any):
        value = validate_progress(progress)

        goal = await self.gateway.update_goal_progress(actor_id, goal_id, value)
        if goal is None:
            raise GoalNotFound(goal_id)

        logger.info("goal_progress_updated", goal_id=str(goal_id), progress=value)
        return goal
