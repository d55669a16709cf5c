"""
Metrics API Endpoints Module
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_actor_id, get_metrics_service
from metrics_service import MetricsService
from schemas import MetricsResponse

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("", response_model=MetricsResponse)
async def get_metrics(
    actor_id: str = Depends(get_actor_id),
    service: MetricsService = Depends(get_metrics_service),
):
    """Latest snapshot; a default one is created on first read"""
    return await service.get_latest_metrics(actor_id)
