"""
Metrics Service - latest life metrics snapshot, seeded on first read
"""
from navigator_config import METRICS_DEFAULTS


class MetricsService:
    def __init__(self, gateway, defaults: dict = None):
        self.gateway = gateway
        self.defaults = dict(defaults or METRICS_DEFAULTS)

    async def get_latest_metrics(self, actor_id: str):
        resolved = await self.gateway.get_or_create_latest_metrics(actor_id, self.defaults)
        return resolved.value
