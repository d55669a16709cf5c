"""
Decision Analysis Orchestrator

Validates the request, asks the model for an analysis constrained by
DECISION_ANALYSIS_SCHEMA and stores exactly one Decision per request.

Outcomes:
- ok + conforming JSON       -> Decision with the model analysis
- capacity exhausted         -> Decision with the canned analysis (degraded)
- anything else              -> DecisionAnalysisFailed, nothing stored
"""
from typing import Any, Dict

from pydantic import ValidationError

from analysis_schema import DECISION_ANALYSIS_SCHEMA, OutputSchema, SchemaViolation
from exceptions import DecisionAnalysisFailed, InvalidInput
from fallbacks import fallback_analysis
from llm_client import ModelInvocationClient, ModelStatus
from logging_config import get_logger, log_degraded_response
from navigator_config import ANALYSIS_MODEL, DECISION_PROMPT_TEMPLATE, DECISION_SYSTEM_INSTRUCTION
from schemas import DecisionCreate

logger = get_logger(__name__)


def build_prompt(request: DecisionCreate) -> str:
    return DECISION_PROMPT_TEMPLATE.format(
        context=request.context,
        option_a=request.option_a,
        option_b=request.option_b,
    )


class DecisionAnalysisOrchestrator:
    def __init__(
        self,
        gateway,
        model_client: ModelInvocationClient,
        model: str = ANALYSIS_MODEL,
        output_schema: OutputSchema = DECISION_ANALYSIS_SCHEMA,
    ):
        self.gateway = gateway
        self.model_client = model_client
        self.model = model
        self.output_schema = output_schema

    async def analyze_decision(self, actor_id: str, payload: Dict[str, Any]):
        try:
            request = DecisionCreate.model_validate(payload)
        except ValidationError as e:
            raise InvalidInput(
                "Invalid decision data",
                errors=e.errors(include_url=False, include_context=False),
            ) from e

        result = await self.model_client.generate_structured(
            self.model,
            DECISION_SYSTEM_INSTRUCTION,
            build_prompt(request),
            self.output_schema,
        )

        if result.status is ModelStatus.CAPACITY_EXHAUSTED:
            decision = await self._store(actor_id, request, fallback_analysis(), degraded=True)
            log_degraded_response("decision", str(decision.id), result.error or "capacity exhausted")
            return decision

        if result.status is not ModelStatus.OK:
            logger.error("decision_analysis_failed", error=result.error)
            raise DecisionAnalysisFailed(result.error)

        try:
            analysis = self.output_schema.parse(result.text)
        except SchemaViolation as e:
            logger.error("decision_analysis_malformed", schema=e.schema_name, reason=e.reason)
            raise DecisionAnalysisFailed(str(e)) from e

        decision = await self._store(actor_id, request, analysis)
        logger.info(
            "decision_analyzed",
            decision_id=str(decision.id),
            factors=len(analysis["factors"]),
            confidence=analysis["confidence"],
        )
        return decision

    async def _store(self, actor_id: str, request: DecisionCreate, analysis: Dict[str, Any], degraded: bool = False):
        return await self.gateway.create_decision(
            actor_id,
            context=request.context,
            option_a=request.option_a,
            option_b=request.option_b,
            analysis=analysis,
            schema_version=self.output_schema.key,
            degraded=degraded,
        )
