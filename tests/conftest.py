"""
Pytest Configuration and Fixtures

In-memory stand-ins for the two collaborators the orchestrators depend on:
the persistence gateway and the model invocation client.
"""
import os
import sys
import uuid
from datetime import datetime, timedelta, timezone

import pytest

# Add services/navigator to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'services', 'navigator'))

from exceptions import ConversationNotFound, GatewayFailure  # noqa: E402
from infrastructure.gateway import Resolved  # noqa: E402
from llm_client import ModelResult  # noqa: E402
from models import Conversation, Decision, Goal, LifeMetrics, Message  # noqa: E402


class InMemoryGateway:
    """Same async surface as PersistenceGateway, backed by dicts"""

    def __init__(self):
        self.conversations = {}
        self.messages = []
        self.goals = {}
        self.decisions = {}
        self.metrics = []
        self.calls = []
        self.fail_on = set()
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _record(self, operation: str):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise GatewayFailure(operation)

    def _owned_conversation(self, actor_id, conversation_id):
        conversation = self.conversations.get(conversation_id)
        if conversation is None or conversation.user_id != actor_id:
            raise ConversationNotFound(conversation_id)
        return conversation

    async def get_or_create_conversation(self, actor_id, conversation_id, title):
        self._record("get_or_create_conversation")
        if conversation_id is not None:
            return Resolved(self._owned_conversation(actor_id, conversation_id), created=False)
        conversation = Conversation(id=uuid.uuid4(), user_id=actor_id, title=title, created_at=self._tick())
        self.conversations[conversation.id] = conversation
        return Resolved(conversation, created=True)

    async def create_message(self, conversation_id, role, content, degraded=False):
        self._record("create_message")
        message = Message(
            id=uuid.uuid4(),
            conversation_id=conversation_id,
            role=role,
            content=content,
            seq=len(self.messages) + 1,
            degraded=degraded,
            created_at=self._tick(),
        )
        self.messages.append(message)
        return message

    async def list_messages(self, actor_id, conversation_id):
        self._record("list_messages")
        self._owned_conversation(actor_id, conversation_id)
        return [m for m in self.messages if m.conversation_id == conversation_id]

    async def list_goals(self, actor_id):
        self._record("list_goals")
        return [g for g in self.goals.values() if g.user_id == actor_id]

    async def create_goal(self, actor_id, fields):
        self._record("create_goal")
        goal = Goal(id=uuid.uuid4(), user_id=actor_id, created_at=self._tick(), **fields)
        self.goals[goal.id] = goal
        return goal

    async def update_goal_progress(self, actor_id, goal_id, progress):
        self._record("update_goal_progress")
        goal = self.goals.get(goal_id)
        if goal is None or goal.user_id != actor_id:
            return None
        goal.progress = progress
        return goal

    async def create_decision(self, actor_id, context, option_a, option_b, analysis, schema_version, degraded=False):
        self._record("create_decision")
        decision = Decision(
            id=uuid.uuid4(),
            user_id=actor_id,
            context=context,
            option_a=option_a,
            option_b=option_b,
            analysis=analysis,
            schema_version=schema_version,
            degraded=degraded,
            created_at=self._tick(),
        )
        self.decisions[decision.id] = decision
        return decision

    async def get_decision(self, actor_id, decision_id):
        self._record("get_decision")
        decision = self.decisions.get(decision_id)
        if decision is None or decision.user_id != actor_id:
            return None
        return decision

    async def list_decisions(self, actor_id):
        self._record("list_decisions")
        return [d for d in reversed(list(self.decisions.values())) if d.user_id == actor_id]

    async def get_or_create_latest_metrics(self, actor_id, defaults):
        self._record("get_or_create_latest_metrics")
        existing = [m for m in self.metrics if m.user_id == actor_id]
        if existing:
            return Resolved(existing[-1], created=False)
        metrics = LifeMetrics(id=uuid.uuid4(), user_id=actor_id, date=self._tick(), **defaults)
        self.metrics.append(metrics)
        return Resolved(metrics, created=True)


class ScriptedModelClient:
    """Returns queued ModelResults and records every request"""

    def __init__(self, *results):
        self.results = list(results)
        self.requests = []

    def queue(self, *results):
        self.results.extend(results)

    def _next(self) -> ModelResult:
        if not self.results:
            return ModelResult.failure("no scripted result")
        return self.results.pop(0)

    async def generate_text(self, model, system_instruction, turns):
        self.requests.append({
            "mode": "text",
            "model": model,
            "system_instruction": system_instruction,
            "turns": list(turns),
        })
        return self._next()

    async def generate_structured(self, model, system_instruction, prompt, output_schema):
        self.requests.append({
            "mode": "structured",
            "model": model,
            "system_instruction": system_instruction,
            "prompt": prompt,
            "schema": output_schema,
        })
        return self._next()


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def model_client():
    return ScriptedModelClient()


@pytest.fixture
def sample_analysis():
    """A model analysis that satisfies the decision_analysis schema"""
    return {
        "summary": "Shipping first reduces schedule risk; refactoring first reduces defect risk.",
        "factors": [
            {
                "name": "Delivery speed",
                "optionAScore": 4,
                "optionBScore": 9,
                "weight": 8,
                "reasoning": "Shipping now meets the deadline.",
            },
            {
                "name": "Maintainability",
                "optionAScore": 9,
                "optionBScore": 5,
                "weight": 6,
                "reasoning": "A refactor pays down debt before it compounds.",
            },
        ],
        "riskAssessment": {
            "optionA": {"level": "Low", "description": "Delay only."},
            "optionB": {"level": "High", "description": "Regressions in untested paths."},
        },
        "recommendation": "Ship first, then schedule the refactor.",
        "confidence": 7,
    }


@pytest.fixture
def sample_decision_payload():
    return {
        "context": "Release is due Friday and the billing module is fragile.",
        "optionA": "Refactor billing now",
        "optionB": "Ship first and refactor next sprint",
    }
