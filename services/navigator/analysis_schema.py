"""
Structured output contracts

An OutputSchema is the data contract between an orchestrator and the model
client: the same JSON Schema is sent upstream as the response constraint and
used locally to validate what comes back.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jsonschema import Draft202012Validator, ValidationError


class SchemaViolation(Exception):
    """Model output is not valid JSON or does not satisfy the schema"""

    def __init__(self, schema_name: str, reason: str):
        self.schema_name = schema_name
        self.reason = reason
        super().__init__(f"{schema_name} validation failed: {reason}")


@dataclass(frozen=True)
class OutputSchema:
    name: str
    version: str
    schema: Dict[str, Any] = field(repr=False)

    @property
    def key(self) -> str:
        return f"{self.name}/v{self.version}"

    def validate(self, data: Any) -> Dict[str, Any]:
        """Return data unchanged if it conforms, else raise SchemaViolation"""
        try:
            Draft202012Validator(self.schema).validate(data)
        except ValidationError as e:
            path = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise SchemaViolation(self.key, f"{path}: {e.message}") from e
        return data

    def parse(self, text: Optional[str]) -> Dict[str, Any]:
        """Decode model text as JSON and validate it"""
        if not text or not text.strip():
            raise SchemaViolation(self.key, "empty response")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaViolation(self.key, f"invalid JSON: {e.msg}") from e
        return self.validate(data)


_SCORE = {"type": "number", "minimum": 1, "maximum": 10}

_RISK = {
    "type": "object",
    "properties": {
        "level": {"type": "string", "enum": ["Low", "Medium", "High"]},
        "description": {"type": "string"},
    },
    "required": ["level", "description"],
}

DECISION_ANALYSIS_SCHEMA = OutputSchema(
    name="decision_analysis",
    version="1",
    schema={
        "type": "object",
        "properties": {
            "summary": {"type": "string"},
            "factors": {
                "type": "array",
                "minItems": 1,
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "optionAScore": _SCORE,
                        "optionBScore": _SCORE,
                        "weight": _SCORE,
                        "reasoning": {"type": "string"},
                    },
                    "required": ["name", "optionAScore", "optionBScore", "weight", "reasoning"],
                },
            },
            "riskAssessment": {
                "type": "object",
                "properties": {
                    "optionA": _RISK,
                    "optionB": _RISK,
                },
                "required": ["optionA", "optionB"],
            },
            "recommendation": {"type": "string"},
            "confidence": _SCORE,
        },
        "required": ["summary", "factors", "riskAssessment", "recommendation", "confidence"],
    },
)
