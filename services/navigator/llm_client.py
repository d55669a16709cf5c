"""
Model Invocation Client - Gemini generateContent over httpx

Every call returns a ModelResult instead of raising, so orchestrators branch on
status (ok / capacity_exhausted / failed) and never inspect raw error text.
"""
import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import httpx

from analysis_schema import OutputSchema
from logging_config import get_logger
from navigator_config import (
    EMPTY_REPLY_TEXT,
    GEMINI_API_BASE,
    GEMINI_API_KEY,
    LLM_TIMEOUT_SECONDS,
)

logger = get_logger(__name__)

USER = "user"
MODEL = "model"

QUOTA_CODES = {"insufficient_quota", "RESOURCE_EXHAUSTED"}
QUOTA_PHRASES = ("quota", "rate limit")


@dataclass(frozen=True)
class Turn:
    speaker: str  # USER | MODEL
    text: str


class ModelStatus(str, enum.Enum):
    OK = "ok"
    CAPACITY_EXHAUSTED = "capacity_exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class ModelResult:
    status: ModelStatus
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ModelStatus.OK

    @classmethod
    def success(cls, text: str) -> "ModelResult":
        return cls(ModelStatus.OK, text=text)

    @classmethod
    def exhausted(cls, error: str) -> "ModelResult":
        return cls(ModelStatus.CAPACITY_EXHAUSTED, error=error)

    @classmethod
    def failure(cls, error: str) -> "ModelResult":
        return cls(ModelStatus.FAILED, error=error)


def is_capacity_exhausted(status_code: Optional[int], code: Any = None, message: Optional[str] = None) -> bool:
    """
    Classify an upstream error as rate limiting / quota exhaustion.

    Signatures: HTTP 429, a quota error code, or message text mentioning
    "quota" or "rate limit".
    """
    if status_code == 429:
        return True
    if code is not None and str(code) in QUOTA_CODES:
        return True
    if message:
        lowered = message.lower()
        return any(phrase in lowered for phrase in QUOTA_PHRASES)
    return False


def _error_fields(response: httpx.Response) -> tuple:
    """Extract (code, message) from a Google-style error body"""
    try:
        body = response.json()
    except ValueError:
        return None, response.text[:500]
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return None, response.text[:500]
    return error.get("status") or error.get("code"), error.get("message", "")


def _reply_text(body: Any) -> str:
    if not isinstance(body, dict):
        return ""
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


class ModelInvocationClient:
    """Thin async client for plain-text and schema-constrained generation"""

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        api_base: str = GEMINI_API_BASE,
        timeout: float = LLM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate_text(
        self,
        model: str,
        system_instruction: str,
        turns: Sequence[Turn],
    ) -> ModelResult:
        payload = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [self._content(turn) for turn in turns],
        }
        result = await self._generate(model, payload)
        if result.ok and not result.text:
            return ModelResult.success(EMPTY_REPLY_TEXT)
        return result

    async def generate_structured(
        self,
        model: str,
        system_instruction: str,
        prompt: str,
        output_schema: OutputSchema,
    ) -> ModelResult:
        """Returned text is expected to parse under output_schema; the caller validates it"""
        payload = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [self._content(Turn(USER, prompt))],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseJsonSchema": output_schema.schema,
            },
        }
        return await self._generate(model, payload)

    @staticmethod
    def _content(turn: Turn) -> Dict[str, Any]:
        return {"role": turn.speaker, "parts": [{"text": turn.text}]}

    async def _generate(self, model: str, payload: Dict[str, Any]) -> ModelResult:
        if not self.api_key:
            logger.error("llm_credential_missing", model=model)
            return ModelResult.failure("model credential is not configured")

        url = f"{self.api_base}/models/{model}:generateContent"
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("llm_transport_error", model=model, error=str(e))
            return ModelResult.failure(f"{type(e).__name__}: {e}")

        if response.is_error:
            code, message = _error_fields(response)
            if is_capacity_exhausted(response.status_code, code, message):
                logger.warning("llm_capacity_exhausted", model=model, status_code=response.status_code, code=code)
                return ModelResult.exhausted(message or f"HTTP {response.status_code}")
            logger.error("llm_api_error", model=model, status_code=response.status_code, error=message)
            return ModelResult.failure(message or f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            logger.error("llm_malformed_body", model=model)
            return ModelResult.failure("response body is not JSON")

        logger.info("llm_call_successful", model=model)
        return ModelResult.success(_reply_text(body))
