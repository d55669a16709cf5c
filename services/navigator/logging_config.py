"""
Logging for the Navigator service

All modules log through structlog: get_logger(__name__), then one snake_case
event per outcome with its identifiers as keyword fields, e.g.

    logger.info("chat_reply_persisted", conversation_id=str(cid), history_turns=3)

The helpers below own the events that several modules emit with a shared
shape (storage failures, degraded answers, request summaries).
"""
import logging
import sys
from typing import Any, List, Optional

import structlog


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _processors(json_logs: bool) -> List[Any]:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route structlog through the stdlib root logger on stdout.

    JSON lines when json_logs is set (deployed), coloured console output
    otherwise. Called once from main at import time.
    """
    structlog.configure(
        processors=_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level(level))


def get_logger(name: Optional[str] = None) -> Any:
    return structlog.get_logger(name)


def log_gateway_failure(operation: str, error: Exception) -> None:
    """A storage call failed; the caller re-raises it as GatewayFailure"""
    get_logger("gateway").error(
        "gateway_operation_failed",
        operation=operation,
        error_type=type(error).__name__,
        error_message=str(error),
        exc_info=error,
    )


def log_degraded_response(kind: str, entity_id: str, reason: str) -> None:
    """A canned fallback was stored in place of a model answer"""
    get_logger("degradation").warning(
        "degraded_response",
        kind=kind,
        entity_id=entity_id,
        reason=reason,
    )


def http_request_summary(method: str, path: str, status_code: int, duration_ms: float) -> None:
    get_logger("http").info(
        "http_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )
