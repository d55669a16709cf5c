"""
Exception handlers: domain exceptions and request parsing errors -> JSON
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from exceptions import EXCEPTION_TO_STATUS, NavigatorError
from logging_config import get_logger

logger = get_logger(__name__)


def status_for(exc: NavigatorError) -> int:
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_TO_STATUS:
            return EXCEPTION_TO_STATUS[cls]
    return 500


async def navigator_error_handler(request: Request, exc: NavigatorError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("request_failed", path=request.url.path, code=type(exc).__name__, details=exc.details)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "code": "InvalidInput", "errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NavigatorError, navigator_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
