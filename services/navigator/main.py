import asyncio

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from api.endpoints import chat, conversations, decisions, goals, metrics
from api.errors import register_exception_handlers
from api.middleware import LoggingMiddleware, add_cors_middleware
from database import Base, close_db_connections, engine
import models  # noqa: F401
from logging_config import get_logger, setup_logging
from navigator_config import JSON_LOGS, LOG_LEVEL

setup_logging(level=LOG_LEVEL, json_logs=JSON_LOGS)
logger = get_logger(__name__)

DB_CONNECT_ATTEMPTS = 15
DB_CONNECT_DELAY_SECONDS = 2

app = FastAPI(title="Navigator API")

add_cors_middleware(app)
app.add_middleware(LoggingMiddleware)
register_exception_handlers(app)

app.include_router(conversations.router)
app.include_router(chat.router)
app.include_router(goals.router)
app.include_router(decisions.router)
app.include_router(metrics.router)


async def wait_for_db():
    logger.info("database_connecting")
    for attempt in range(1, DB_CONNECT_ATTEMPTS + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("database_connected", attempt=attempt)
            return
        except (OSError, SQLAlchemyError) as e:
            logger.warning("database_unavailable", attempt=attempt, error=str(e))
            if attempt == DB_CONNECT_ATTEMPTS:
                raise
            await asyncio.sleep(DB_CONNECT_DELAY_SECONDS)


@app.on_event("startup")
async def startup():
    await wait_for_db()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("system_online")


@app.on_event("shutdown")
async def shutdown():
    await close_db_connections()


@app.get("/health")
async def health():
    return {"status": "ok"}
