"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 3002
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.ot_common.database import engine
from src.ot_common.errors import AppError
from src.ot_common.redis_client import close_redis, get_redis
from src.ot_common.response import error_content
from src.ot_exchange.api.router import router as cron_router
from src.ot_gateway.middleware.cors import PreflightCORSMiddleware
from src.ot_gateway.middleware.request_log import RequestLogMiddleware
from src.ot_stats.api.router import router as stats_router

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = await get_redis()
    await redis.ping()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=settings.TRUSTED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "DELETE", "PATCH", "POST", "PUT", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With", "Accept"],
    max_age=60 * 60 * 24 * 30,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=error_content(exc.message, exc.details),
        headers=exc.headers,
    )


app.include_router(stats_router, prefix="/api/v1")
app.include_router(cron_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}
