"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.px_admin.api.router import router as admin_router
from src.px_common.database import dispose_database, ping_database
from src.px_common.errors import AppError
from src.px_common.redis_client import close_redis, ping_redis
from src.px_common.response import app_error_response
from src.px_gateway.api.router import router as auth_router
from src.px_gateway.middleware.request_log import RequestLogMiddleware
from src.px_matching.api.router import router as order_router
from src.px_nonce.api.router import router as nonce_router
from src.px_strategy.api.router import router as strategy_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    await ping_database()
    await ping_redis()
    logger.info("%s started (chain %d)", settings.APP_NAME, settings.CHAIN_ID)
    yield
    await dispose_database()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = app_error_response(exc)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(nonce_router, prefix="/api/v1")
app.include_router(strategy_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
