from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from futura_hooks.api.middleware.correlation_id import CorrelationIdMiddleware
from futura_hooks.api.v1.routers import health, hooks
from futura_hooks.application.exceptions import (
    ConfigurationError,
    HookError,
    InvalidEventError,
    UnknownHookError,
)
from futura_hooks.config import DispatcherConfig, settings
from futura_hooks.hooks.registry import build_default_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    config = DispatcherConfig.from_settings(settings).validate()

    app.state.http_client = httpx.AsyncClient()
    app.state.registry = build_default_registry(
        config,
        app.state.http_client,
        settings.EMAIL_REQUESTS_COLLECTION,
    )
    logger.info(
        "Hook registry ready, notifications for collection=%s -> %s",
        settings.EMAIL_REQUESTS_COLLECTION,
        config.url,
    )

    app.state.redis = None
    if settings.REDIS_URL:
        app.state.redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)

    yield

    await app.state.http_client.aclose()
    if app.state.redis is not None:
        await app.state.redis.aclose()
    logger.info("HTTP client closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Futura Hooks",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(hooks.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(UnknownHookError)
    async def _unknown_hook(_req: Request, exc: UnknownHookError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(InvalidEventError)
    async def _invalid_event(_req: Request, exc: InvalidEventError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(ConfigurationError)
    async def _misconfigured(_req: Request, exc: ConfigurationError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": exc.detail})

    @app.exception_handler(HookError)
    async def _hook_failed(_req: Request, exc: HookError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"ok": False, "error": str(exc)})
