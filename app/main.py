from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination

from app.adapters.telegram import TelegramBotFactory
from app.config import get_settings
from app.core.background import BackgroundTaskRunner
from app.exceptions import (
    ConfigurationMissingError,
    InvalidPayloadError,
    NotFoundError,
    PersistenceError,
)
from app.infra.logging_config import LoggingConfig
from app.routers import (
    broadcasts,
    chats,
    contacts,
    health,
    platforms,
    system,
    vectors,
    webhooks,
)
from app.services.embedding_service import build_embedding_provider_from_env
from app.workers.llm import build_responder_from_env

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidPayloadError)
    async def invalid_payload_handler(
        request: Request, exc: InvalidPayloadError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigurationMissingError)
    async def configuration_missing_handler(
        request: Request, exc: ConfigurationMissingError
    ) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("Persistence error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Database error"})


def create_app(testing: bool = False) -> FastAPI:
    """
    Build the FastAPI application.

    Shared clients (HTTP client, embedding provider, responder, Telegram bots,
    background task runner) are created in the lifespan and kept on
    ``app.state``. With ``testing`` the model clients are not built; tests
    override the dependencies that return them.
    """
    settings = get_settings()
    LoggingConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        app.state.telegram_bot_factory = TelegramBotFactory(settings.http_timeout_seconds)
        app.state.task_runner = BackgroundTaskRunner()
        app.state.embedding_provider = None
        app.state.responder = None
        if not testing:
            app.state.embedding_provider = build_embedding_provider_from_env(settings)
            app.state.responder = build_responder_from_env(settings)
        logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
        try:
            yield
        finally:
            await app.state.task_runner.drain()
            await app.state.telegram_bot_factory.shutdown()
            await app.state.http_client.aclose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.include_router(health.router)
    app.include_router(webhooks.router)
    app.include_router(contacts.router)
    app.include_router(chats.router)
    app.include_router(vectors.router)
    app.include_router(platforms.router)
    app.include_router(system.router)
    app.include_router(broadcasts.router)

    _register_exception_handlers(app)
    add_pagination(app)
    return app


app = create_app()
