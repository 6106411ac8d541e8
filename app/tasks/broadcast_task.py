"""Celery task that fans a broadcast out to its recipients."""

from __future__ import annotations

import asyncio
from uuid import UUID

import httpx

from app.adapters.registry import AdapterRegistry
from app.adapters.telegram import TelegramBotFactory
from app.config import get_settings
from app.db import db_manager
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.services.broadcast_service import BroadcastService

logger = get_logger("broadcast_task")


async def _run_broadcast(broadcast_id: UUID) -> int:
    settings = get_settings()
    bot_factory = TelegramBotFactory(settings.http_timeout_seconds)
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http_client:
            with db_manager.db_session() as db:
                adapters = AdapterRegistry(db, http_client, bot_factory, settings)
                history = await BroadcastService(db, settings).run(broadcast_id, adapters)
                return int(history.successful)
    finally:
        await bot_factory.shutdown()


@celery_app.task(name="app.tasks.broadcast_task.send_broadcast_task")
def send_broadcast_task(broadcast_id_str: str) -> int | None:
    """Send a queued broadcast. Returns the number of successful deliveries."""
    try:
        broadcast_id = UUID(broadcast_id_str)
    except ValueError:
        logger.warning("Invalid broadcast id: %s", broadcast_id_str)
        return None

    return asyncio.run(_run_broadcast(broadcast_id))
