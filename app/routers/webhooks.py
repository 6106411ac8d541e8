"""
Webhook routes for inbound chat platform updates.

Platforms GET here for the subscription handshake and POST message events.
Webhooks are unauthenticated; Telegram can be protected by a secret header.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from app.adapters.registry import AdapterRegistry
from app.commands.webhooks import (
    BaseWebhookCommand,
    InstagramWebhookCommand,
    ProcessIncomingMessageCommand,
    TelegramWebhookCommand,
    WhatsAppWebhookCommand,
)
from app.constants.chat import Channel
from app.routers.utils.dependencies import get_adapter_registry, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

_COMMANDS: dict[Channel, type[BaseWebhookCommand]] = {
    Channel.WHATSAPP: WhatsAppWebhookCommand,
    Channel.INSTAGRAM: InstagramWebhookCommand,
    Channel.TELEGRAM: TelegramWebhookCommand,
}


def _verify(
    adapters: AdapterRegistry,
    channel: Channel,
    mode: Optional[str],
    token: Optional[str],
    challenge: Optional[str],
) -> PlainTextResponse:
    echoed = adapters.get(channel).verify_subscription(mode, token, challenge)
    if echoed is None:
        logger.warning("%s webhook verification failed (mode=%s)", channel.value, mode)
        raise HTTPException(status_code=403, detail="Verification failed")
    logger.info("%s webhook verified", channel.value)
    return PlainTextResponse(echoed)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        logger.warning("Webhook invalid JSON: %s", e)
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e


async def _receive(
    channel: Channel,
    request: Request,
    adapters: AdapterRegistry,
    pipeline: ProcessIncomingMessageCommand,
) -> dict[str, bool]:
    command = _COMMANDS[channel](adapters.get(channel), pipeline)
    headers = dict(request.headers) if request.headers else {}
    if not command.adapter.verify_webhook(headers):
        raise HTTPException(status_code=403, detail="Invalid webhook secret")
    body = await _read_json(request)
    return await command.execute(body)


@router.get("/whatsapp", response_class=PlainTextResponse)
def verify_whatsapp_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
    adapters: AdapterRegistry = Depends(get_adapter_registry),
) -> PlainTextResponse:
    """Echo hub.challenge when hub.mode is subscribe and the verify token matches."""
    return _verify(adapters, Channel.WHATSAPP, mode, token, challenge)


@router.post("/whatsapp")
async def whatsapp_webhook(
    request: Request,
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    pipeline: ProcessIncomingMessageCommand = Depends(get_pipeline),
) -> dict[str, bool]:
    """Receive a WhatsApp event, answer the first text message."""
    return await _receive(Channel.WHATSAPP, request, adapters, pipeline)


@router.get("/instagram", response_class=PlainTextResponse)
def verify_instagram_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
    adapters: AdapterRegistry = Depends(get_adapter_registry),
) -> PlainTextResponse:
    return _verify(adapters, Channel.INSTAGRAM, mode, token, challenge)


@router.post("/instagram")
async def instagram_webhook(
    request: Request,
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    pipeline: ProcessIncomingMessageCommand = Depends(get_pipeline),
) -> dict[str, bool]:
    """Receive an Instagram event, answer every text message in it."""
    return await _receive(Channel.INSTAGRAM, request, adapters, pipeline)


@router.get("/telegram", response_class=PlainTextResponse)
def verify_telegram_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
    adapters: AdapterRegistry = Depends(get_adapter_registry),
) -> PlainTextResponse:
    return _verify(adapters, Channel.TELEGRAM, mode, token, challenge)


@router.post("/telegram")
async def telegram_webhook(
    request: Request,
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    pipeline: ProcessIncomingMessageCommand = Depends(get_pipeline),
) -> dict[str, bool]:
    """
    Receive a Telegram update and reply in the same chat.
    Validate X-Telegram-Bot-Api-Secret-Token if TELEGRAM_WEBHOOK_SECRET is set.
    """
    return await _receive(Channel.TELEGRAM, request, adapters, pipeline)
