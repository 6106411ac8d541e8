"""
Telegram platform adapter.

Webhook payloads are validated with the TelegramWebhookUpdate schema; replies
go through python-telegram-bot's Bot.send_message.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError
from telegram import Bot
from telegram.error import TelegramError
from telegram.request import HTTPXRequest

from app.adapters.base import BasePlatformAdapter
from app.constants.chat import Channel
from app.exceptions import InvalidPayloadError, InvalidRecipientError, SendError
from app.schemas.messaging import InboundMessage, OutboundSendResult
from app.schemas.telegram import TelegramWebhookUpdate
from app.services.platform_service import PlatformService

logger = logging.getLogger(__name__)

BotFactory = Callable[[str], Bot]


class TelegramBotFactory:
    """One Bot per token for the life of the process, with the outbound HTTP timeout applied."""

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout = timeout_seconds
        self._bots: dict[str, Bot] = {}
        self._requests: list[HTTPXRequest] = []

    def __call__(self, token: str) -> Bot:
        bot = self._bots.get(token)
        if bot is None:
            request = HTTPXRequest(
                connect_timeout=self._timeout,
                read_timeout=self._timeout,
                write_timeout=self._timeout,
            )
            bot = Bot(token=token, request=request)
            self._bots[token] = bot
            self._requests.append(request)
        return bot

    async def shutdown(self) -> None:
        """Close the HTTP connection pools of every bot handed out."""
        # Bot.shutdown is a no-op for bots that were never initialize()d
        for request in self._requests:
            await request.shutdown()
        self._requests.clear()
        self._bots.clear()


def parse_chat_id(recipient: Union[str, int]) -> int:
    """Telegram chat ids are 64-bit integers; numeric strings are accepted."""
    if isinstance(recipient, bool):
        raise InvalidRecipientError(f"invalid chat ID: {recipient!r}")
    if isinstance(recipient, int):
        return recipient
    try:
        return int(str(recipient).strip())
    except ValueError:
        raise InvalidRecipientError(f"invalid chat ID: {recipient!r}") from None


class TelegramAdapter(BasePlatformAdapter):
    """Telegram adapter: parse webhook updates, send messages via Bot API."""

    channel = Channel.TELEGRAM
    TELEGRAM_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

    def __init__(
        self,
        platforms: PlatformService,
        bot_factory: BotFactory,
        verify_token: Optional[str] = None,
        webhook_secret: Optional[str] = None,
    ) -> None:
        super().__init__(platforms, verify_token=verify_token)
        self._bot_factory = bot_factory
        self._webhook_secret = webhook_secret

    def verify_webhook(self, request_headers: Optional[dict[str, str]] = None) -> bool:
        """Validate X-Telegram-Bot-Api-Secret-Token if a webhook secret is configured."""
        if not self._webhook_secret:
            return True
        request_headers = request_headers or {}
        header_lower = self.TELEGRAM_SECRET_HEADER.lower()
        actual = None
        for key, value in request_headers.items():
            if key.lower() == header_lower:
                actual = value
                break
        return actual == self._webhook_secret

    def parse_webhook(self, raw_payload: dict[str, Any]) -> list[InboundMessage]:
        try:
            update = TelegramWebhookUpdate.model_validate(raw_payload)
        except ValidationError as e:
            raise InvalidPayloadError(f"Invalid Telegram update: {e}") from e

        msg = update.message
        if msg is None or not (msg.text or "").strip():
            return []
        return [
            InboundMessage(
                channel=Channel.TELEGRAM,
                external_user_id=str(msg.chat.id),
                display_name=msg.sender_name,
                text=msg.text,
                message_id=str(msg.message_id),
            )
        ]

    async def send(self, recipient: Union[str, int], text: str) -> OutboundSendResult:
        chat_id = parse_chat_id(recipient)
        credentials = self._credentials()
        if credentials is None:
            return self._skipped("bot token not configured or platform inactive")

        try:
            sent = await self._bot_factory(credentials.token).send_message(
                chat_id=chat_id, text=text
            )
        except TelegramError as e:
            logger.error("Telegram send to %s failed: %s", chat_id, e)
            raise SendError(None, str(e)) from e
        return OutboundSendResult(
            success=True,
            platform_message_id=(
                str(sent.message_id) if sent and sent.message_id else None
            ),
        )
