"""Builds the adapter for a channel from settings and the shared clients."""

from __future__ import annotations

from typing import Optional

import httpx
from sqlalchemy.orm import Session

from app.adapters.base import BasePlatformAdapter
from app.adapters.instagram import InstagramAdapter
from app.adapters.telegram import BotFactory, TelegramAdapter
from app.adapters.whatsapp import WhatsAppAdapter
from app.config import Settings, get_settings
from app.constants.chat import Channel
from app.services.platform_service import PlatformService


class AdapterRegistry:
    """Closed set of platform adapters, selected by channel."""

    def __init__(
        self,
        db: Session,
        http_client: httpx.AsyncClient,
        bot_factory: BotFactory,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        platforms = PlatformService(db, self.settings)
        self._adapters: dict[Channel, BasePlatformAdapter] = {
            Channel.WHATSAPP: WhatsAppAdapter(
                platforms,
                http_client,
                verify_token=self.settings.whatsapp_verify_token,
                api_version=self.settings.graph_api_version,
            ),
            Channel.INSTAGRAM: InstagramAdapter(
                platforms,
                http_client,
                verify_token=self.settings.instagram_verify_token,
                api_version=self.settings.graph_api_version,
            ),
            Channel.TELEGRAM: TelegramAdapter(
                platforms,
                bot_factory,
                verify_token=self.settings.telegram_verify_token,
                webhook_secret=self.settings.telegram_webhook_secret,
            ),
        }

    def get(self, channel: Channel | str) -> BasePlatformAdapter:
        """Adapter for ``channel``. Raises ValueError for an unknown channel."""
        return self._adapters[Channel(channel)]
