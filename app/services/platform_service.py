"""Connected platform configuration and per-send credential resolution."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.constants.chat import Channel
from app.core.credentials import decrypt_token, encrypt_token
from app.exceptions import PersistenceError
from app.models.connected_platform import ConnectedPlatform
from app.schemas.platform import PlatformCredentials, PlatformUpsert

logger = logging.getLogger(__name__)


class PlatformService:
    """Reads and writes connected_platforms rows; resolves the credentials a sender should use."""

    def __init__(self, db: Session, settings: Optional[Settings] = None) -> None:
        self.db = db
        self.settings = settings or get_settings()

    def get_platform(self, channel: str) -> Optional[ConnectedPlatform]:
        try:
            return (
                self.db.query(ConnectedPlatform)
                .filter(ConnectedPlatform.platform == channel)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to read {channel} platform config: {e}") from e

    def list_platforms(self) -> List[ConnectedPlatform]:
        return self.db.query(ConnectedPlatform).order_by(ConnectedPlatform.platform).all()

    def upsert_platform(self, channel: Channel, data: PlatformUpsert) -> ConnectedPlatform:
        """Create or replace the row for ``channel``. A new token is encrypted; omitting it keeps the old one."""
        platform = self.get_platform(channel.value)
        if platform is None:
            platform = ConnectedPlatform(platform=channel.value)
            self.db.add(platform)
        platform.platform_id = data.platform_id
        platform.phone_number_id = data.phone_number_id
        platform.page_id = data.page_id
        platform.webhook_url = data.webhook_url
        platform.active = data.active
        if data.token:
            platform.encrypted_token = encrypt_token(data.token)
        self.db.commit()
        self.db.refresh(platform)
        return platform

    def get_credentials(self, channel: Channel) -> Optional[PlatformCredentials]:
        """
        Credentials for sending on ``channel``, or None when the channel is not usable.

        A connected_platforms row wins over the environment: an inactive row or
        one without a token disables the channel. Without a row the environment
        settings are used.
        """
        platform = self.get_platform(channel.value)
        if platform is not None:
            if not platform.active:
                logger.warning("%s platform is inactive", channel.value)
                return None
            if not platform.encrypted_token:
                logger.warning("%s platform has no access token", channel.value)
                return None
            return PlatformCredentials(
                token=decrypt_token(platform.encrypted_token),
                phone_number_id=platform.phone_number_id,
                page_id=platform.page_id,
            )
        return self._credentials_from_env(channel)

    def _credentials_from_env(self, channel: Channel) -> Optional[PlatformCredentials]:
        s = self.settings
        if channel == Channel.WHATSAPP and s.whatsapp_token:
            return PlatformCredentials(
                token=s.whatsapp_token, phone_number_id=s.whatsapp_phone_number_id
            )
        if channel == Channel.INSTAGRAM and s.instagram_access_token:
            return PlatformCredentials(
                token=s.instagram_access_token, page_id=s.instagram_page_id
            )
        if channel == Channel.TELEGRAM and s.telegram_enabled and s.telegram_bot_token:
            return PlatformCredentials(token=s.telegram_bot_token)
        return None
