"""
Platform adapter interface.

Adapters encapsulate platform-specific logic: parsing webhook payloads into
normalized inbound messages, sending text replies, and answering the
subscription handshake.
"""

from __future__ import annotations

import hmac
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from app.constants.chat import Channel
from app.exceptions import ConfigurationMissingError
from app.schemas.messaging import InboundMessage, OutboundSendResult
from app.schemas.platform import PlatformCredentials
from app.services.platform_service import PlatformService

logger = logging.getLogger(__name__)

SUBSCRIBE_MODE = "subscribe"


class BasePlatformAdapter(ABC):
    """Contract for platform adapters. New platforms implement this interface."""

    channel: Channel

    def __init__(
        self,
        platforms: PlatformService,
        verify_token: Optional[str] = None,
    ) -> None:
        self._platforms = platforms
        self._verify_token = verify_token

    @abstractmethod
    def parse_webhook(self, raw_payload: dict[str, Any]) -> list[InboundMessage]:
        """
        Parse a webhook body into the text messages it carries.

        Returns an empty list when the event carries no text message. Raises
        InvalidPayloadError when the body does not have the platform's shape.
        """
        ...

    @abstractmethod
    async def send(self, recipient: Union[str, int], text: str) -> OutboundSendResult:
        """
        Send a text message to ``recipient``.

        Returns a skipped result when the platform is not configured. Raises
        SendError on API or transport failure.
        """
        ...

    def verify_subscription(
        self, mode: Optional[str], token: Optional[str], challenge: Optional[str]
    ) -> Optional[str]:
        """Return the challenge to echo when the handshake is valid, otherwise None."""
        if mode != SUBSCRIBE_MODE or not self._verify_token or token is None:
            return None
        if not hmac.compare_digest(token, self._verify_token):
            return None
        return challenge or ""

    def verify_webhook(self, request_headers: Optional[dict[str, str]] = None) -> bool:
        """
        Verify a webhook POST (e.g. secret header). Override if the platform supports it.
        Return True if valid or verification not required; False to reject.
        """
        return True

    def _credentials(self) -> Optional[PlatformCredentials]:
        try:
            return self._platforms.get_credentials(self.channel)
        except ConfigurationMissingError as e:
            logger.warning("%s credentials unavailable: %s", self.channel.value, e)
            return None

    def _skipped(self, reason: str) -> OutboundSendResult:
        logger.warning("%s send skipped: %s", self.channel.value, reason)
        return OutboundSendResult(success=True, skipped=True)
