"""
Base command for platform webhooks.

Validates the request, parses the payload with the platform adapter, runs the
conversation pipeline for each message and replies in the same channel.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException

from app.adapters.base import BasePlatformAdapter
from app.commands.webhooks.process_message_command import ProcessIncomingMessageCommand
from app.constants.chat import PROCESSING_APOLOGY
from app.exceptions import CRMError, InvalidPayloadError
from app.schemas.messaging import InboundMessage

WEBHOOK_OK = {"success": True}


class BaseWebhookCommand:
    """
    Shared webhook flow. Subclasses choose the failure policy through
    ``fail_on_error``: when True a processing or send failure answers 500
    (after a best-effort apology); when False it is logged and the next
    message is processed.
    """

    fail_on_error = True

    def __init__(
        self,
        adapter: BasePlatformAdapter,
        pipeline: ProcessIncomingMessageCommand,
    ) -> None:
        self.adapter = adapter
        self.pipeline = pipeline
        self.logger = logging.getLogger(__name__)

    async def execute(self, body: Any) -> dict[str, bool]:
        """
        Handle one webhook POST whose secret was already checked by the route.

        Raises:
            HTTPException: 400 when the body is not a platform payload, 500
                when processing or the reply fails on a platform that reports
                errors.
        """
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Body must be a JSON object")
        try:
            messages = self.adapter.parse_webhook(body)
        except InvalidPayloadError as e:
            self.logger.warning("%s webhook parse error: %s", self.adapter.channel.value, e)
            raise HTTPException(status_code=400, detail="Invalid webhook payload") from e

        if not messages:
            self.logger.info("%s webhook carried no text message", self.adapter.channel.value)
            return WEBHOOK_OK

        for inbound in messages:
            await self._handle(inbound)
        return WEBHOOK_OK

    async def _handle(self, inbound: InboundMessage) -> None:
        channel = inbound.channel.value
        try:
            reply = await self.pipeline.execute(inbound)
        except Exception as e:
            self.logger.exception(
                "Failed to process %s message from %s: %s",
                channel,
                inbound.external_user_id,
                e,
            )
            if not self.fail_on_error:
                return
            await self._apologize(inbound)
            raise HTTPException(status_code=500, detail="Failed to process message") from e

        try:
            result = await self.adapter.send(inbound.external_user_id, reply)
        except Exception as e:
            self.logger.error(
                "Failed to send %s reply to %s: %s",
                channel,
                inbound.external_user_id,
                e,
                exc_info=not isinstance(e, CRMError),
            )
            if self.fail_on_error:
                raise HTTPException(status_code=500, detail="Failed to send reply") from e
            return
        if not result.skipped:
            self.logger.info("%s reply sent to %s", channel, inbound.external_user_id)

    async def _apologize(self, inbound: InboundMessage) -> None:
        try:
            await self.adapter.send(inbound.external_user_id, PROCESSING_APOLOGY)
        except Exception as e:
            self.logger.warning("Apology to %s failed: %s", inbound.external_user_id, e)
