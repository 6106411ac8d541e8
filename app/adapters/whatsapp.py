"""
WhatsApp Cloud API adapter.

Inbound: the first message of the first change of the first entry.
Outbound: POST {version}/{phone_number_id}/messages with a text body.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import ValidationError

from app.adapters.graph import GraphAPIAdapter
from app.constants.chat import Channel
from app.exceptions import InvalidPayloadError
from app.schemas.messaging import InboundMessage, OutboundSendResult
from app.schemas.whatsapp import WhatsAppWebhookPayload

SUCCESS_STATUSES = range(200, 300)


class WhatsAppAdapter(GraphAPIAdapter):
    channel = Channel.WHATSAPP

    def parse_webhook(self, raw_payload: dict[str, Any]) -> list[InboundMessage]:
        try:
            payload = WhatsAppWebhookPayload.model_validate(raw_payload)
        except ValidationError as e:
            raise InvalidPayloadError(f"Invalid WhatsApp payload: {e}") from e

        if not payload.entry or not payload.entry[0].changes:
            return []
        value = payload.entry[0].changes[0].value
        if not value.messages:
            return []

        message = value.messages[0]
        text = message.text.body if message.text else ""
        if not text.strip():
            return []
        name = value.contacts[0].profile.name if value.contacts else ""
        return [
            InboundMessage(
                channel=Channel.WHATSAPP,
                external_user_id=message.from_,
                display_name=name,
                text=text,
                message_id=message.id,
            )
        ]

    async def send(self, recipient: Union[str, int], text: str) -> OutboundSendResult:
        credentials = self._credentials()
        if credentials is None:
            return self._skipped("platform not configured or inactive")
        if not credentials.phone_number_id:
            return self._skipped("phone number id is not configured")

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": str(recipient),
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
        return await self._post(
            self._url(f"{credentials.phone_number_id}/messages"),
            credentials.token,
            payload,
            SUCCESS_STATUSES,
        )

    def _message_id(self, data: dict[str, Any]):
        messages = data.get("messages") or []
        if messages and isinstance(messages[0], dict):
            return messages[0].get("id")
        return None
