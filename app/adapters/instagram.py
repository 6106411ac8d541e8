"""
Instagram Messaging adapter.

Inbound: every entry[].messaging[] event that carries text.
Outbound: POST {version}/me/messages as a RESPONSE message.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import ValidationError

from app.adapters.graph import GraphAPIAdapter
from app.constants.chat import Channel, INSTAGRAM_DISPLAY_NAME
from app.exceptions import InvalidPayloadError
from app.schemas.instagram import InstagramWebhookPayload
from app.schemas.messaging import InboundMessage, OutboundSendResult

SUCCESS_STATUSES = (200, 201)


class InstagramAdapter(GraphAPIAdapter):
    channel = Channel.INSTAGRAM

    def parse_webhook(self, raw_payload: dict[str, Any]) -> list[InboundMessage]:
        try:
            payload = InstagramWebhookPayload.model_validate(raw_payload)
        except ValidationError as e:
            raise InvalidPayloadError(f"Invalid Instagram payload: {e}") from e

        messages: list[InboundMessage] = []
        for entry in payload.entry:
            for event in entry.messaging:
                if event.message is None or not (event.message.text or "").strip():
                    continue
                messages.append(
                    InboundMessage(
                        channel=Channel.INSTAGRAM,
                        external_user_id=event.sender.id,
                        display_name=INSTAGRAM_DISPLAY_NAME,
                        text=event.message.text,
                        message_id=event.message.mid,
                    )
                )
        return messages

    async def send(self, recipient: Union[str, int], text: str) -> OutboundSendResult:
        credentials = self._credentials()
        if credentials is None:
            return self._skipped("platform not configured or inactive")

        payload = {
            "recipient": {"id": str(recipient)},
            "message": {"text": text},
            "messaging_type": "RESPONSE",
        }
        return await self._post(
            self._url("me/messages"), credentials.token, payload, SUCCESS_STATUSES
        )

    def _message_id(self, data: dict[str, Any]):
        return data.get("message_id")
