"""
Normalized message contracts shared by the platform adapters and the pipeline.

Every platform webhook is parsed into InboundMessage; every send returns
OutboundSendResult.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from app.constants.chat import Channel


class InboundMessage(BaseModel):
    """Normalized inbound message (adapter → pipeline)."""

    channel: Channel
    external_user_id: str  # WhatsApp: wa_id, Instagram: sender id, Telegram: chat id
    display_name: str = ""
    text: str = ""
    message_id: Optional[str] = None


class OutboundSendResult(BaseModel):
    """Result of a platform send. ``skipped`` means no usable platform configuration."""

    success: bool
    skipped: bool = False
    platform_message_id: Optional[str] = None
