"""Instagram Messaging webhook payload schemas (entry[].messaging[])."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class InstagramParticipant(BaseModel):
    id: str


class InstagramMessageBody(BaseModel):
    mid: Optional[str] = None
    text: Optional[str] = None


class InstagramMessagingEvent(BaseModel):
    sender: InstagramParticipant
    recipient: Optional[InstagramParticipant] = None
    timestamp: Optional[int] = None
    message: Optional[InstagramMessageBody] = None


class InstagramEntry(BaseModel):
    id: Optional[str] = None
    time: Optional[int] = None
    messaging: list[InstagramMessagingEvent] = Field(default_factory=list)


class InstagramWebhookPayload(BaseModel):
    """Instagram webhook payload (root object)."""

    object: Optional[str] = None
    entry: list[InstagramEntry] = Field(default_factory=list)
