"""
WhatsApp Cloud API webhook payload schemas.

Only the parts the pipeline reads are modelled: entry[].changes[].value with
its messages and contacts. Unknown fields are ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class WhatsAppText(BaseModel):
    body: str = ""


class WhatsAppMessage(BaseModel):
    """One inbound message (value.messages[])."""

    from_: str = Field(alias="from")
    id: Optional[str] = None
    timestamp: Optional[str] = None
    type: str = "text"
    text: Optional[WhatsAppText] = None

    model_config = {"populate_by_name": True}


class WhatsAppProfile(BaseModel):
    name: str = ""


class WhatsAppContact(BaseModel):
    """Sender profile (value.contacts[])."""

    wa_id: Optional[str] = None
    profile: WhatsAppProfile = Field(default_factory=WhatsAppProfile)


class WhatsAppValue(BaseModel):
    messaging_product: Optional[str] = None
    contacts: list[WhatsAppContact] = Field(default_factory=list)
    messages: list[WhatsAppMessage] = Field(default_factory=list)


class WhatsAppChange(BaseModel):
    field: Optional[str] = None
    value: WhatsAppValue = Field(default_factory=WhatsAppValue)


class WhatsAppEntry(BaseModel):
    id: Optional[str] = None
    changes: list[WhatsAppChange] = Field(default_factory=list)


class WhatsAppWebhookPayload(BaseModel):
    """WhatsApp webhook payload (root object)."""

    object: Optional[str] = None
    entry: list[WhatsAppEntry] = Field(default_factory=list)
