"""
Telegram webhook payload schemas.

Matches the structure Telegram sends to webhook endpoints (message updates).
Unknown fields are ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TelegramUser(BaseModel):
    """Telegram user (message.from)."""

    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class TelegramChat(BaseModel):
    """Telegram chat (message.chat)."""

    id: int
    type: str = "private"
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class TelegramMessage(BaseModel):
    """Telegram message (update.message)."""

    message_id: int
    from_: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: TelegramChat
    date: int = 0
    text: Optional[str] = None

    model_config = {"populate_by_name": True}

    @property
    def sender_name(self) -> str:
        """First and last name of the sender, falling back to the chat names."""
        if self.from_ is not None:
            first, last = self.from_.first_name, self.from_.last_name
        else:
            first, last = self.chat.first_name, self.chat.last_name
        return " ".join(part for part in (first, last) if part).strip()


class TelegramWebhookUpdate(BaseModel):
    """Telegram webhook update payload (root object)."""

    update_id: int
    message: Optional[TelegramMessage] = None
