"""
Command to handle Telegram webhook updates.

Validates X-Telegram-Bot-Api-Secret-Token when a secret is configured, parses
the update and replies in the same chat. Updates without text are dropped.
"""

from __future__ import annotations

from app.commands.webhooks.base import BaseWebhookCommand


class TelegramWebhookCommand(BaseWebhookCommand):
    fail_on_error = True
