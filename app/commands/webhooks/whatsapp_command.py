"""Command to handle WhatsApp Cloud API webhook events."""

from __future__ import annotations

from app.commands.webhooks.base import BaseWebhookCommand


class WhatsAppWebhookCommand(BaseWebhookCommand):
    """Processes the first text message of the event. Failures answer 500 after an apology."""

    fail_on_error = True
