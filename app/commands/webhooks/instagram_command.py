"""Command to handle Instagram Messaging webhook events."""

from __future__ import annotations

from app.commands.webhooks.base import BaseWebhookCommand


class InstagramWebhookCommand(BaseWebhookCommand):
    """
    Processes every text message of the event. A failing message is logged
    and dropped so the rest of the batch still gets answered; the webhook
    always answers 200 once the payload parses.
    """

    fail_on_error = False
