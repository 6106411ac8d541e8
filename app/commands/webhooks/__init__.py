"""Webhook command handlers."""

from app.commands.webhooks.base import BaseWebhookCommand
from app.commands.webhooks.instagram_command import InstagramWebhookCommand
from app.commands.webhooks.process_message_command import ProcessIncomingMessageCommand
from app.commands.webhooks.telegram_command import TelegramWebhookCommand
from app.commands.webhooks.whatsapp_command import WhatsAppWebhookCommand

__all__ = [
    "BaseWebhookCommand",
    "InstagramWebhookCommand",
    "ProcessIncomingMessageCommand",
    "TelegramWebhookCommand",
    "WhatsAppWebhookCommand",
]
