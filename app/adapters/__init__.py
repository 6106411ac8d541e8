"""Platform adapters for chat integrations."""

from app.adapters.base import BasePlatformAdapter
from app.adapters.instagram import InstagramAdapter
from app.adapters.registry import AdapterRegistry
from app.adapters.telegram import TelegramAdapter
from app.adapters.whatsapp import WhatsAppAdapter

__all__ = [
    "AdapterRegistry",
    "BasePlatformAdapter",
    "InstagramAdapter",
    "TelegramAdapter",
    "WhatsAppAdapter",
]
