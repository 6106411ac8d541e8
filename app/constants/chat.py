"""Channels, conversation statuses and fixed agent labels."""

from enum import StrEnum


class Channel(StrEnum):
    """Messaging platforms a contact can reach us on."""

    WHATSAPP = "WhatsApp"
    INSTAGRAM = "Instagram"
    TELEGRAM = "Telegram"


class ChatStatus(StrEnum):
    """Lifecycle of a conversation message row."""

    UNASSIGNED = "Unassigned"
    ASSIGNED = "Assigned"
    RESOLVED = "Resolved"
    ANSWERED = "Answered"


class BroadcastStatus(StrEnum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"


class AgentType(StrEnum):
    BOT = "Bot"
    HUMAN = "Human"


BROADCAST_ALL_CHANNELS = "All"

AI_AGENT_NAME = "AI"
AI_ASSIGNED_TO = "AI Bot"
AI_ASSIGNED_AGENT = "AI Assistant"
HUMAN_ASSIGNED_TO = "Human"

DEFAULT_CONTACT_STATUS = "Leads"
DEFAULT_TEMPERATURE = "Warm"

INSTAGRAM_DISPLAY_NAME = "Instagram User"

# Sent in place of a generated reply when the model call fails
GENERATION_APOLOGY = (
    "Sorry, our system is busy at the moment. "
    "Please try again in a few minutes."
)

# Best-effort reply when processing an inbound message fails
PROCESSING_APOLOGY = (
    "Sorry, something went wrong while handling your message. "
    "Please try again later."
)
