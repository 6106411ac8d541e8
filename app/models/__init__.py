from app.models.broadcast import BroadcastHistory
from app.models.chat_message import ConversationMessage
from app.models.connected_platform import ConnectedPlatform
from app.models.contact import Contact
from app.models.embeddings import (
    ChatHistoryEntry,
    FAQEntry,
    KnowledgeEntry,
    ProductEmbedding,
)
from app.models.system_prompt import SystemPrompt, SystemPromptVersion

__all__ = [
    "BroadcastHistory",
    "ChatHistoryEntry",
    "ConnectedPlatform",
    "Contact",
    "ConversationMessage",
    "FAQEntry",
    "KnowledgeEntry",
    "ProductEmbedding",
    "SystemPrompt",
    "SystemPromptVersion",
]
