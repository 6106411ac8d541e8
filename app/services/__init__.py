from app.services.contact_service import ContactResolver
from app.services.conversation_log import ConversationLog
from app.services.embedding_service import EmbeddingProvider
from app.services.platform_service import PlatformService
from app.services.retrieval_service import RetrievalService
from app.services.system_prompt_service import SystemPromptService
from app.services.vector_service import VectorService
from app.services.vector_store import VectorStore

__all__ = [
    "ContactResolver",
    "ConversationLog",
    "EmbeddingProvider",
    "PlatformService",
    "RetrievalService",
    "SystemPromptService",
    "VectorService",
    "VectorStore",
]
