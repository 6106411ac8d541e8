"""Embedding-aware operations on the vector store: ingest, search and history capture."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.embeddings import (
    ChatHistoryEntry,
    FAQEntry,
    KnowledgeEntry,
    ProductEmbedding,
)
from app.services.embedding_service import EmbeddingProvider
from app.services.vector_store import VectorStore

logger = logging.getLogger(__name__)


def product_embedding_text(description: str, features: str, use_cases: str) -> str:
    return f"{description}. {features}. {use_cases}"


class VectorService:
    """Embeds text with the provider, then stores or searches through VectorStore."""

    def __init__(self, db: Session, embedder: EmbeddingProvider) -> None:
        self.db = db
        self.embedder = embedder
        self.store = VectorStore(db)

    async def add_knowledge(
        self,
        title: str,
        content: str,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        source: Optional[str] = None,
    ) -> KnowledgeEntry:
        """Embed the content and store a new active knowledge entry."""
        embedding = await self.embedder.embed(content)
        entry = self.store.add_knowledge(
            title=title,
            content=content,
            embedding=embedding,
            category=category,
            tags=tags,
            source=source,
        )
        logger.info("Knowledge entry %s added: %s", entry.id, title)
        return entry

    async def add_faq(
        self, question: str, answer: str, category: Optional[str] = None
    ) -> FAQEntry:
        """Embed the question and store a new active FAQ entry."""
        embedding = await self.embedder.embed(question)
        entry = self.store.add_faq(
            question=question, answer=answer, embedding=embedding, category=category
        )
        logger.info("FAQ entry %s added", entry.id)
        return entry

    async def add_product_embedding(
        self, product_id: str, description: str, features: str, use_cases: str
    ) -> ProductEmbedding:
        embedding = await self.embedder.embed(
            product_embedding_text(description, features, use_cases)
        )
        return self.store.add_product_embedding(
            product_id=product_id,
            description=description,
            features=features,
            use_cases=use_cases,
            embedding=embedding,
        )

    async def search_knowledge(self, query: str, limit: int = 3) -> list[KnowledgeEntry]:
        embedding = await self.embedder.embed(query)
        return self.store.nearest_knowledge(embedding, limit)

    def search_knowledge_by_keyword(
        self, query: str, limit: int = 3
    ) -> list[KnowledgeEntry]:
        return self.store.keyword_knowledge(query, limit)

    async def search_faq(self, query: str, limit: int = 2) -> list[FAQEntry]:
        """Closest active FAQs. The top hit's counter is incremented by one."""
        embedding = await self.embedder.embed(query)
        faqs = self.store.nearest_faq(embedding, limit)
        if faqs:
            self.store.increment_faq_hit(faqs[0])
        return faqs

    async def search_products(self, query: str, limit: int = 5) -> list[ProductEmbedding]:
        embedding = await self.embedder.embed(query)
        return self.store.nearest_products(embedding, limit)

    async def save_chat_with_embedding(
        self, contact_id: UUID, user_message: str, ai_response: str
    ) -> ChatHistoryEntry:
        """Embed both sides of an exchange and store it as chat history."""
        message_embedding = await self.embedder.embed(user_message)
        response_embedding = await self.embedder.embed(ai_response)
        return self.store.add_chat_history(
            contact_id=contact_id,
            user_message=user_message,
            ai_response=ai_response,
            message_embedding=message_embedding,
            response_embedding=response_embedding,
        )

    async def similar_conversations(
        self, contact_id: UUID, query: str, limit: int = 5
    ) -> list[ChatHistoryEntry]:
        embedding = await self.embedder.embed(query)
        return self.store.nearest_chat_history(contact_id, embedding, limit)

    def list_knowledge(self, category: Optional[str] = None):
        return self.store.list_knowledge_query(category)

    def list_faq(self, category: Optional[str] = None):
        return self.store.list_faq_query(category)

    def list_chat_history(self, contact_id: UUID, limit: int = 50) -> list[ChatHistoryEntry]:
        return self.store.list_chat_history(contact_id, limit)

    def set_knowledge_active(self, entry_id: UUID, active: bool) -> KnowledgeEntry:
        entry = self.store.set_active(KnowledgeEntry, entry_id, active)
        if entry is None:
            raise NotFoundError(f"Knowledge entry {entry_id} not found")
        return entry

    def set_faq_active(self, entry_id: UUID, active: bool) -> FAQEntry:
        entry = self.store.set_active(FAQEntry, entry_id, active)
        if entry is None:
            raise NotFoundError(f"FAQ entry {entry_id} not found")
        return entry
