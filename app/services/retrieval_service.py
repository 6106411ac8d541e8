"""Builds the knowledge base / FAQ context block injected into the system prompt."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.exceptions import CRMError
from app.models.embeddings import FAQEntry, KnowledgeEntry
from app.services.embedding_service import EmbeddingProvider
from app.services.vector_store import VectorStore

logger = logging.getLogger(__name__)

KNOWLEDGE_LIMIT = 3
FAQ_LIMIT = 2
KNOWLEDGE_HEADER = "\n=== KNOWLEDGE BASE ===\n"
FAQ_HEADER = "\n=== FAQ ===\n"


def format_knowledge(entries: list[KnowledgeEntry]) -> str:
    if not entries:
        return ""
    lines = [KNOWLEDGE_HEADER]
    for i, entry in enumerate(entries, start=1):
        lines.append(f"{i}. {entry.title}\n{entry.content}\n\n")
    return "".join(lines)


def format_faq(entries: list[FAQEntry]) -> str:
    if not entries:
        return ""
    lines = [FAQ_HEADER]
    for entry in entries:
        lines.append(f"Q: {entry.question}\nA: {entry.answer}\n\n")
    return "".join(lines)


class RetrievalService:
    """
    Turns a user message into a retrieval context string.

    The query is embedded once and used for both searches. Any failure only
    empties the affected part: embedding failure empties the whole context,
    a search failure empties that section. Never raises.
    """

    def __init__(self, db: Session, embedder: EmbeddingProvider) -> None:
        self.embedder = embedder
        self.store = VectorStore(db)

    async def build_context(self, query_text: str) -> str:
        try:
            vector = await self.embedder.embed(query_text)
        except Exception as e:
            logger.warning("Retrieval skipped, embedding failed: %s", e)
            return ""

        knowledge_block = ""
        try:
            knowledge_block = format_knowledge(
                self.store.nearest_knowledge(vector, KNOWLEDGE_LIMIT)
            )
        except Exception as e:
            logger.warning(
                "Knowledge base search failed: %s", e, exc_info=not isinstance(e, CRMError)
            )

        faq_block = ""
        try:
            faqs = self.store.nearest_faq(vector, FAQ_LIMIT)
            faq_block = format_faq(faqs)
            if faqs:
                self.store.increment_faq_hit(faqs[0])
        except Exception as e:
            logger.warning(
                "FAQ search failed: %s", e, exc_info=not isinstance(e, CRMError)
            )

        return knowledge_block + faq_block
