"""
Vector store over the embedding tables.

Nearest-neighbour queries order by cosine distance and return at most
``limit`` rows; equal distances keep insertion order. PostgreSQL uses the
pgvector ``<=>`` operator. Other dialects (the SQLite test database) compute
the same distance in process.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, TypeVar
from uuid import UUID

import numpy as np
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.exceptions import PersistenceError
from app.models.embeddings import (
    ChatHistoryEntry,
    FAQEntry,
    KnowledgeEntry,
    ProductEmbedding,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """1 - cosine similarity; a zero vector is at distance 1 from everything."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm == 0.0:
        return 1.0
    return 1.0 - float(np.dot(va, vb)) / norm


class VectorStore:
    """Persistence and similarity search for knowledge, FAQ, product and chat history rows."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # --- writes ---

    def _save(self, row: T) -> T:
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to store {type(row).__name__}: {e}") from e
        return row

    def add_knowledge(
        self,
        title: str,
        content: str,
        embedding: list[float],
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        source: Optional[str] = None,
    ) -> KnowledgeEntry:
        return self._save(
            KnowledgeEntry(
                title=title,
                content=content,
                category=category,
                tags=tags or [],
                source=source,
                embedding=embedding,
                active=True,
            )
        )

    def add_faq(
        self,
        question: str,
        answer: str,
        embedding: list[float],
        category: Optional[str] = None,
    ) -> FAQEntry:
        return self._save(
            FAQEntry(
                question=question,
                answer=answer,
                category=category,
                embedding=embedding,
                hit_count=0,
                active=True,
            )
        )

    def add_product_embedding(
        self,
        product_id: str,
        description: str,
        features: str,
        use_cases: str,
        embedding: list[float],
    ) -> ProductEmbedding:
        return self._save(
            ProductEmbedding(
                product_id=product_id,
                description=description,
                features=features,
                use_cases=use_cases,
                embedding=embedding,
            )
        )

    def add_chat_history(
        self,
        contact_id: UUID,
        user_message: str,
        ai_response: str,
        message_embedding: list[float],
        response_embedding: list[float],
    ) -> ChatHistoryEntry:
        return self._save(
            ChatHistoryEntry(
                contact_id=contact_id,
                user_message=user_message,
                ai_response=ai_response,
                message_embedding=message_embedding,
                response_embedding=response_embedding,
            )
        )

    def increment_faq_hit(self, faq: FAQEntry) -> None:
        """Add exactly one to the FAQ's hit counter."""
        try:
            self.db.query(FAQEntry).filter(FAQEntry.id == faq.id).update(
                {FAQEntry.hit_count: FAQEntry.hit_count + 1},
                synchronize_session=False,
            )
            self.db.commit()
            self.db.refresh(faq)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to increment FAQ hit count: {e}") from e

    def set_active(self, model: Any, record_id: UUID, active: bool) -> Optional[Any]:
        """Toggle ``active`` on a knowledge or FAQ row. Returns None when missing."""
        row = self.db.query(model).filter(model.id == record_id).first()
        if row is None:
            return None
        row.active = active
        return self._save(row)

    # --- reads ---

    def list_knowledge_query(self, category: Optional[str] = None) -> Query:
        query = self.db.query(KnowledgeEntry).filter(KnowledgeEntry.active.is_(True))
        if category:
            query = query.filter(KnowledgeEntry.category == category)
        return query.order_by(KnowledgeEntry.created_at.desc())

    def list_faq_query(self, category: Optional[str] = None) -> Query:
        query = self.db.query(FAQEntry).filter(FAQEntry.active.is_(True))
        if category:
            query = query.filter(FAQEntry.category == category)
        return query.order_by(FAQEntry.hit_count.desc(), FAQEntry.created_at)

    def nearest_knowledge(self, vector: list[float], limit: int) -> list[KnowledgeEntry]:
        query = self.db.query(KnowledgeEntry).filter(KnowledgeEntry.active.is_(True))
        return self._nearest(query, KnowledgeEntry, KnowledgeEntry.embedding, vector, limit)

    def nearest_faq(self, vector: list[float], limit: int) -> list[FAQEntry]:
        query = self.db.query(FAQEntry).filter(FAQEntry.active.is_(True))
        return self._nearest(query, FAQEntry, FAQEntry.embedding, vector, limit)

    def nearest_products(self, vector: list[float], limit: int) -> list[ProductEmbedding]:
        query = self.db.query(ProductEmbedding)
        return self._nearest(
            query, ProductEmbedding, ProductEmbedding.embedding, vector, limit
        )

    def nearest_chat_history(
        self, contact_id: UUID, vector: list[float], limit: int
    ) -> list[ChatHistoryEntry]:
        query = self.db.query(ChatHistoryEntry).filter(
            ChatHistoryEntry.contact_id == contact_id
        )
        return self._nearest(
            query,
            ChatHistoryEntry,
            ChatHistoryEntry.message_embedding,
            vector,
            limit,
        )

    def list_chat_history(self, contact_id: UUID, limit: int = 50) -> list[ChatHistoryEntry]:
        return (
            self.db.query(ChatHistoryEntry)
            .filter(ChatHistoryEntry.contact_id == contact_id)
            .order_by(ChatHistoryEntry.created_at.desc())
            .limit(limit)
            .all()
        )

    def keyword_knowledge(self, text: str, limit: int) -> list[KnowledgeEntry]:
        """Case-insensitive substring match on title or content, newest first."""
        pattern = f"%{text}%"
        try:
            return (
                self.db.query(KnowledgeEntry)
                .filter(KnowledgeEntry.active.is_(True))
                .filter(
                    KnowledgeEntry.title.ilike(pattern)
                    | KnowledgeEntry.content.ilike(pattern)
                )
                .order_by(KnowledgeEntry.created_at.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Keyword search failed: {e}") from e

    def _nearest(
        self,
        query: Query,
        model: Any,
        column: Any,
        vector: list[float],
        limit: int,
    ) -> list[Any]:
        if limit <= 0:
            return []
        try:
            if self.db.get_bind().dialect.name == "postgresql":
                return (
                    query.order_by(column.cosine_distance(vector), model.created_at)
                    .limit(limit)
                    .all()
                )
            rows = query.order_by(model.created_at).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Similarity search failed: {e}") from e

        attr = column.key
        # sorted() is stable, so equal distances keep insertion order
        ranked = sorted(rows, key=lambda row: cosine_distance(getattr(row, attr), vector))
        return ranked[:limit]
