"""Embedding-backed records used for retrieval.

Every vector column has the dimensionality configured by EMBEDDING_DIMENSIONS.
Knowledge and FAQ rows are retrievable only while ``active`` is true; product
and chat history rows are always eligible.
"""

from __future__ import annotations

import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Text, Uuid

from app.config import get_settings
from app.db import Base
from app.models.mixins import TimestampMixin

EMBEDDING_DIMENSIONS = get_settings().embedding_dimensions


class KnowledgeEntry(Base, TimestampMixin):
    __tablename__ = "knowledge_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    tags = Column(JSON, nullable=False, default=list)
    source = Column(String(255), nullable=True)
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    active = Column(Boolean, nullable=False, default=True, index=True)


class FAQEntry(Base, TimestampMixin):
    __tablename__ = "faq_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    hit_count = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True, index=True)


class ProductEmbedding(Base, TimestampMixin):
    """Embedding of "description. features. use_cases" for one product."""

    __tablename__ = "product_embeddings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id = Column(String(64), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    features = Column(Text, nullable=False, default="")
    use_cases = Column(Text, nullable=False, default="")
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)


class ChatHistoryEntry(Base, TimestampMixin):
    """A past exchange with both sides embedded, for similar-conversation lookup."""

    __tablename__ = "chat_history_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_id = Column(
        Uuid,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_message = Column(Text, nullable=False)
    ai_response = Column(Text, nullable=False)
    message_embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    response_embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    sentiment = Column(String(32), nullable=True)
    intent = Column(String(64), nullable=True)
