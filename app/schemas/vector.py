"""Pydantic schemas for the knowledge base, FAQ, product and chat history vector API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class KnowledgeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    tags: list[str] = Field(default_factory=list)
    source: Optional[str] = Field(None, max_length=255)


class KnowledgeRead(BaseModel):
    id: UUID
    title: str
    content: str
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    source: Optional[str] = None
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class FAQCreate(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100)


class FAQRead(BaseModel):
    id: UUID
    question: str
    answer: str
    category: Optional[str] = None
    hit_count: int
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductEmbeddingCreate(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    description: str = ""
    features: str = ""
    use_cases: str = ""


class ProductEmbeddingRead(BaseModel):
    id: UUID
    product_id: str
    description: str
    features: str
    use_cases: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ChatHistoryRead(BaseModel):
    id: UUID
    contact_id: UUID
    user_message: str
    ai_response: str
    sentiment: Optional[str] = None
    intent: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class VectorSearchRequest(BaseModel):
    """Semantic search request. ``keyword`` switches to a plain text match."""

    query: str = Field(..., min_length=1)
    limit: int = Field(5, ge=1, le=50)
    keyword: bool = False


class ActiveUpdate(BaseModel):
    active: bool
