"""Vector API: knowledge base, FAQ, product embeddings and chat history."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate

from app.exceptions import ConfigurationMissingError, EmbeddingError
from app.routers.utils.dependencies import get_vector_service
from app.schemas.vector import (
    ActiveUpdate,
    ChatHistoryRead,
    FAQCreate,
    FAQRead,
    KnowledgeCreate,
    KnowledgeRead,
    ProductEmbeddingCreate,
    ProductEmbeddingRead,
    VectorSearchRequest,
)
from app.services.vector_service import VectorService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/vectors",
    tags=["vectors"],
    responses={404: {"description": "Not found"}},
)


def _embedding_unavailable(e: Exception) -> HTTPException:
    if isinstance(e, ConfigurationMissingError):
        return HTTPException(status_code=503, detail="Embedding service is not configured")
    return HTTPException(status_code=502, detail=f"Embedding failed: {e}")


@router.post("/knowledge", response_model=KnowledgeRead, status_code=201)
async def add_knowledge(
    data: KnowledgeCreate,
    svc: VectorService = Depends(get_vector_service),
) -> KnowledgeRead:
    """Embed and store a knowledge base entry."""
    try:
        entry = await svc.add_knowledge(
            title=data.title,
            content=data.content,
            category=data.category,
            tags=data.tags,
            source=data.source,
        )
    except (ConfigurationMissingError, EmbeddingError) as e:
        raise _embedding_unavailable(e) from e
    return KnowledgeRead.model_validate(entry)


@router.get("/knowledge", response_model=Page[KnowledgeRead])
def list_knowledge(
    params: Params = Depends(),
    category: Optional[str] = Query(None),
    svc: VectorService = Depends(get_vector_service),
) -> Page[KnowledgeRead]:
    """List active knowledge entries, newest first."""
    return paginate(svc.list_knowledge(category), params=params)


@router.post("/knowledge/search", response_model=list[KnowledgeRead])
async def search_knowledge(
    data: VectorSearchRequest,
    svc: VectorService = Depends(get_vector_service),
) -> list[KnowledgeRead]:
    """Semantic search, or a plain text match when ``keyword`` is set."""
    if data.keyword:
        entries = svc.search_knowledge_by_keyword(data.query, data.limit)
    else:
        try:
            entries = await svc.search_knowledge(data.query, data.limit)
        except (ConfigurationMissingError, EmbeddingError) as e:
            raise _embedding_unavailable(e) from e
    return [KnowledgeRead.model_validate(e) for e in entries]


@router.patch("/knowledge/{entry_id}", response_model=KnowledgeRead)
def set_knowledge_active(
    entry_id: UUID,
    data: ActiveUpdate,
    svc: VectorService = Depends(get_vector_service),
) -> KnowledgeRead:
    """Activate or deactivate a knowledge entry. Inactive entries are never retrieved."""
    return KnowledgeRead.model_validate(svc.set_knowledge_active(entry_id, data.active))


@router.post("/faq", response_model=FAQRead, status_code=201)
async def add_faq(
    data: FAQCreate,
    svc: VectorService = Depends(get_vector_service),
) -> FAQRead:
    try:
        entry = await svc.add_faq(data.question, data.answer, data.category)
    except (ConfigurationMissingError, EmbeddingError) as e:
        raise _embedding_unavailable(e) from e
    return FAQRead.model_validate(entry)


@router.get("/faq", response_model=Page[FAQRead])
def list_faq(
    params: Params = Depends(),
    category: Optional[str] = Query(None),
    svc: VectorService = Depends(get_vector_service),
) -> Page[FAQRead]:
    """List active FAQs, most hit first."""
    return paginate(svc.list_faq(category), params=params)


@router.post("/faq/search", response_model=list[FAQRead])
async def search_faq(
    data: VectorSearchRequest,
    svc: VectorService = Depends(get_vector_service),
) -> list[FAQRead]:
    """Closest FAQs by question; the top hit's counter is incremented."""
    try:
        entries = await svc.search_faq(data.query, data.limit)
    except (ConfigurationMissingError, EmbeddingError) as e:
        raise _embedding_unavailable(e) from e
    return [FAQRead.model_validate(e) for e in entries]


@router.patch("/faq/{entry_id}", response_model=FAQRead)
def set_faq_active(
    entry_id: UUID,
    data: ActiveUpdate,
    svc: VectorService = Depends(get_vector_service),
) -> FAQRead:
    return FAQRead.model_validate(svc.set_faq_active(entry_id, data.active))


@router.post(
    "/products/embedding", response_model=ProductEmbeddingRead, status_code=201
)
async def add_product_embedding(
    data: ProductEmbeddingCreate,
    svc: VectorService = Depends(get_vector_service),
) -> ProductEmbeddingRead:
    try:
        entry = await svc.add_product_embedding(
            data.product_id, data.description, data.features, data.use_cases
        )
    except (ConfigurationMissingError, EmbeddingError) as e:
        raise _embedding_unavailable(e) from e
    return ProductEmbeddingRead.model_validate(entry)


@router.post("/products/search", response_model=list[ProductEmbeddingRead])
async def search_products(
    data: VectorSearchRequest,
    svc: VectorService = Depends(get_vector_service),
) -> list[ProductEmbeddingRead]:
    try:
        entries = await svc.search_products(data.query, data.limit)
    except (ConfigurationMissingError, EmbeddingError) as e:
        raise _embedding_unavailable(e) from e
    return [ProductEmbeddingRead.model_validate(e) for e in entries]


@router.get("/chat-history/{contact_id}", response_model=list[ChatHistoryRead])
async def get_chat_history(
    contact_id: UUID,
    query: Optional[str] = Query(None, description="Rank by similarity to this text"),
    limit: int = Query(20, ge=1, le=100),
    svc: VectorService = Depends(get_vector_service),
) -> list[ChatHistoryRead]:
    """A contact's past exchanges, newest first or ranked by similarity to ``query``."""
    if query:
        try:
            entries = await svc.similar_conversations(contact_id, query, limit)
        except (ConfigurationMissingError, EmbeddingError) as e:
            raise _embedding_unavailable(e) from e
    else:
        entries = svc.list_chat_history(contact_id, limit)
    return [ChatHistoryRead.model_validate(e) for e in entries]
