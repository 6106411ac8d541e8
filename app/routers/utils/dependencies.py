"""FastAPI dependencies: shared clients from app.state, services, and lookups by id."""

from __future__ import annotations

from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.adapters.registry import AdapterRegistry
from app.adapters.telegram import BotFactory
from app.commands.webhooks.process_message_command import (
    ProcessIncomingMessageCommand,
    SessionScope,
)
from app.core.background import BackgroundTaskRunner
from app.db import db_manager, get_db
from app.models.chat_message import ConversationMessage
from app.models.contact import Contact
from app.services.contact_service import ContactResolver
from app.services.conversation_log import ConversationLog
from app.services.embedding_service import EmbeddingProvider
from app.services.vector_service import VectorService
from app.workers.llm import GenerativeResponder


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_embedding_provider(request: Request) -> EmbeddingProvider:
    return request.app.state.embedding_provider


def get_responder(request: Request) -> GenerativeResponder:
    return request.app.state.responder


def get_task_runner(request: Request) -> BackgroundTaskRunner:
    return request.app.state.task_runner


def get_bot_factory(request: Request) -> BotFactory:
    return request.app.state.telegram_bot_factory


def get_session_scope() -> SessionScope:
    """Session factory for work that outlives the request."""
    return db_manager.db_session


def get_adapter_registry(
    db: Session = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    bot_factory: BotFactory = Depends(get_bot_factory),
) -> AdapterRegistry:
    return AdapterRegistry(db, http_client, bot_factory)


def get_pipeline(
    db: Session = Depends(get_db),
    embedder: EmbeddingProvider = Depends(get_embedding_provider),
    responder: GenerativeResponder = Depends(get_responder),
    task_runner: BackgroundTaskRunner = Depends(get_task_runner),
    session_scope: SessionScope = Depends(get_session_scope),
) -> ProcessIncomingMessageCommand:
    return ProcessIncomingMessageCommand(
        db, embedder, responder, task_runner, session_scope
    )


def get_vector_service(
    db: Session = Depends(get_db),
    embedder: EmbeddingProvider = Depends(get_embedding_provider),
) -> VectorService:
    return VectorService(db, embedder)


def get_contact_by_id(
    contact_id: UUID,
    db: Session = Depends(get_db),
) -> Contact:
    """FastAPI dependency to get a contact by ID."""
    contact = ContactResolver(db).get_contact(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


def get_chat_message_by_id(
    message_id: UUID,
    db: Session = Depends(get_db),
) -> ConversationMessage:
    """FastAPI dependency to get a conversation row by ID."""
    message = ConversationLog(db).get_message(message_id)
    if message is None:
        raise HTTPException(status_code=404, detail="Chat message not found")
    return message
