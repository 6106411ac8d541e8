"""
Command that turns one inbound customer message into a reply.

Resolve contact → log inbound → build retrieval context → generate → log
outbound. Sending the reply is left to the platform webhook command.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable
from uuid import UUID

from sqlalchemy.orm import Session

from app.constants.chat import GENERATION_APOLOGY
from app.core.background import BackgroundTaskRunner
from app.exceptions import GenerationError
from app.schemas.messaging import InboundMessage
from app.services.contact_service import ContactResolver
from app.services.conversation_log import ConversationLog
from app.services.embedding_service import EmbeddingProvider
from app.services.retrieval_service import RetrievalService
from app.services.system_prompt_service import SystemPromptService
from app.services.vector_service import VectorService
from app.workers.llm import GenerativeResponder

SessionScope = Callable[[], AbstractContextManager[Session]]


class ProcessIncomingMessageCommand:
    """
    Runs the conversation pipeline for one inbound message.

    A generation failure is not an error here: the fixed apology becomes the
    reply and is logged like any other. Persistence failures propagate.
    """

    def __init__(
        self,
        db: Session,
        embedder: EmbeddingProvider,
        responder: GenerativeResponder,
        task_runner: BackgroundTaskRunner,
        session_scope: SessionScope,
    ) -> None:
        self.db = db
        self.embedder = embedder
        self.responder = responder
        self.task_runner = task_runner
        self.session_scope = session_scope
        self.contacts = ContactResolver(db)
        self.conversation_log = ConversationLog(db)
        self.retrieval = RetrievalService(db, embedder)
        self.logger = logging.getLogger(__name__)

    async def execute(self, inbound: InboundMessage) -> str:
        """
        Process the message and return the reply text to send.

        Raises:
            PersistenceError: the contact or the inbound row could not be stored.
        """
        contact = self.contacts.resolve(
            inbound.channel.value, inbound.external_user_id, inbound.display_name
        )
        self.conversation_log.record_inbound(contact, inbound.channel.value, inbound.text)

        context_block = await self.retrieval.build_context(inbound.text)
        persona = SystemPromptService(self.db).get_persona()
        display_name = contact.name or inbound.display_name or contact.code

        try:
            result = await self.responder.generate(
                inbound.text,
                display_name,
                contact.id,
                context_block,
                persona=persona,
            )
            reply, tokens_used = result.text, result.tokens_used
        except GenerationError as e:
            self.logger.warning(
                "Generation failed for contact %s, sending apology: %s", contact.code, e
            )
            reply, tokens_used = GENERATION_APOLOGY, 0
        else:
            self.task_runner.submit(
                f"save-chat-history-{contact.id}",
                self._save_chat_history(contact.id, inbound.text, reply),
            )

        self.conversation_log.record_outbound(
            contact,
            inbound.channel.value,
            inbound.text,
            reply,
            tokens_used,
        )
        return reply

    async def _save_chat_history(
        self, contact_id: UUID, user_message: str, reply: str
    ) -> None:
        with self.session_scope() as db:
            await VectorService(db, self.embedder).save_chat_with_embedding(
                contact_id, user_message, reply
            )
