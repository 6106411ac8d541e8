"""Conversation log: the inbound/outbound rows of every turn and their status transitions."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.constants.chat import (
    AI_AGENT_NAME,
    AI_ASSIGNED_AGENT,
    AI_ASSIGNED_TO,
    AgentType,
    Channel,
    ChatStatus,
    HUMAN_ASSIGNED_TO,
)
from app.exceptions import NotFoundError, PersistenceError
from app.models.chat_message import ConversationMessage
from app.models.contact import Contact
from app.schemas.chat import ChatStats

logger = logging.getLogger(__name__)


class ConversationLog:
    """
    Two rows per turn: the inbound message (Unassigned) and the outbound reply
    carrying both texts (Answered). Human handling moves rows through
    Assigned and Resolved; back_to_ai returns them to Unassigned.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _save(self, message: ConversationMessage) -> ConversationMessage:
        try:
            self.db.add(message)
            self.db.commit()
            self.db.refresh(message)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save conversation message: {e}") from e
        return message

    def record_inbound(self, contact: Contact, channel: str, text: str) -> UUID:
        """Store the customer's message. Returns the new row id."""
        message = self._save(
            ConversationMessage(
                contact_id=contact.id,
                contact_name=contact.name,
                message=text,
                channel=channel,
                status=ChatStatus.UNASSIGNED.value,
                tokens_used=0,
            )
        )
        return message.id

    def record_outbound(
        self,
        contact: Contact,
        channel: str,
        inbound_text: str,
        reply_text: str,
        tokens_used: int,
        assigned_to: str = AI_ASSIGNED_TO,
        assigned_agent: str = AI_ASSIGNED_AGENT,
    ) -> UUID:
        """Store the reply alongside the message it answers. Returns the new row id."""
        message = self._save(
            ConversationMessage(
                contact_id=contact.id,
                contact_name=contact.name,
                message=inbound_text,
                response=reply_text,
                channel=channel,
                status=ChatStatus.ANSWERED.value,
                assigned_to=assigned_to,
                assigned_agent=assigned_agent,
                tokens_used=tokens_used,
            )
        )
        return message.id

    def get_message(self, message_id: UUID) -> Optional[ConversationMessage]:
        return (
            self.db.query(ConversationMessage)
            .filter(ConversationMessage.id == message_id)
            .first()
        )

    def _require(self, message_id: UUID) -> ConversationMessage:
        message = self.get_message(message_id)
        if message is None:
            raise NotFoundError(f"Conversation message {message_id} not found")
        return message

    def list_messages(
        self,
        status: Optional[str] = None,
        channel: Optional[str] = None,
        contact_id: Optional[UUID] = None,
    ) -> Query:
        """Query of rows, newest first, with optional filters (for pagination)."""
        query = self.db.query(ConversationMessage)
        if status:
            query = query.filter(ConversationMessage.status == status)
        if channel:
            query = query.filter(ConversationMessage.channel == channel)
        if contact_id:
            query = query.filter(ConversationMessage.contact_id == contact_id)
        return query.order_by(ConversationMessage.created_at.desc())

    def assign(
        self, message_id: UUID, assigned_to: str, assigned_agent: str
    ) -> ConversationMessage:
        message = self._require(message_id)
        message.assigned_to = assigned_to
        message.assigned_agent = assigned_agent
        message.status = ChatStatus.ASSIGNED.value
        return self._save(message)

    def resolve(self, message_id: UUID) -> ConversationMessage:
        message = self._require(message_id)
        message.status = ChatStatus.RESOLVED.value
        return self._save(message)

    def take_over(self, message_id: UUID, agent_name: str) -> ConversationMessage:
        """A human agent takes the conversation; the contact's last agent follows."""
        message = self._require(message_id)
        message.assigned_to = HUMAN_ASSIGNED_TO
        message.assigned_agent = agent_name
        message.status = ChatStatus.ASSIGNED.value
        if message.contact is not None:
            message.contact.last_agent = agent_name
            message.contact.last_agent_type = AgentType.HUMAN.value
        logger.info("Message %s taken over by %s", message_id, agent_name)
        return self._save(message)

    def back_to_ai(self, message_id: UUID) -> ConversationMessage:
        """Hand the conversation back to the AI assistant."""
        message = self._require(message_id)
        message.assigned_to = AI_ASSIGNED_TO
        message.assigned_agent = AI_ASSIGNED_AGENT
        message.status = ChatStatus.UNASSIGNED.value
        if message.contact is not None:
            message.contact.last_agent = AI_AGENT_NAME
            message.contact.last_agent_type = AgentType.BOT.value
        return self._save(message)

    def add_label(self, message_id: UUID, label_id: str) -> ConversationMessage:
        """Append a label id to the comma separated list. Existing labels are kept once."""
        message = self._require(message_id)
        labels = message.label_list
        if label_id not in labels:
            labels.append(label_id)
            message.labels = ",".join(labels)
            return self._save(message)
        return message

    def get_stats(self) -> ChatStats:
        by_status = dict(
            self.db.query(ConversationMessage.status, func.count(ConversationMessage.id))
            .group_by(ConversationMessage.status)
            .all()
        )
        by_channel = dict(
            self.db.query(ConversationMessage.channel, func.count(ConversationMessage.id))
            .group_by(ConversationMessage.channel)
            .all()
        )
        total_tokens = self.db.query(
            func.coalesce(func.sum(ConversationMessage.tokens_used), 0)
        ).scalar()

        stats = ChatStats(
            unassigned=by_status.get(ChatStatus.UNASSIGNED.value, 0),
            assigned=by_status.get(ChatStatus.ASSIGNED.value, 0),
            resolved=by_status.get(ChatStatus.RESOLVED.value, 0),
            answered=by_status.get(ChatStatus.ANSWERED.value, 0),
            whatsapp=by_channel.get(Channel.WHATSAPP.value, 0),
            instagram=by_channel.get(Channel.INSTAGRAM.value, 0),
            telegram=by_channel.get(Channel.TELEGRAM.value, 0),
            total_tokens=int(total_tokens or 0),
        )
        stats.total = stats.unassigned + stats.assigned + stats.resolved + stats.answered
        return stats
