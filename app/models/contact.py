"""Contact model: one row per (channel, channel_id) customer identity."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.constants.chat import (
    AI_AGENT_NAME,
    AgentType,
    DEFAULT_CONTACT_STATUS,
    DEFAULT_TEMPERATURE,
)
from app.db import Base
from app.models.mixins import TimestampMixin


class Contact(Base, TimestampMixin):
    """A customer reachable on one messaging channel."""

    __tablename__ = "contacts"
    __table_args__ = (
        UniqueConstraint("channel", "channel_id", name="uq_contacts_channel_channel_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(String(32), unique=True, nullable=False, index=True)
    channel = Column(String(32), nullable=False, index=True)
    channel_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    contact_status = Column(String(32), nullable=False, default=DEFAULT_CONTACT_STATUS)
    temperature = Column(String(16), nullable=False, default=DEFAULT_TEMPERATURE)
    first_contact_at = Column(DateTime, nullable=True)
    last_contact_at = Column(DateTime, nullable=True)
    last_agent = Column(String(255), nullable=True, default=AI_AGENT_NAME)
    last_agent_type = Column(String(16), nullable=True, default=AgentType.BOT.value)
    notes = Column(Text, nullable=True)

    messages = relationship(
        "ConversationMessage",
        back_populates="contact",
        order_by="ConversationMessage.created_at",
    )
