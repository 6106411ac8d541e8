"""Conversation log rows. Each turn is stored as an inbound row and an outbound row."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.constants.chat import ChatStatus
from app.db import Base
from app.models.mixins import TimestampMixin


class ConversationMessage(Base, TimestampMixin):
    __tablename__ = "chat_messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_id = Column(
        Uuid,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_name = Column(String(255), nullable=True)
    message = Column(Text, nullable=False, default="")
    response = Column(Text, nullable=True)
    channel = Column(String(32), nullable=False, index=True)
    status = Column(
        String(32), nullable=False, default=ChatStatus.UNASSIGNED.value, index=True
    )
    assigned_to = Column(String(255), nullable=True)
    assigned_agent = Column(String(255), nullable=True)
    labels = Column(Text, nullable=True)  # comma separated label ids
    tokens_used = Column(Integer, nullable=False, default=0)

    contact = relationship("Contact", back_populates="messages")

    @property
    def label_list(self) -> list[str]:
        if not self.labels:
            return []
        return [label for label in self.labels.split(",") if label]
