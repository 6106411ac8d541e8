from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid

from app.constants.chat import BROADCAST_ALL_CHANNELS, BroadcastStatus
from app.db import Base
from app.models.mixins import TimestampMixin


class BroadcastHistory(Base, TimestampMixin):
    """One broadcast run: the template, the channel filter and running counters."""

    __tablename__ = "broadcast_histories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    message = Column(Text, nullable=False)
    channel = Column(String(32), nullable=False, default=BROADCAST_ALL_CHANNELS)
    sent_to = Column(Integer, nullable=False, default=0)
    successful = Column(Integer, nullable=False, default=0)
    failed = Column(Integer, nullable=False, default=0)
    status = Column(String(32), nullable=False, default=BroadcastStatus.PENDING.value)
    sent_by = Column(String(255), nullable=True)
    completed_at = Column(DateTime, nullable=True)
