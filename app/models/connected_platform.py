"""Connected platform model: per-channel send credentials, token encrypted with Fernet."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, LargeBinary, String, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class ConnectedPlatform(Base, TimestampMixin):
    """Send configuration for one channel. Overrides the environment settings when present."""

    __tablename__ = "connected_platforms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    platform = Column(String(32), unique=True, nullable=False, index=True)
    platform_id = Column(String(255), nullable=True)
    phone_number_id = Column(String(255), nullable=True)
    page_id = Column(String(255), nullable=True)
    encrypted_token = Column(LargeBinary, nullable=True)
    webhook_url = Column(String(512), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
