from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.constants.chat import BROADCAST_ALL_CHANNELS, Channel


class BroadcastCreate(BaseModel):
    """Request schema for a broadcast. ``{name}`` and ``{code}`` are personalised per contact."""

    message: str = Field(..., min_length=1)
    channel: str = BROADCAST_ALL_CHANNELS
    sent_by: Optional[str] = Field(None, max_length=255)

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, value: str) -> str:
        allowed = {BROADCAST_ALL_CHANNELS, *(c.value for c in Channel)}
        if value not in allowed:
            raise ValueError(f"channel must be one of {sorted(allowed)}")
        return value


class BroadcastRead(BaseModel):
    id: UUID
    message: str
    channel: str
    sent_to: int
    successful: int
    failed: int
    status: str
    sent_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
