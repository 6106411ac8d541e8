"""Pydantic schemas for the chat inbox API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ChatMessageRead(BaseModel):
    """Response schema for one conversation row."""

    id: UUID
    contact_id: UUID
    contact_name: Optional[str] = None
    message: str
    response: Optional[str] = None
    channel: str
    status: str
    assigned_to: Optional[str] = None
    assigned_agent: Optional[str] = None
    labels: list[str] = Field(default_factory=list, validation_alias="label_list")
    tokens_used: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ChatAssign(BaseModel):
    assigned_to: str = Field(..., min_length=1, max_length=255)
    assigned_agent: str = Field(..., min_length=1, max_length=255)


class ChatTakeOver(BaseModel):
    agent_name: str = Field(..., min_length=1, max_length=255)


class ChatLabelAdd(BaseModel):
    label_id: str = Field(..., min_length=1, max_length=64)


class ChatStats(BaseModel):
    """Inbox counters, all derived by query."""

    unassigned: int = 0
    assigned: int = 0
    resolved: int = 0
    answered: int = 0
    whatsapp: int = 0
    instagram: int = 0
    telegram: int = 0
    total: int = 0
    total_tokens: int = 0
