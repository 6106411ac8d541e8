from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class ContactRead(BaseModel):
    """Response schema for a contact."""

    id: UUID
    code: str
    channel: str
    channel_id: str
    name: Optional[str] = None
    contact_status: str
    temperature: str
    first_contact_at: Optional[datetime] = None
    last_contact_at: Optional[datetime] = None
    last_agent: Optional[str] = None
    last_agent_type: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
