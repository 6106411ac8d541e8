from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PlatformUpsert(BaseModel):
    """Request schema for creating or replacing a channel's send configuration."""

    platform_id: Optional[str] = Field(None, max_length=255)
    phone_number_id: Optional[str] = Field(None, max_length=255)
    page_id: Optional[str] = Field(None, max_length=255)
    token: Optional[str] = Field(
        None, description="Access token; stored encrypted, never returned"
    )
    webhook_url: Optional[str] = Field(None, max_length=512)
    active: bool = True


class PlatformRead(BaseModel):
    id: UUID
    platform: str
    platform_id: Optional[str] = None
    phone_number_id: Optional[str] = None
    page_id: Optional[str] = None
    webhook_url: Optional[str] = None
    active: bool
    has_token: bool = False
    updated_at: datetime

    model_config = {"from_attributes": True}


@dataclass(frozen=True)
class PlatformCredentials:
    """Decrypted send credentials for one channel."""

    token: str
    phone_number_id: Optional[str] = None
    page_id: Optional[str] = None
