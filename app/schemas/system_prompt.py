"""Pydantic schemas for the persona prompt API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SystemPromptVersionRead(BaseModel):
    """Response schema for a single persona version."""

    id: UUID
    system_prompt_id: UUID
    content: str
    version_number: int
    note: str | None = None
    created_by: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SystemPromptVersionCreate(BaseModel):
    """Request schema for a new persona version. Creates the prompt on first use."""

    content: str = Field(..., min_length=1, description="Markdown body of the persona")
    note: str | None = Field(None, max_length=512, description="Optional change reason")
    created_by: str | None = Field(None, max_length=255)


class SystemPromptCurrentRead(BaseModel):
    """Response schema for the persona in effect."""

    name: str
    content: str
    version_id: UUID | None = None
    version_number: int | None = None
    is_builtin: bool = False
