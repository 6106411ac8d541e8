"""Versioned persona prompts for the generative responder (markdown)."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin


class SystemPrompt(Base, TimestampMixin):
    """A named persona ('default' is the one the responder reads)."""

    __tablename__ = "system_prompts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(64), unique=True, nullable=False, index=True)
    current_version_id = Column(
        Uuid,
        ForeignKey("system_prompt_versions.id", ondelete="SET NULL"),
        nullable=True,
    )

    current_version = relationship(
        "SystemPromptVersion",
        foreign_keys=[current_version_id],
        post_update=True,
    )
    versions = relationship(
        "SystemPromptVersion",
        back_populates="system_prompt",
        foreign_keys="SystemPromptVersion.system_prompt_id",
        cascade="all, delete-orphan",
        order_by="SystemPromptVersion.version_number.desc()",
    )


class SystemPromptVersion(Base, TimestampMixin):
    """Append-only history entry of a persona."""

    __tablename__ = "system_prompt_versions"
    __table_args__ = (
        UniqueConstraint(
            "system_prompt_id", "version_number", name="uq_system_prompt_version"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    system_prompt_id = Column(
        Uuid,
        ForeignKey("system_prompts.id", ondelete="CASCADE"),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    version_number = Column(Integer, nullable=False)
    note = Column(String(512), nullable=True)
    created_by = Column(String(255), nullable=True)

    system_prompt = relationship(
        "SystemPrompt",
        back_populates="versions",
        foreign_keys=[system_prompt_id],
    )
