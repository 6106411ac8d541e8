"""Persona prompts: current content, version history, new versions."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session as DBSession

from app.constants.default_system_prompt import DefaultSystemPrompt
from app.models.system_prompt import SystemPrompt, SystemPromptVersion

DEFAULT_PROMPT_NAME = "default"


class SystemPromptService:
    """Manages persona prompts and their append-only version history."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    def get_system_prompt_by_name(self, name: str) -> Optional[SystemPrompt]:
        """Fetch a system prompt by name."""
        return self.db.query(SystemPrompt).filter(SystemPrompt.name == name).first()

    def get_current_version(self, name: str) -> Optional[SystemPromptVersion]:
        prompt = self.get_system_prompt_by_name(name)
        if prompt is None or prompt.current_version_id is None:
            return None
        return (
            self.db.query(SystemPromptVersion)
            .filter(SystemPromptVersion.id == prompt.current_version_id)
            .first()
        )

    def get_current_content(self, name: str) -> Optional[str]:
        """Content of the current version, or None if the prompt or version is missing."""
        version = self.get_current_version(name)
        if version is None:
            return None
        return str(version.content)

    def get_persona(self, name: str = DEFAULT_PROMPT_NAME) -> str:
        """The stored persona, falling back to the built-in one."""
        content = self.get_current_content(name)
        if content and content.strip():
            return content
        return DefaultSystemPrompt.CONTENT

    def get_versions(
        self,
        name: str,
        skip: int = 0,
        limit: int = 100,
    ) -> List[SystemPromptVersion]:
        """List versions for the given prompt name, newest first."""
        prompt = self.get_system_prompt_by_name(name)
        if prompt is None:
            return []
        return (
            self.db.query(SystemPromptVersion)
            .filter(SystemPromptVersion.system_prompt_id == prompt.id)
            .order_by(SystemPromptVersion.version_number.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def create_version(
        self,
        name: str,
        content: str,
        note: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> SystemPromptVersion:
        """
        Append a version and make it current. The prompt row is created on
        its first version.
        """
        prompt = self.get_system_prompt_by_name(name)
        if prompt is None:
            prompt = SystemPrompt(name=name)
            self.db.add(prompt)
            self.db.flush()

        latest = (
            self.db.query(SystemPromptVersion)
            .filter(SystemPromptVersion.system_prompt_id == prompt.id)
            .order_by(SystemPromptVersion.version_number.desc())
            .first()
        )
        next_version = 1 if latest is None else int(latest.version_number) + 1

        version = SystemPromptVersion(
            system_prompt_id=prompt.id,
            content=content,
            version_number=next_version,
            note=note,
            created_by=created_by,
        )
        self.db.add(version)
        self.db.flush()

        prompt.current_version_id = version.id
        self.db.commit()
        self.db.refresh(version)
        return version
