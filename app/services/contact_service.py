"""Contact resolution: find or create the contact behind an inbound message."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.config import Settings, get_settings
from app.constants.chat import (
    AI_AGENT_NAME,
    AgentType,
    DEFAULT_CONTACT_STATUS,
    DEFAULT_TEMPERATURE,
)
from app.exceptions import PersistenceError
from app.models.contact import Contact

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ContactResolver:
    """
    Resolves (channel, channel_id) to a Contact, creating it on first contact.

    Codes are ``prefix + zero-padded sequence`` (``C000001``). The next
    sequence is the highest existing one plus one; the unique constraint on
    ``code`` catches concurrent allocations and the insert is retried with the
    following sequence.
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.code_prefix = self.settings.contact_code_prefix
        self.code_digits = self.settings.contact_code_digits

    def resolve(self, channel: str, channel_id: str, display_name: str) -> Contact:
        """
        Return the contact for (channel, channel_id), creating it when unseen.

        An existing contact gets last_contact_at = now and, when display_name is
        non-empty and different, a new name. A failed touch-update is logged and
        the contact is returned anyway.
        """
        contact = self.get_by_channel_id(channel, channel_id)
        if contact is not None:
            self._touch(contact, display_name)
            return contact
        return self._create(channel, channel_id, display_name)

    def get_by_channel_id(self, channel: str, channel_id: str) -> Optional[Contact]:
        try:
            return (
                self.db.query(Contact)
                .filter(Contact.channel == channel, Contact.channel_id == channel_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Contact lookup failed: {e}") from e

    def get_contact(self, contact_id: UUID) -> Optional[Contact]:
        return self.db.query(Contact).filter(Contact.id == contact_id).first()

    def list_contacts(self, channel: Optional[str] = None) -> Query:
        """Query of contacts, most recently active first (for pagination)."""
        query = self.db.query(Contact)
        if channel:
            query = query.filter(Contact.channel == channel)
        return query.order_by(
            Contact.last_contact_at.desc(), Contact.created_at.desc()
        )

    def set_last_agent(self, contact: Contact, agent: str, agent_type: str) -> Contact:
        contact.last_agent = agent
        contact.last_agent_type = agent_type
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def format_code(self, sequence: int) -> str:
        return f"{self.code_prefix}{sequence:0{self.code_digits}d}"

    def next_sequence(self) -> int:
        """Highest sequence among existing codes with our prefix, plus one."""
        codes = (
            self.db.query(Contact.code)
            .filter(Contact.code.like(f"{self.code_prefix}%"))
            .order_by(func.length(Contact.code).desc(), Contact.code.desc())
        )
        pattern = re.compile(rf"{re.escape(self.code_prefix)}(\d+)")
        # longest numeric code first; skip hand-edited codes such as "CVIP01"
        for (code,) in codes:
            match = pattern.fullmatch(code)
            if match is not None:
                return int(match.group(1)) + 1
        return 1

    def _touch(self, contact: Contact, display_name: str) -> None:
        contact.last_contact_at = _now()
        if display_name and display_name != contact.name:
            contact.name = display_name
        try:
            self.db.commit()
            self.db.refresh(contact)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Failed to update contact %s: %s", contact.code, e)

    def _create(self, channel: str, channel_id: str, display_name: str) -> Contact:
        sequence = self.next_sequence()
        for _ in range(MAX_CODE_ATTEMPTS):
            now = _now()
            contact = Contact(
                code=self.format_code(sequence),
                channel=channel,
                channel_id=channel_id,
                name=display_name,
                contact_status=DEFAULT_CONTACT_STATUS,
                temperature=DEFAULT_TEMPERATURE,
                first_contact_at=now,
                last_contact_at=now,
                last_agent=AI_AGENT_NAME,
                last_agent_type=AgentType.BOT.value,
            )
            try:
                self.db.add(contact)
                self.db.commit()
                self.db.refresh(contact)
                logger.info("Created contact %s for %s:%s", contact.code, channel, channel_id)
                return contact
            except IntegrityError:
                self.db.rollback()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise PersistenceError(f"Failed to create contact: {e}") from e

            existing = self.get_by_channel_id(channel, channel_id)
            if existing is not None:
                # Created concurrently by another request
                return existing
            logger.warning("Contact code %s already taken, retrying", contact.code)
            sequence = max(sequence + 1, self.next_sequence())

        raise PersistenceError(
            f"Could not allocate a contact code after {MAX_CODE_ATTEMPTS} attempts"
        )
