"""Broadcasts: one personalised message to every contact of a channel (or all channels)."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional
from uuid import UUID

from sqlalchemy.orm import Query, Session

from app.adapters.registry import AdapterRegistry
from app.config import Settings, get_settings
from app.constants.chat import BROADCAST_ALL_CHANNELS, BroadcastStatus
from app.exceptions import CRMError, NotFoundError
from app.models.broadcast import BroadcastHistory
from app.models.contact import Contact
from app.schemas.broadcast import BroadcastCreate

logger = logging.getLogger(__name__)


def personalize(template: str, contact: Contact) -> str:
    """Fill the ``{name}`` and ``{code}`` placeholders for one contact."""
    return template.replace("{name}", contact.name or "").replace(
        "{code}", contact.code or ""
    )


class BroadcastService:
    def __init__(self, db: Session, settings: Optional[Settings] = None) -> None:
        self.db = db
        self.settings = settings or get_settings()

    def create_broadcast(self, data: BroadcastCreate) -> BroadcastHistory:
        history = BroadcastHistory(
            message=data.message,
            channel=data.channel,
            sent_by=data.sent_by,
            status=BroadcastStatus.PENDING.value,
        )
        self.db.add(history)
        self.db.commit()
        self.db.refresh(history)
        return history

    def get_broadcast(self, broadcast_id: UUID) -> Optional[BroadcastHistory]:
        return (
            self.db.query(BroadcastHistory)
            .filter(BroadcastHistory.id == broadcast_id)
            .first()
        )

    def recipients_query(self, channel: str) -> Query:
        query = self.db.query(Contact)
        if channel != BROADCAST_ALL_CHANNELS:
            query = query.filter(Contact.channel == channel)
        return query.order_by(Contact.created_at)

    async def run(
        self,
        broadcast_id: UUID,
        adapters: AdapterRegistry,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> BroadcastHistory:
        """
        Send the broadcast sequentially, pausing BROADCAST_DELAY_SECONDS between
        messages. Counters are committed after every contact. A send that is
        skipped or fails counts as failed; an unexpected error marks the whole
        run Failed and is re-raised.
        """
        history = self.get_broadcast(broadcast_id)
        if history is None:
            raise NotFoundError(f"Broadcast {broadcast_id} not found")

        try:
            contacts = self.recipients_query(history.channel).all()
            history.status = BroadcastStatus.PROCESSING.value
            history.sent_to = len(contacts)
            history.successful = 0
            history.failed = 0
            self.db.commit()

            for index, contact in enumerate(contacts):
                if index > 0 and self.settings.broadcast_delay_seconds > 0:
                    await sleep(self.settings.broadcast_delay_seconds)
                if await self._send_one(adapters, contact, history.message):
                    history.successful += 1
                else:
                    history.failed += 1
                self.db.commit()

            history.status = BroadcastStatus.COMPLETED.value
            history.completed_at = datetime.now(timezone.utc)
            self.db.commit()
        except Exception:
            logger.exception("Broadcast %s aborted", broadcast_id)
            self.db.rollback()
            history.status = BroadcastStatus.FAILED.value
            history.completed_at = datetime.now(timezone.utc)
            self.db.commit()
            raise

        logger.info(
            "Broadcast %s completed: %d sent, %d failed",
            broadcast_id,
            history.successful,
            history.failed,
        )
        self.db.refresh(history)
        return history

    async def _send_one(
        self, adapters: AdapterRegistry, contact: Contact, template: str
    ) -> bool:
        try:
            adapter = adapters.get(contact.channel)
        except ValueError:
            logger.warning("Contact %s has unknown channel %s", contact.code, contact.channel)
            return False
        try:
            result = await adapter.send(contact.channel_id, personalize(template, contact))
        except CRMError as e:
            logger.warning("Broadcast to %s failed: %s", contact.code, e)
            return False
        return result.success and not result.skipped
