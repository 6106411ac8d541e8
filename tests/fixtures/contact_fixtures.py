"""Fixtures for contacts and conversation rows."""

from datetime import datetime, timezone

import pytest

from app.constants.chat import (
    AI_AGENT_NAME,
    AgentType,
    Channel,
    ChatStatus,
)
from app.models.chat_message import ConversationMessage
from app.models.contact import Contact


def make_contact(db, code, channel=Channel.WHATSAPP.value, channel_id=None, name=None):
    now = datetime.now(timezone.utc)
    contact = Contact(
        code=code,
        channel=channel,
        channel_id=channel_id or code.lower(),
        name=name,
        first_contact_at=now,
        last_contact_at=now,
        last_agent=AI_AGENT_NAME,
        last_agent_type=AgentType.BOT.value,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


@pytest.fixture(scope="function")
def setup_contact(db, faker):
    """A WhatsApp contact with code C000001."""
    return make_contact(
        db,
        "C000001",
        channel=Channel.WHATSAPP.value,
        channel_id=faker.msisdn(),
        name=faker.name(),
    )


@pytest.fixture(scope="function")
def setup_contacts_all_channels(db, faker):
    """One contact per channel, created in WhatsApp, Instagram, Telegram order."""
    return [
        make_contact(db, "C000001", Channel.WHATSAPP.value, faker.msisdn(), "Budi"),
        make_contact(db, "C000002", Channel.INSTAGRAM.value, "17841400000000001", "Sari"),
        make_contact(db, "C000003", Channel.TELEGRAM.value, "555001", "Andi"),
    ]


@pytest.fixture(scope="function")
def setup_chat_message(db, setup_contact, faker):
    """An inbound Unassigned row for setup_contact."""
    message = ConversationMessage(
        contact_id=setup_contact.id,
        contact_name=setup_contact.name,
        message=faker.sentence(),
        channel=setup_contact.channel,
        status=ChatStatus.UNASSIGNED.value,
        tokens_used=0,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message
