"""Tests for ContactResolver."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.constants.chat import AI_AGENT_NAME, AgentType, Channel
from app.exceptions import PersistenceError
from app.models.contact import Contact
from app.services.contact_service import ContactResolver
from tests.fixtures.contact_fixtures import make_contact


def test_resolve_creates_contact_with_first_code(db):
    resolver = ContactResolver(db)
    contact = resolver.resolve(Channel.WHATSAPP.value, "6281234567890", "Budi")

    assert contact.code == "C000001"
    assert contact.channel == "WhatsApp"
    assert contact.channel_id == "6281234567890"
    assert contact.name == "Budi"
    assert contact.contact_status == "Leads"
    assert contact.temperature == "Warm"
    assert contact.last_agent == AI_AGENT_NAME
    assert contact.last_agent_type == AgentType.BOT.value
    assert contact.first_contact_at is not None
    assert contact.first_contact_at == contact.last_contact_at


def test_resolve_allocates_increasing_codes(db):
    resolver = ContactResolver(db)
    first = resolver.resolve(Channel.WHATSAPP.value, "111", "A")
    second = resolver.resolve(Channel.TELEGRAM.value, "222", "B")
    third = resolver.resolve(Channel.INSTAGRAM.value, "333", "")

    assert [first.code, second.code, third.code] == ["C000001", "C000002", "C000003"]


def test_resolve_existing_contact_is_idempotent(db):
    resolver = ContactResolver(db)
    first = resolver.resolve(Channel.WHATSAPP.value, "6281234567890", "Budi")
    first_seen = first.first_contact_at
    again = resolver.resolve(Channel.WHATSAPP.value, "6281234567890", "Budi")

    assert again.id == first.id
    assert again.code == "C000001"
    assert again.first_contact_at == first_seen
    assert again.last_contact_at >= first_seen
    assert db.query(Contact).count() == 1


def test_same_channel_id_on_other_channel_is_another_contact(db):
    resolver = ContactResolver(db)
    wa = resolver.resolve(Channel.WHATSAPP.value, "12345", "Budi")
    tg = resolver.resolve(Channel.TELEGRAM.value, "12345", "Budi")

    assert wa.id != tg.id
    assert db.query(Contact).count() == 2


def test_resolve_updates_name_only_when_given(db):
    resolver = ContactResolver(db)
    resolver.resolve(Channel.WHATSAPP.value, "999", "Old Name")

    renamed = resolver.resolve(Channel.WHATSAPP.value, "999", "New Name")
    assert renamed.name == "New Name"

    unchanged = resolver.resolve(Channel.WHATSAPP.value, "999", "")
    assert unchanged.name == "New Name"


def test_resolve_returns_contact_when_touch_update_fails(db):
    resolver = ContactResolver(db)
    created = resolver.resolve(Channel.WHATSAPP.value, "777", "Rina")

    with patch.object(db, "commit", side_effect=SQLAlchemyError("db down")):
        contact = resolver.resolve(Channel.WHATSAPP.value, "777", "Rina Baru")

    assert contact.id == created.id


def test_next_sequence_follows_highest_code(db):
    make_contact(db, "C000009")
    make_contact(db, "C000010")
    resolver = ContactResolver(db)

    assert resolver.next_sequence() == 11
    contact = resolver.resolve(Channel.TELEGRAM.value, "42", "Tono")
    assert contact.code == "C000011"


def test_next_sequence_handles_codes_past_padding(db):
    make_contact(db, "C999999")
    make_contact(db, "C1000000")

    assert ContactResolver(db).next_sequence() == 1000001


def test_next_sequence_skips_non_numeric_codes(db):
    make_contact(db, "C000041")
    make_contact(db, "C-IMPORTED-7")

    assert ContactResolver(db).next_sequence() == 42


def test_format_code_pads_to_configured_digits(db):
    resolver = ContactResolver(db)
    assert resolver.format_code(1) == "C000001"
    assert resolver.format_code(123456) == "C123456"


def test_create_retries_after_code_collision(db):
    make_contact(db, "C000001", channel_id="someone-else")
    resolver = ContactResolver(db)

    with patch.object(resolver, "next_sequence", return_value=1):
        contact = resolver.resolve(Channel.WHATSAPP.value, "newcomer", "Dewi")

    assert contact.code == "C000002"
    assert contact.channel_id == "newcomer"


def test_create_gives_up_after_repeated_collisions(db):
    for n in range(1, 7):
        make_contact(db, f"C00000{n}", channel_id=f"taken-{n}")
    resolver = ContactResolver(db)

    with patch.object(resolver, "next_sequence", return_value=1):
        with pytest.raises(PersistenceError):
            resolver.resolve(Channel.WHATSAPP.value, "unlucky", "Joko")


def test_list_contacts_filters_by_channel(db, setup_contacts_all_channels):
    resolver = ContactResolver(db)
    assert resolver.list_contacts().count() == 3
    telegram = resolver.list_contacts(Channel.TELEGRAM.value).all()
    assert [c.code for c in telegram] == ["C000003"]


def test_set_last_agent(db, setup_contact):
    contact = ContactResolver(db).set_last_agent(
        setup_contact, "Maya", AgentType.HUMAN.value
    )
    assert contact.last_agent == "Maya"
    assert contact.last_agent_type == "Human"
