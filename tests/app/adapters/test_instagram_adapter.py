"""Tests for InstagramAdapter."""

import pytest

from app.adapters.instagram import InstagramAdapter
from app.config import get_settings
from app.constants.chat import Channel
from app.exceptions import InvalidPayloadError, SendError
from app.services.platform_service import PlatformService
from tests.fixtures.webhook_payloads import (
    instagram_batch,
    instagram_entry,
    instagram_payload,
)


@pytest.fixture
def adapter(db, http_client):
    settings = get_settings()
    return InstagramAdapter(
        PlatformService(db, settings),
        http_client,
        verify_token=settings.instagram_verify_token,
    )


def test_parse_webhook_every_text_event(adapter):
    messages = adapter.parse_webhook(instagram_payload("price?", "still available?"))

    assert [m.text for m in messages] == ["price?", "still available?"]
    assert all(m.channel == Channel.INSTAGRAM for m in messages)
    assert all(m.display_name == "Instagram User" for m in messages)
    assert messages[0].external_user_id == "17841400000000001"
    assert messages[1].message_id == "mid.1"


def test_parse_webhook_skips_events_without_text(adapter):
    payload = instagram_payload("hello")
    payload["entry"][0]["messaging"].append(
        {"sender": {"id": "1"}, "read": {"watermark": 1}}
    )
    payload["entry"][0]["messaging"].append(
        {"sender": {"id": "2"}, "message": {"mid": "m", "attachments": []}}
    )
    assert [m.text for m in adapter.parse_webhook(payload)] == ["hello"]


def test_parse_webhook_reads_every_entry(adapter):
    payload = instagram_batch(
        instagram_entry("price?", sender="17841400000000001"),
        instagram_entry("open today?", "where?", sender="17841400000000002"),
    )

    messages = adapter.parse_webhook(payload)

    assert [(m.external_user_id, m.text) for m in messages] == [
        ("17841400000000001", "price?"),
        ("17841400000000002", "open today?"),
        ("17841400000000002", "where?"),
    ]


def test_parse_webhook_wrong_shape(adapter):
    with pytest.raises(InvalidPayloadError):
        adapter.parse_webhook({"entry": [{"messaging": [{"message": {"text": "x"}}]}]})


@pytest.mark.asyncio
async def test_send_posts_response_message(adapter, graph_api):
    graph_api.body = {"recipient_id": "17841400000000001", "message_id": "mid.out"}

    result = await adapter.send("17841400000000001", "Rp 100.000")

    assert result.success is True
    assert result.platform_message_id == "mid.out"
    request = graph_api.requests[0]
    assert str(request.url) == "https://graph.facebook.com/v18.0/me/messages"
    assert request.headers["Authorization"] == "Bearer ig-access-token"
    assert graph_api.sent_json() == {
        "recipient": {"id": "17841400000000001"},
        "message": {"text": "Rp 100.000"},
        "messaging_type": "RESPONSE",
    }


@pytest.mark.asyncio
async def test_send_accepts_201(adapter, graph_api):
    graph_api.status_code = 201
    graph_api.body = {"message_id": "mid.created"}
    result = await adapter.send("1", "hi")
    assert result.platform_message_id == "mid.created"


@pytest.mark.asyncio
async def test_send_rejects_other_2xx(adapter, graph_api):
    graph_api.status_code = 202
    with pytest.raises(SendError) as exc_info:
        await adapter.send("1", "hi")
    assert exc_info.value.status_code == 202


@pytest.mark.asyncio
async def test_send_non_json_body(adapter, graph_api):
    graph_api.body = ["not", "an", "object"]
    with pytest.raises(SendError):
        await adapter.send("1", "hi")


@pytest.mark.asyncio
async def test_send_skipped_without_token(db, http_client, graph_api, monkeypatch):
    monkeypatch.delenv("INSTAGRAM_ACCESS_TOKEN")
    adapter = InstagramAdapter(PlatformService(db, get_settings()), http_client)

    result = await adapter.send("1", "hi")
    assert result.skipped is True
    assert graph_api.requests == []
