"""Webhook bodies as the platforms send them."""


def whatsapp_payload(text="Do you ship to Bali?", name="Budi", sender="6281234567890"):
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA_ID",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "contacts": [{"wa_id": sender, "profile": {"name": name}}],
                            "messages": [
                                {
                                    "from": sender,
                                    "id": "wamid.ABC",
                                    "timestamp": "1700000000",
                                    "type": "text",
                                    "text": {"body": text},
                                }
                            ],
                        },
                    }
                ],
            }
        ],
    }


def instagram_entry(*texts, sender="17841400000000001"):
    return {
        "id": "page-42",
        "time": 1700000000,
        "messaging": [
            {
                "sender": {"id": sender},
                "recipient": {"id": "page-42"},
                "timestamp": 1700000000,
                "message": {"mid": f"mid.{i}", "text": text},
            }
            for i, text in enumerate(texts)
        ],
    }


def instagram_payload(*texts, sender="17841400000000001"):
    return instagram_batch(instagram_entry(*texts, sender=sender))


def instagram_batch(*entries):
    """Instagram can batch several entries (one per page event) in one POST."""
    return {"object": "instagram", "entry": list(entries)}


def minimal_telegram_update(text="hello"):
    """Minimal valid Telegram webhook update (message with text)."""
    message = {
        "message_id": 456,
        "from": {
            "id": 789,
            "is_bot": False,
            "first_name": "Test",
            "last_name": "User",
            "language_code": "en",
        },
        "chat": {
            "id": 789,
            "type": "private",
            "first_name": "Test",
            "last_name": "User",
        },
        "date": 1609459200,  # Unix timestamp
    }
    if text is not None:
        message["text"] = text
    return {"update_id": 123, "message": message}
