"""Domain errors raised by services, adapters and the webhook pipeline."""

from __future__ import annotations

from typing import Optional

MAX_ERROR_BODY_LENGTH = 500


class CRMError(Exception):
    """Base class for every domain error of the service."""


class NotFoundError(CRMError):
    """A contact, message or record lookup found nothing."""


class ConfigurationMissingError(CRMError):
    """A platform or the AI engine is not configured."""


class UpstreamError(CRMError):
    """An external API returned a failure or could not be reached."""


class EmbeddingError(UpstreamError):
    """The embedding API failed or returned an unusable vector."""


class GenerationError(UpstreamError):
    """The generative model call failed or produced no text."""


class SendError(UpstreamError):
    """A platform send API rejected the message or was unreachable."""

    def __init__(self, status_code: Optional[int], body: str = "") -> None:
        self.status_code = status_code
        self.body = (body or "")[:MAX_ERROR_BODY_LENGTH]
        if status_code is None:
            message = f"send failed: {self.body}"
        else:
            message = f"send failed with status {status_code}: {self.body}"
        super().__init__(message)


class InvalidRecipientError(CRMError):
    """The recipient id cannot be used by the platform (e.g. non-numeric Telegram chat id)."""


class InvalidPayloadError(CRMError):
    """A webhook body does not have the shape the platform documents."""


class PersistenceError(CRMError):
    """Reading from or writing to the database failed."""
