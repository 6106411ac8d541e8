"""Encryption of platform access tokens stored in connected_platforms."""

from __future__ import annotations

from cryptography.fernet import Fernet, InvalidToken

from app.config import get_settings
from app.exceptions import ConfigurationMissingError


def _get_fernet() -> Fernet:
    """Get a Fernet instance with the credential master key."""
    settings = get_settings()
    key = settings.credential_master_key or settings.fernet_key
    if not key:
        raise ConfigurationMissingError(
            "CREDENTIAL_MASTER_KEY or FERNET_KEY must be set for token encryption"
        )
    try:
        return Fernet(key.encode() if isinstance(key, str) else key)
    except ValueError as e:
        raise ConfigurationMissingError(
            "CREDENTIAL_MASTER_KEY or FERNET_KEY is not a valid Fernet key"
        ) from e


def encrypt_token(token: str) -> bytes:
    """Encrypt a platform access token."""
    return _get_fernet().encrypt(token.encode())


def decrypt_token(encrypted_token: bytes) -> str:
    """Decrypt a platform access token. Raises ConfigurationMissingError if the key does not match."""
    try:
        return _get_fernet().decrypt(encrypted_token).decode()
    except InvalidToken as e:
        raise ConfigurationMissingError(
            "Stored platform token cannot be decrypted with the configured key"
        ) from e
