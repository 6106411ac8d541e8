"""Tests for platform token encryption."""

import pytest
from cryptography.fernet import Fernet

from app.core.credentials import decrypt_token, encrypt_token
from app.exceptions import ConfigurationMissingError


def test_encrypt_decrypt():
    encrypted = encrypt_token("EAAG-page-token")
    assert isinstance(encrypted, bytes)
    assert b"EAAG-page-token" not in encrypted
    assert decrypt_token(encrypted) == "EAAG-page-token"


def test_master_key_takes_precedence(monkeypatch):
    monkeypatch.setenv("CREDENTIAL_MASTER_KEY", Fernet.generate_key().decode())
    encrypted = encrypt_token("secret")

    monkeypatch.delenv("CREDENTIAL_MASTER_KEY")
    with pytest.raises(ConfigurationMissingError, match="cannot be decrypted"):
        decrypt_token(encrypted)


def test_missing_key(monkeypatch):
    monkeypatch.delenv("FERNET_KEY", raising=False)
    monkeypatch.delenv("CREDENTIAL_MASTER_KEY", raising=False)
    with pytest.raises(ConfigurationMissingError):
        encrypt_token("secret")


def test_malformed_key(monkeypatch):
    monkeypatch.setenv("CREDENTIAL_MASTER_KEY", "not-a-fernet-key")
    with pytest.raises(ConfigurationMissingError, match="not a valid Fernet key"):
        encrypt_token("secret")
