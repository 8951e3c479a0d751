"""Unit tests for master key validation and derivation."""

from conducky.config import Environment
from conducky.infrastructure.encryption.keys import (
    KEY_LENGTH,
    LEGACY_SALT,
    derive_key,
    validate_encryption_key,
)


class TestValidateEncryptionKey:
    def test_missing_key(self):
        result = validate_encryption_key(None, Environment.DEVELOPMENT)
        assert not result.valid

    def test_short_key(self):
        result = validate_encryption_key("too-short", Environment.DEVELOPMENT)

        assert not result.valid
        assert "at least 32 characters" in result.errors[0]

    def test_weak_key_warns_only(self):
        result = validate_encryption_key(
            "abcdefghijklmnopqrstuvwxyz123456", Environment.DEVELOPMENT
        )

        assert result.valid
        assert result.warnings

    def test_dev_key_rejected_in_production(self):
        key = "my-dev-key-that-is-definitely-long-enough"

        assert validate_encryption_key(key, Environment.DEVELOPMENT).valid
        assert not validate_encryption_key(key, Environment.PRODUCTION).valid

    def test_strong_key(self):
        result = validate_encryption_key("Zq8#kL2!vN9$wR4@tY7&uP1*sX5^mB3%", Environment.PRODUCTION)

        assert result.valid
        assert result.warnings == []


class TestDeriveKey:
    def test_deterministic_per_salt(self):
        a = derive_key("master-key", LEGACY_SALT)

        assert a == derive_key("master-key", LEGACY_SALT)
        assert a != derive_key("master-key", b"another-salt")
        assert len(a) == KEY_LENGTH
