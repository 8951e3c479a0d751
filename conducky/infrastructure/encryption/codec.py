"""Field encryption codec.

Stored format (all components hex):

    salt:iv:ciphertext:tag    current, per-value random salt
    iv:ciphertext:tag         legacy, key derived from a fixed salt

AES-256-GCM with a 16-byte IV and fixed additional authenticated data.
In the current format the ciphertext component is empty for an encrypted
empty string; legacy values never have an empty component.
"""

import logging
import os
import re
from dataclasses import field

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from conducky.config import Config, Environment
from conducky.domain.shared.error import ConfigurationError, ValidationError
from conducky.domain.shared.service import Service
from conducky.infrastructure.encryption.keys import (
    LEGACY_SALT,
    TEST_FALLBACK_KEY,
    derive_key,
    validate_encryption_key,
)

logger = logging.getLogger(__name__)

SALT_LENGTH = 32
IV_LENGTH = 16
TAG_LENGTH = 16
AAD = b"conducky-field-encryption"

_HEX = re.compile(r"^[0-9a-fA-F]+$")


def _split(value: object) -> list[str] | None:
    """Components of an encrypted value, or None if it is not one."""
    if not isinstance(value, str) or not value:
        return None
    parts = value.split(":")
    if len(parts) not in (3, 4):
        return None
    # Only the current format encodes "", as an empty ciphertext part
    empty_ok = 2 if len(parts) == 4 else None
    for i, part in enumerate(parts):
        if i == empty_ok and part == "":
            continue
        if not _HEX.match(part):
            return None
    return parts


def is_encrypted(value: object) -> bool:
    """True for a 3-part (legacy) or 4-part (current) all-hex value."""
    return _split(value) is not None


def is_legacy_encrypted(value: object) -> bool:
    """True only for the 3-part legacy format."""
    parts = _split(value)
    return parts is not None and len(parts) == 3


class FieldEncryptor(Service):
    """Encrypts and decrypts individual string fields.

    Malformed or undecryptable input is returned unchanged by decrypt_field.
    A missing master key is never degraded: it raises ConfigurationError.
    """

    _key: str | None = None
    _environment: Environment = Environment.DEVELOPMENT
    _resolved_key: str | None = field(default=None, init=False, repr=False)
    _legacy_key: bytes | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config: Config) -> "FieldEncryptor":
        return cls(_key=config.master_key, _environment=config.server.environment)

    def _master_key(self) -> str:
        if self._resolved_key is not None:
            return self._resolved_key

        if not self._key:
            if self._environment == Environment.TEST:
                self._resolved_key = TEST_FALLBACK_KEY
                return self._resolved_key
            raise ConfigurationError(
                "ENCRYPTION_KEY environment variable is required",
                code="encryption_key_missing",
            )

        validation = validate_encryption_key(self._key, self._environment)
        for warning in validation.warnings:
            logger.warning("Encryption key: %s", warning)
        if not validation.valid:
            raise ConfigurationError("; ".join(validation.errors), code="encryption_key_invalid")

        self._resolved_key = self._key
        return self._resolved_key

    def _legacy(self) -> bytes:
        if self._legacy_key is None:
            self._legacy_key = derive_key(self._master_key(), LEGACY_SALT)
        return self._legacy_key

    def encrypt_field(self, plaintext: str | None) -> str | None:
        """Encrypt with a fresh salt and IV. None passes through; "" is encrypted."""
        if plaintext is None:
            return None

        salt = os.urandom(SALT_LENGTH)
        iv = os.urandom(IV_LENGTH)
        key = derive_key(self._master_key(), salt)
        sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), AAD)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return ":".join((salt.hex(), iv.hex(), ciphertext.hex(), tag.hex()))

    def decrypt_strict(self, value: str) -> str:
        """Decrypt an encrypted value, raising if it cannot be decrypted.

        Raises:
            ValidationError: If the value is not in an encrypted format or
                fails authentication.
            ConfigurationError: If no master key is available.
        """
        parts = _split(value)
        if parts is None:
            raise ValidationError("Value is not in an encrypted format", code="not_encrypted")

        master = self._master_key()
        try:
            if len(parts) == 4:
                key = derive_key(master, bytes.fromhex(parts[0]))
                iv_hex, ciphertext_hex, tag_hex = parts[1:]
            else:
                key = self._legacy()
                iv_hex, ciphertext_hex, tag_hex = parts
            sealed = bytes.fromhex(ciphertext_hex) + bytes.fromhex(tag_hex)
            plaintext = AESGCM(key).decrypt(bytes.fromhex(iv_hex), sealed, AAD)
            return plaintext.decode("utf-8")
        except (InvalidTag, ValueError) as e:
            raise ValidationError(
                "Encrypted value failed to decrypt", code="decryption_failed"
            ) from e

    def decrypt_field(self, value: str | None) -> str | None:
        """Decrypt a stored value. Anything that does not decrypt comes back unchanged."""
        if value is None or not is_encrypted(value):
            return value
        try:
            return self.decrypt_strict(value)
        except ValidationError:
            logger.warning(
                "Could not decrypt %d-part value, returning it unchanged",
                value.count(":") + 1,
            )
            return value

    def is_sealed(self, value: object) -> bool:
        """True if value is in an encrypted format and decrypts under the current key.

        Plaintext can match the hex-colon shape ("cafe:babe:f00d"), so write
        paths use this rather than is_encrypted to decide whether to encrypt.
        """
        if not is_encrypted(value):
            return False
        try:
            self.decrypt_strict(value)  # type: ignore[arg-type]
        except ValidationError:
            return False
        return True

    is_encrypted = staticmethod(is_encrypted)
    is_legacy_encrypted = staticmethod(is_legacy_encrypted)
