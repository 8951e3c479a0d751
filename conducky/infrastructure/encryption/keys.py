"""Master key validation and derivation for field encryption."""

import logging
from dataclasses import dataclass, field

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from conducky.config import Environment

logger = logging.getLogger(__name__)

MIN_KEY_LENGTH = 32
KEY_LENGTH = 32  # AES-256
PBKDF2_ITERATIONS = 100_000

# Fixed salt of the legacy 3-part format. Only used to read old values.
LEGACY_SALT = b"conducky-settings-salt-v1"

# Used when no key is configured and the environment is "test"
TEST_FALLBACK_KEY = "test-encryption-key-32-characters-long!"

WEAK_KEYS = frozenset(
    {
        "password",
        "12345678901234567890123456789012",
        "abcdefghijklmnopqrstuvwxyz123456",
        "conducky-dev-encryption-key-change-in-production",
    }
)


@dataclass
class KeyValidation:
    """Outcome of validate_encryption_key."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_encryption_key(key: str | None, environment: Environment) -> KeyValidation:
    """Check a master key without raising.

    Short keys and development-looking keys in production are errors;
    a known weak key is only a warning.
    """
    result = KeyValidation()
    if not key:
        result.errors.append("ENCRYPTION_KEY environment variable is required")
        return result

    if len(key) < MIN_KEY_LENGTH:
        result.errors.append(
            f"ENCRYPTION_KEY must be at least {MIN_KEY_LENGTH} characters long. "
            f"Current length: {len(key)}"
        )

    if key in WEAK_KEYS:
        result.warnings.append(
            "Using a default or weak encryption key. This should be changed in production!"
        )

    if environment == Environment.PRODUCTION and ("dev" in key or "development" in key):
        result.errors.append("Production environments must not use development encryption keys")

    return result


def derive_key(master_key: str, salt: bytes) -> bytes:
    """PBKDF2-HMAC-SHA512 derivation of a 32-byte AES key."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(master_key.encode("utf-8"))
