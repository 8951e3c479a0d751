"""Apply the field codec to whole records."""

from collections.abc import Iterable, Mapping
from typing import Any

from conducky.infrastructure.encryption.codec import FieldEncryptor

INCIDENT_SENSITIVE_FIELDS = ("description", "parties", "location")
COMMENT_SENSITIVE_FIELDS = ("body",)
EVENT_SENSITIVE_FIELDS = ("contact_email",)


def encrypt_fields(
    encryptor: FieldEncryptor,
    record: Mapping[str, Any],
    fields: Iterable[str],
) -> dict[str, Any]:
    """Copy of record with the named string fields encrypted.

    Values that already decrypt under the current key are left alone so a
    record can be saved twice without double encryption.
    """
    result = dict(record)
    for name in fields:
        value = result.get(name)
        if isinstance(value, str) and not encryptor.is_sealed(value):
            result[name] = encryptor.encrypt_field(value)
    return result


def decrypt_fields(
    encryptor: FieldEncryptor,
    record: Mapping[str, Any],
    fields: Iterable[str],
) -> dict[str, Any]:
    """Copy of record with the named fields decrypted."""
    result = dict(record)
    for name in fields:
        value = result.get(name)
        if isinstance(value, str):
            result[name] = encryptor.decrypt_field(value)
    return result
