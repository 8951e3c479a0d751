"""Port for the field encryption codec."""

from abc import abstractmethod
from typing import Protocol

from conducky.domain.shared.port import Port


class FieldCipher(Port, Protocol):
    @abstractmethod
    def encrypt_field(self, plaintext: str | None) -> str | None: ...

    @abstractmethod
    def decrypt_field(self, value: str | None) -> str | None: ...

    @abstractmethod
    def decrypt_strict(self, value: str) -> str:
        """Decrypt or raise ValidationError(code="decryption_failed")."""
        ...

    @abstractmethod
    def is_encrypted(self, value: object) -> bool: ...

    @abstractmethod
    def is_legacy_encrypted(self, value: object) -> bool: ...

    @abstractmethod
    def is_sealed(self, value: object) -> bool:
        """Encrypted format and decrypts under the current key."""
        ...
