"""Port for bulk access to encrypted-at-rest incident and comment fields."""

from abc import abstractmethod
from enum import StrEnum
from typing import Protocol

from conducky.domain.shared.port import Port


class SensitiveRecordKind(StrEnum):
    INCIDENT = "incident"
    COMMENT = "comment"


class SensitiveRecordRepository(Port, Protocol):
    @abstractmethod
    async def list_sensitive_fields(
        self, kind: SensitiveRecordKind
    ) -> list[tuple[str, dict[str, str | None]]]:
        """(record_id, {field: stored value}) for every record of a kind."""
        ...

    @abstractmethod
    async def update_fields(
        self, kind: SensitiveRecordKind, record_id: str, values: dict[str, str]
    ) -> None:
        ...
