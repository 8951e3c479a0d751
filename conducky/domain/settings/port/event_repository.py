"""Port for bulk access to event contact emails."""

from abc import abstractmethod
from typing import Protocol

from conducky.domain.shared.port import Port


class EventContactRepository(Port, Protocol):
    @abstractmethod
    async def list_contact_emails(self) -> list[tuple[str, str | None]]:
        """(event_id, contact_email) for every event."""
        ...

    @abstractmethod
    async def set_contact_email(self, event_id: str, contact_email: str) -> None:
        ...
