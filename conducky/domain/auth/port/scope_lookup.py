"""Port for resolving event slugs and event ownership."""

from abc import abstractmethod
from typing import Protocol

from conducky.domain.shared.port import Port


class EventLookup(Port, Protocol):
    @abstractmethod
    async def get_event_id_by_slug(self, slug: str) -> str | None:
        """Resolve an event slug to its id, or None if no such event."""
        ...

    @abstractmethod
    async def get_organization_id(self, event_id: str) -> str | None:
        """Id of the organization owning the event, or None if unknown."""
        ...
