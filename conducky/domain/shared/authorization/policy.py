"""Handler-level authorization policies.

A handler declares ``__auth__`` with one of these; the handler base class
enforces it through the AccessGate before run() executes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from conducky.domain.auth.model.identity import Identity
    from conducky.domain.auth.service.access import AccessGate


class Policy(ABC):
    @abstractmethod
    async def enforce(self, gate: AccessGate, identity: Identity, cmd: Any) -> None:
        """Return normally to allow; raise AuthorizationError to deny."""
        ...


@dataclass(frozen=True)
class Public(Policy):
    """No authentication required."""

    async def enforce(self, gate: AccessGate, identity: Identity, cmd: Any) -> None:
        return None


@dataclass(frozen=True)
class RequiresSystemAdmin(Policy):
    async def enforce(self, gate: AccessGate, identity: Identity, cmd: Any) -> None:
        await gate.require_system_admin(identity)


@dataclass(frozen=True)
class RequiresEventRole(Policy):
    """Caller must hold one of roles at the event named by ``cmd.<event_field>``."""

    roles: tuple[str, ...]
    event_field: str = "event_id"

    async def enforce(self, gate: AccessGate, identity: Identity, cmd: Any) -> None:
        await gate.require_event_role(identity, getattr(cmd, self.event_field, None), self.roles)


def public() -> Public:
    return Public()


def requires_system_admin() -> RequiresSystemAdmin:
    return RequiresSystemAdmin()


def requires_event_role(*roles: str, event_field: str = "event_id") -> RequiresEventRole:
    return RequiresEventRole(roles=roles, event_field=event_field)
