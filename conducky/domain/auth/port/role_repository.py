"""Repository ports for the role catalog and role assignments."""

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from conducky.domain.auth.model.role import Role, RoleId, RoleScope
from conducky.domain.auth.model.role_assignment import RoleAssignment, Scope
from conducky.domain.auth.model.value import UserId
from conducky.domain.shared.port import Port


@dataclass(frozen=True)
class RoleAssignmentFilter:
    """Typed filter for listing assignments. Unset fields do not constrain."""

    scope_type: RoleScope | None = None
    scope_id: str | None = None
    role_names: frozenset[str] | None = None
    granted_after: datetime | None = None
    granted_before: datetime | None = None


class RoleRepository(Port, Protocol):
    """Read/write access to the role catalog."""

    @abstractmethod
    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by its exact (case-sensitive) name."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Role]:
        """List every role in the catalog."""
        ...

    @abstractmethod
    async def save(self, role: Role) -> None:
        """Insert a role. Raises ConflictError if the name is taken."""
        ...


class RoleAssignmentRepository(Port, Protocol):
    """Persistence for RoleAssignment rows."""

    @abstractmethod
    async def list_for_user(
        self,
        user_id: UserId,
        filter: RoleAssignmentFilter | None = None,
    ) -> list[RoleAssignment]:
        """List a user's assignments, optionally filtered."""
        ...

    @abstractmethod
    async def save(self, assignment: RoleAssignment) -> None:
        """Insert an assignment.

        Raises:
            ConflictError: If the (user, role, scope) tuple is already granted.
            NotFoundError: If the user or the granting user does not exist.
        """
        ...

    @abstractmethod
    async def delete(self, user_id: UserId, role_id: RoleId, scope: Scope) -> bool:
        """Delete one assignment. Returns True if deleted, False if not found."""
        ...
