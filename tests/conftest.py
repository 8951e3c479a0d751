"""Shared fixtures: in-memory fakes for the auth ports."""

import os

os.environ.setdefault("CONDUCKY_SERVER__ENVIRONMENT", "test")
os.environ.setdefault("CONDUCKY_AUTH__JWT__SECRET", "test-jwt-secret-that-is-long-enough-for-hs256")

import logfire  # noqa: E402
import pytest  # noqa: E402

from conducky.domain.auth.model.role import ROLE_CATALOG, Role  # noqa: E402
from conducky.domain.auth.model.role_assignment import RoleAssignment, Scope  # noqa: E402
from conducky.domain.auth.model.value import UserId  # noqa: E402
from conducky.domain.auth.port.role_repository import (  # noqa: E402
    RoleAssignmentFilter,
    RoleAssignmentRepository,
    RoleRepository,
)
from conducky.domain.auth.port.scope_lookup import EventLookup  # noqa: E402
from conducky.domain.auth.service.access import AccessGate  # noqa: E402
from conducky.domain.auth.service.rbac import RBACService  # noqa: E402
from conducky.domain.shared.error import ConflictError  # noqa: E402

logfire.configure(send_to_logfire=False, console=False)


class FakeRoleRepository(RoleRepository):
    """Role catalog held in a dict, seeded with the built-in roles."""

    def __init__(self) -> None:
        self.roles: dict[str, Role] = {}
        for name, scope, level, description in ROLE_CATALOG:
            self.roles[name.value] = Role.create(name.value, scope, level, description)

    async def get_by_name(self, name: str) -> Role | None:
        return self.roles.get(str(name))

    async def list_all(self) -> list[Role]:
        return sorted(self.roles.values(), key=lambda r: -r.level)

    async def save(self, role: Role) -> None:
        if role.name in self.roles:
            raise ConflictError(f"Role already exists: {role.name}", code="role_exists")
        self.roles[role.name] = role


class FakeRoleAssignmentRepository(RoleAssignmentRepository):
    """Assignments in a list. Counts list_for_user calls for cache tests."""

    def __init__(self, roles: FakeRoleRepository) -> None:
        self._roles = roles
        self.assignments: list[RoleAssignment] = []
        self.list_calls = 0
        self.fail_with: Exception | None = None

    def add(self, user_id: UserId, role_name: str, scope: Scope) -> RoleAssignment:
        """Test helper: insert a grant directly."""
        role = self._roles.roles[role_name]
        assignment = RoleAssignment.create(
            user_id=user_id, role_id=role.id, role_name=role.name, scope=scope
        )
        self.assignments.append(assignment)
        return assignment

    async def list_for_user(
        self,
        user_id: UserId,
        filter: RoleAssignmentFilter | None = None,
    ) -> list[RoleAssignment]:
        self.list_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        result = [a for a in self.assignments if a.user_id == user_id]
        if filter is not None:
            if filter.scope_type is not None:
                result = [a for a in result if a.scope.type == filter.scope_type]
            if filter.scope_id is not None:
                result = [a for a in result if a.scope.id == filter.scope_id]
            if filter.role_names is not None:
                result = [a for a in result if a.role_name in filter.role_names]
        return result

    async def save(self, assignment: RoleAssignment) -> None:
        for a in self.assignments:
            if (a.user_id, a.role_id, a.scope) == (
                assignment.user_id,
                assignment.role_id,
                assignment.scope,
            ):
                raise ConflictError("duplicate grant", code="role_already_assigned")
        self.assignments.append(assignment)

    async def delete(self, user_id, role_id, scope) -> bool:
        before = len(self.assignments)
        self.assignments = [
            a
            for a in self.assignments
            if (a.user_id, a.role_id, a.scope) != (user_id, role_id, scope)
        ]
        return len(self.assignments) < before


class FakeEventLookup(EventLookup):
    def __init__(self) -> None:
        self.slugs: dict[str, str] = {}
        self.organizations: dict[str, str | None] = {}
        self.org_lookups = 0

    def add_event(self, event_id: str, slug: str, organization_id: str | None = None) -> None:
        self.slugs[slug] = event_id
        self.organizations[event_id] = organization_id

    async def get_event_id_by_slug(self, slug: str) -> str | None:
        return self.slugs.get(slug)

    async def get_organization_id(self, event_id: str) -> str | None:
        self.org_lookups += 1
        return self.organizations.get(event_id)


@pytest.fixture
def roles() -> FakeRoleRepository:
    return FakeRoleRepository()


@pytest.fixture
def assignments(roles: FakeRoleRepository) -> FakeRoleAssignmentRepository:
    return FakeRoleAssignmentRepository(roles)


@pytest.fixture
def events() -> FakeEventLookup:
    """One organization owning one event, plus an orphan event."""
    lookup = FakeEventLookup()
    lookup.add_event("event-1", "pycon", organization_id="org-1")
    lookup.add_event("event-2", "orphan-conf", organization_id=None)
    return lookup


@pytest.fixture
def rbac(
    roles: FakeRoleRepository,
    assignments: FakeRoleAssignmentRepository,
    events: FakeEventLookup,
) -> RBACService:
    return RBACService(_roles=roles, _assignments=assignments, _events=events)


@pytest.fixture
def gate(rbac: RBACService, events: FakeEventLookup) -> AccessGate:
    return AccessGate(_rbac=rbac, _events=events)
