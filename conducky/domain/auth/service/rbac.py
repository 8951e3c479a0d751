"""RBACService: scope-aware role resolution.

Resolution order for every scoped check:

1. system_admin at system scope (unconditional bypass)
2. a direct grant at the requested scope
3. inheritance from the parent scope (org_admin on the event's
   organization counts as event_admin for that event)

Inheritance is exactly one level deep. Unknown events fail closed.
"""

import logging
import time
from collections.abc import Collection, Iterable
from dataclasses import field

from pydantic import BaseModel

from conducky.domain.auth.model.role import ROLE_LEVELS, RoleName, RoleScope
from conducky.domain.auth.model.role_assignment import RoleAssignment, Scope
from conducky.domain.auth.model.value import SYSTEM_SCOPE_ID, UserId
from conducky.domain.auth.port.role_repository import (
    RoleAssignmentFilter,
    RoleAssignmentRepository,
    RoleRepository,
)
from conducky.domain.auth.port.scope_lookup import EventLookup
from conducky.domain.shared.authorization.action import EventAction
from conducky.domain.shared.authorization.policy_set import POLICY_SET, EventPolicySet
from conducky.domain.shared.error import NotFoundError, ValidationError
from conducky.domain.shared.service import Service

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300.0

DEFAULT_ORG_ROLES = (RoleName.ORG_ADMIN, RoleName.ORG_VIEWER)

# Event-level standing granted by an organization role to every event the
# organization owns. org_viewer grants nothing.
ORG_ROLE_EVENT_STANDING: dict[str, frozenset[str]] = {
    RoleName.ORG_ADMIN: frozenset({RoleName.EVENT_ADMIN}),
}


class UserRolesSummary(BaseModel):
    """A user's role names grouped by scope."""

    system: list[str] = []
    organizations: dict[str, list[str]] = {}
    events: dict[str, list[str]] = {}


def _holds(
    assignments: Iterable[RoleAssignment],
    role_names: Collection[str],
    scope_type: RoleScope,
    scope_id: str | None = None,
) -> bool:
    return any(
        a.scope.type == scope_type
        and (scope_id is None or a.scope.id == scope_id)
        and a.role_name in role_names
        for a in assignments
    )


class RBACService(Service):
    """Answers "does user U hold one of these roles at scope S".

    Holds a small per-instance cache of each user's assignments. The
    instance is request-scoped in the web app, so the cache never outlives
    a unit of work there; grant/revoke clear the affected user.
    """

    _roles: RoleRepository
    _assignments: RoleAssignmentRepository
    _events: EventLookup
    _policies: EventPolicySet = POLICY_SET
    _cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS
    _cache: dict[UserId, tuple[float, list[RoleAssignment]]] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    async def _load(self, user_id: UserId) -> list[RoleAssignment]:
        now = time.monotonic()
        cached = self._cache.get(user_id)
        if cached is not None and now - cached[0] < self._cache_ttl:
            return cached[1]

        assignments = await self._assignments.list_for_user(user_id)
        self._cache[user_id] = (now, assignments)
        logger.debug("Loaded %d role assignments for user=%s", len(assignments), user_id)
        return assignments

    def clear_user_cache(self, user_id: UserId) -> None:
        self._cache.pop(user_id, None)

    def clear_all_cache(self) -> None:
        self._cache.clear()

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    async def is_system_admin(self, user_id: UserId) -> bool:
        """True iff the user holds system_admin at system scope."""
        assignments = await self._load(user_id)
        return _holds(assignments, {RoleName.SYSTEM_ADMIN}, RoleScope.SYSTEM, SYSTEM_SCOPE_ID)

    async def has_role(
        self,
        user_id: UserId,
        role_names: Collection[str],
        scope_type: RoleScope = RoleScope.SYSTEM,
    ) -> bool:
        """Any of role_names held at any scope of the given type (global check)."""
        if not role_names:
            return False
        if await self.is_system_admin(user_id):
            return True
        return _holds(await self._load(user_id), set(role_names), scope_type)

    async def has_org_role(
        self,
        user_id: UserId,
        organization_id: str,
        role_names: Collection[str] = DEFAULT_ORG_ROLES,
    ) -> bool:
        if not role_names:
            return False
        if await self.is_system_admin(user_id):
            return True
        return _holds(
            await self._load(user_id),
            set(role_names),
            RoleScope.ORGANIZATION,
            organization_id,
        )

    async def has_event_role(
        self,
        user_id: UserId,
        event_id: str,
        role_names: Collection[str],
    ) -> bool:
        """Direct or inherited event role check.

        An empty role_names list is always False, system admins included.
        """
        if not role_names:
            return False
        wanted = set(role_names)

        if await self.is_system_admin(user_id):
            logger.debug("has_event_role: system admin bypass user=%s event=%s", user_id, event_id)
            return True

        assignments = await self._load(user_id)
        if _holds(assignments, wanted, RoleScope.EVENT, event_id):
            return True

        inheriting = [
            name for name, standing in ORG_ROLE_EVENT_STANDING.items() if standing & wanted
        ]
        if not inheriting:
            return False

        organization_id = await self._events.get_organization_id(event_id)
        if organization_id is None:
            logger.debug("has_event_role: unknown event=%s, no inheritance", event_id)
            return False

        return _holds(assignments, inheriting, RoleScope.ORGANIZATION, organization_id)

    async def can(self, user_id: UserId, action: EventAction, event_id: str) -> bool:
        """Policy-table check for an event action."""
        allowed = await self.has_event_role(user_id, event_id, self._policies.roles_for(action))
        if allowed:
            logger.info(
                "Authorization allowed: user=%s action=%s event=%s", user_id, action, event_id
            )
        else:
            logger.warning(
                "Authorization denied: user=%s action=%s event=%s", user_id, action, event_id
            )
        return allowed

    async def can_view_event(self, user_id: UserId, event_id: str) -> bool:
        return await self.can(user_id, EventAction.INCIDENT_READ, event_id)

    async def can_manage_tags(self, user_id: UserId, event_id: str) -> bool:
        return await self.can(user_id, EventAction.TAG_MANAGE, event_id)

    async def can_manage_event(self, user_id: UserId, event_id: str) -> bool:
        return await self.can(user_id, EventAction.EVENT_MANAGE, event_id)

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    async def get_user_roles(
        self,
        user_id: UserId,
        scope_type: RoleScope,
        scope_id: str,
    ) -> set[str]:
        """Effective role names at one scope, including inherited event standing."""
        assignments = await self._load(user_id)
        names = {
            a.role_name
            for a in assignments
            if a.scope.type == scope_type and a.scope.id == scope_id
        }

        if scope_type == RoleScope.EVENT:
            organization_id = await self._events.get_organization_id(scope_id)
            if organization_id is not None:
                for a in assignments:
                    if a.scope.type == RoleScope.ORGANIZATION and a.scope.id == organization_id:
                        names |= ORG_ROLE_EVENT_STANDING.get(a.role_name, frozenset())

        return {str(n) for n in names}

    async def get_all_user_roles(
        self,
        user_id: UserId,
        filter: RoleAssignmentFilter | None = None,
    ) -> list[RoleAssignment]:
        """Stored assignments for a user (no inheritance applied)."""
        if filter is None:
            return list(await self._load(user_id))
        return await self._assignments.list_for_user(user_id, filter)

    async def get_roles_summary(self, user_id: UserId) -> UserRolesSummary:
        summary = UserRolesSummary()
        for a in await self._load(user_id):
            if a.scope.type == RoleScope.SYSTEM:
                summary.system.append(a.role_name)
            elif a.scope.type == RoleScope.ORGANIZATION:
                summary.organizations.setdefault(a.scope.id, []).append(a.role_name)
            else:
                summary.events.setdefault(a.scope.id, []).append(a.role_name)
        return summary

    # -------------------------------------------------------------------------
    # Levels
    # -------------------------------------------------------------------------

    @staticmethod
    def get_role_level(role_name: str) -> int:
        """Catalog level for a role name, 0 if unknown."""
        return ROLE_LEVELS.get(role_name, 0)

    async def has_minimum_level(
        self,
        user_id: UserId,
        level: int,
        scope: Scope | None = None,
    ) -> bool:
        """Highest held level (optionally restricted to one scope) is at least level."""
        assignments = await self._load(user_id)
        if scope is not None:
            assignments = [a for a in assignments if a.scope == scope or a.scope == Scope.system()]
        best = max((self.get_role_level(a.role_name) for a in assignments), default=0)
        return best >= level

    # -------------------------------------------------------------------------
    # Grants
    # -------------------------------------------------------------------------

    async def grant_role(
        self,
        user_id: UserId,
        role_name: str,
        scope: Scope,
        granted_by: UserId | None = None,
    ) -> RoleAssignment:
        """Grant a role at a scope, replacing any identical existing grant."""
        role = await self._roles.get_by_name(role_name)
        if role is None:
            raise NotFoundError(f"Role not found: {role_name}", code="role_not_found")
        if role.scope != scope.type:
            raise ValidationError(
                f"Role {role.name} can only be granted at {role.scope.value} scope",
                field="scope_type",
                code="scope_mismatch",
            )

        # Replace rather than update so granted_at reflects the latest grant
        await self._assignments.delete(user_id, role.id, scope)
        assignment = RoleAssignment.create(
            user_id=user_id,
            role_id=role.id,
            role_name=role.name,
            scope=scope,
            granted_by=granted_by,
        )
        await self._assignments.save(assignment)
        self.clear_user_cache(user_id)

        logger.info(
            "Role granted: user=%s role=%s scope=%s by=%s",
            user_id,
            role.name,
            scope,
            granted_by,
        )
        return assignment

    async def revoke_role(self, user_id: UserId, role_name: str, scope: Scope) -> None:
        role = await self._roles.get_by_name(role_name)
        if role is None:
            raise NotFoundError(f"Role not found: {role_name}", code="role_not_found")

        deleted = await self._assignments.delete(user_id, role.id, scope)
        if not deleted:
            raise NotFoundError(
                f"User does not hold {role_name} at {scope}",
                code="role_assignment_not_found",
            )
        self.clear_user_cache(user_id)
        logger.info("Role revoked: user=%s role=%s scope=%s", user_id, role_name, scope)
