"""GrantRole command and handler."""

from datetime import datetime
from uuid import UUID

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.model.role import to_unified
from conducky.domain.auth.model.role_assignment import Scope
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.service.access import AccessGate
from conducky.domain.auth.service.rbac import RBACService
from conducky.domain.shared.authorization.policy import requires_system_admin
from conducky.domain.shared.command import Command, CommandHandler, Result


class GrantRole(Command):
    """Grant a role (legacy or unified name) to a user at a scope."""

    user_id: UUID
    role: str
    scope_type: str
    scope_id: str | None = None


class RoleAssignmentResult(Result):
    id: str
    user_id: str
    role: str
    scope_type: str
    scope_id: str
    granted_by: str | None
    granted_at: datetime


class GrantRoleHandler(CommandHandler[GrantRole, RoleAssignmentResult]):
    __auth__ = requires_system_admin()
    _gate: AccessGate
    _identity: Identity
    _rbac: RBACService

    async def run(self, cmd: GrantRole) -> RoleAssignmentResult:
        granted_by = self._identity.user_id if isinstance(self._identity, Principal) else None
        assignment = await self._rbac.grant_role(
            user_id=UserId(cmd.user_id),
            role_name=to_unified(cmd.role),
            scope=Scope.parse(cmd.scope_type, cmd.scope_id),
            granted_by=granted_by,
        )
        return RoleAssignmentResult(
            id=str(assignment.id),
            user_id=str(assignment.user_id),
            role=assignment.role_name,
            scope_type=assignment.scope.type.value,
            scope_id=assignment.scope.id,
            granted_by=str(assignment.granted_by) if assignment.granted_by else None,
            granted_at=assignment.granted_at,
        )
