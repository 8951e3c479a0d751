"""RevokeRole command and handler."""

from uuid import UUID

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.role import to_unified
from conducky.domain.auth.model.role_assignment import Scope
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.service.access import AccessGate
from conducky.domain.auth.service.rbac import RBACService
from conducky.domain.shared.authorization.policy import requires_system_admin
from conducky.domain.shared.command import Command, CommandHandler, Result


class RevokeRole(Command):
    user_id: UUID
    role: str
    scope_type: str
    scope_id: str | None = None


class RevokeRoleResult(Result):
    revoked: bool


class RevokeRoleHandler(CommandHandler[RevokeRole, RevokeRoleResult]):
    __auth__ = requires_system_admin()
    _gate: AccessGate
    _identity: Identity
    _rbac: RBACService

    async def run(self, cmd: RevokeRole) -> RevokeRoleResult:
        await self._rbac.revoke_role(
            user_id=UserId(cmd.user_id),
            role_name=to_unified(cmd.role),
            scope=Scope.parse(cmd.scope_type, cmd.scope_id),
        )
        return RevokeRoleResult(revoked=True)
