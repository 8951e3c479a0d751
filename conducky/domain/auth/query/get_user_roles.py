"""GetUserRoles query: a user's grants grouped by scope (system admins only)."""

from uuid import UUID

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.service.access import AccessGate
from conducky.domain.auth.service.rbac import RBACService, UserRolesSummary
from conducky.domain.shared.authorization.policy import requires_system_admin
from conducky.domain.shared.query import Query, QueryHandler
from conducky.domain.shared.query import Result as QueryResult


class GetUserRoles(Query):
    user_id: UUID


class GetUserRolesResult(QueryResult):
    user_id: str
    roles: UserRolesSummary


class GetUserRolesHandler(QueryHandler[GetUserRoles, GetUserRolesResult]):
    __auth__ = requires_system_admin()
    _gate: AccessGate
    _identity: Identity
    _rbac: RBACService

    async def run(self, cmd: GetUserRoles) -> GetUserRolesResult:
        summary = await self._rbac.get_roles_summary(UserId(cmd.user_id))
        return GetUserRolesResult(user_id=str(cmd.user_id), roles=summary)
