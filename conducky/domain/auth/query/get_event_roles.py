"""GetMyEventRoles query: the caller's effective roles in one event."""

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.role import LegacyRoleName, RoleScope
from conducky.domain.auth.service.access import AccessGate, authenticated
from conducky.domain.auth.service.rbac import RBACService
from conducky.domain.shared.authorization.policy import requires_event_role
from conducky.domain.shared.query import Query, QueryHandler
from conducky.domain.shared.query import Result as QueryResult


class GetMyEventRoles(Query):
    event_id: str


class EventRolesResult(QueryResult):
    event_id: str
    roles: list[str]
    is_system_admin: bool


class GetMyEventRolesHandler(QueryHandler[GetMyEventRoles, EventRolesResult]):
    __auth__ = requires_event_role(
        LegacyRoleName.REPORTER,
        LegacyRoleName.RESPONDER,
        LegacyRoleName.EVENT_ADMIN,
        LegacyRoleName.SUPER_ADMIN,
    )
    _gate: AccessGate
    _identity: Identity
    _rbac: RBACService

    async def run(self, cmd: GetMyEventRoles) -> EventRolesResult:
        user_id = authenticated(self._identity).user_id
        roles = await self._rbac.get_user_roles(user_id, RoleScope.EVENT, cmd.event_id)
        return EventRolesResult(
            event_id=cmd.event_id,
            roles=sorted(roles),
            is_system_admin=await self._rbac.is_system_admin(user_id),
        )
