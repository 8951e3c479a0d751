"""Unit tests for auth command and query handlers and their __auth__ gate."""

import pytest

from conducky.domain.auth.command.grant_role import GrantRole, GrantRoleHandler
from conducky.domain.auth.command.revoke_role import RevokeRole, RevokeRoleHandler
from conducky.domain.auth.model.identity import Anonymous
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.model.role import RoleName
from conducky.domain.auth.model.role_assignment import Scope
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.query.get_event_roles import GetMyEventRoles, GetMyEventRolesHandler
from conducky.domain.auth.query.get_user_roles import GetUserRoles, GetUserRolesHandler
from conducky.domain.shared.error import AuthorizationError, ValidationError


@pytest.fixture
def admin(assignments) -> Principal:
    principal = Principal(user_id=UserId.generate())
    assignments.add(principal.user_id, RoleName.SYSTEM_ADMIN, Scope.system())
    return principal


class TestGrantRoleHandler:
    @pytest.mark.asyncio
    async def test_admin_grants_legacy_named_role(self, gate, rbac, admin):
        target = UserId.generate()
        handler = GrantRoleHandler(_gate=gate, _identity=admin, _rbac=rbac)

        result = await handler.run(
            GrantRole(user_id=str(target), role="Responder", scope_type="event", scope_id="event-1")
        )

        assert result.role == "responder"
        assert result.scope_id == "event-1"
        assert result.granted_by == str(admin.user_id)
        assert await rbac.has_event_role(target, "event-1", [RoleName.RESPONDER])

    @pytest.mark.asyncio
    async def test_non_admin_denied(self, gate, rbac):
        caller = Principal(user_id=UserId.generate())
        handler = GrantRoleHandler(_gate=gate, _identity=caller, _rbac=rbac)

        with pytest.raises(AuthorizationError):
            await handler.run(
                GrantRole(user_id=str(UserId.generate()), role="SuperAdmin", scope_type="system")
            )

    @pytest.mark.asyncio
    async def test_anonymous_denied(self, gate, rbac):
        handler = GrantRoleHandler(_gate=gate, _identity=Anonymous(), _rbac=rbac)

        with pytest.raises(AuthorizationError) as exc_info:
            await handler.run(
                GrantRole(user_id=str(UserId.generate()), role="Reporter", scope_type="system")
            )
        assert exc_info.value.code == "not_authenticated"

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, gate, rbac, admin):
        handler = GrantRoleHandler(_gate=gate, _identity=admin, _rbac=rbac)

        with pytest.raises(ValidationError):
            await handler.run(
                GrantRole(user_id=str(UserId.generate()), role="Wizard", scope_type="system")
            )


class TestRevokeRoleHandler:
    @pytest.mark.asyncio
    async def test_revokes(self, gate, rbac, admin, assignments):
        target = UserId.generate()
        assignments.add(target, RoleName.REPORTER, Scope.event("event-1"))
        handler = RevokeRoleHandler(_gate=gate, _identity=admin, _rbac=rbac)

        result = await handler.run(
            RevokeRole(user_id=str(target), role="Reporter", scope_type="event", scope_id="event-1")
        )

        assert result.revoked is True
        assert [a for a in assignments.assignments if a.user_id == target] == []


class TestGetUserRolesHandler:
    @pytest.mark.asyncio
    async def test_summary(self, gate, rbac, admin, assignments):
        target = UserId.generate()
        assignments.add(target, RoleName.ORG_VIEWER, Scope.organization("org-1"))
        handler = GetUserRolesHandler(_gate=gate, _identity=admin, _rbac=rbac)

        result = await handler.run(GetUserRoles(user_id=str(target)))

        assert result.roles.organizations == {"org-1": ["org_viewer"]}


class TestGetMyEventRolesHandler:
    @pytest.mark.asyncio
    async def test_org_admin_sees_inherited_event_admin(self, gate, rbac, assignments):
        caller = Principal(user_id=UserId.generate())
        assignments.add(caller.user_id, RoleName.ORG_ADMIN, Scope.organization("org-1"))
        handler = GetMyEventRolesHandler(_gate=gate, _identity=caller, _rbac=rbac)

        result = await handler.run(GetMyEventRoles(event_id="event-1"))

        assert result.roles == ["event_admin"]
        assert result.is_system_admin is False

    @pytest.mark.asyncio
    async def test_outsider_denied(self, gate, rbac):
        caller = Principal(user_id=UserId.generate())
        handler = GetMyEventRolesHandler(_gate=gate, _identity=caller, _rbac=rbac)

        with pytest.raises(AuthorizationError):
            await handler.run(GetMyEventRoles(event_id="event-1"))
