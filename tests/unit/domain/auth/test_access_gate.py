"""Unit tests for AccessGate."""

import pytest

from conducky.domain.auth.model.identity import Anonymous
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.model.role import RoleName
from conducky.domain.auth.model.role_assignment import Scope
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.service.access import authenticated
from conducky.domain.shared.error import AuthorizationError, InternalError, ValidationError


def make_principal() -> Principal:
    return Principal(user_id=UserId.generate())


class TestAuthenticated:
    def test_anonymous_is_rejected(self):
        with pytest.raises(AuthorizationError) as exc_info:
            authenticated(Anonymous())
        assert exc_info.value.code == "not_authenticated"
        assert exc_info.value.message == "Not authenticated"

    def test_principal_passes(self):
        principal = make_principal()
        assert authenticated(principal) is principal


class TestRequireRole:
    @pytest.mark.asyncio
    async def test_anonymous_rejected_before_any_lookup(self, gate, assignments):
        with pytest.raises(AuthorizationError) as exc_info:
            await gate.require_role(Anonymous(), ["Event Admin"], event_id="event-1")

        assert exc_info.value.code == "not_authenticated"
        assert assignments.list_calls == 0

    @pytest.mark.asyncio
    async def test_user_without_roles_is_forbidden(self, gate):
        """A user with no grants gets the generic insufficient-role denial."""
        with pytest.raises(AuthorizationError) as exc_info:
            await gate.require_role(make_principal(), ["Event Admin"], event_id="event-1")

        assert exc_info.value.code == "forbidden"
        assert exc_info.value.message == "Forbidden: insufficient role"

    @pytest.mark.asyncio
    async def test_legacy_names_match_unified_grants(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.EVENT_ADMIN, Scope.event("event-1"))

        result = await gate.require_role(principal, ["Admin"], event_id="event-1")

        assert result is principal

    @pytest.mark.asyncio
    async def test_slug_resolves_to_event(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.RESPONDER, Scope.event("event-1"))

        assert await gate.require_role(principal, ["Responder"], slug="pycon") is principal

    @pytest.mark.asyncio
    async def test_unknown_slug_falls_back_to_global_check(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.RESPONDER, Scope.event("event-1"))

        # The responder grant is event-scoped, so the global check denies
        with pytest.raises(AuthorizationError):
            await gate.require_role(principal, ["Responder"], slug="no-such-slug")

    @pytest.mark.asyncio
    async def test_super_admin_allowed_without_scope(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.SYSTEM_ADMIN, Scope.system())

        assert await gate.require_role(principal, ["SuperAdmin"]) is principal

    @pytest.mark.asyncio
    async def test_org_admin_inherits_through_gate(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.ORG_ADMIN, Scope.organization("org-1"))

        assert await gate.require_role(principal, ["Event Admin"], event_id="event-1")

    @pytest.mark.asyncio
    async def test_lookup_failure_becomes_internal_error(self, gate, assignments):
        assignments.fail_with = RuntimeError("database unreachable")

        with pytest.raises(InternalError) as exc_info:
            await gate.require_role(make_principal(), ["Reporter"], event_id="event-1")

        assert exc_info.value.message == "Internal server error"
        assert exc_info.value.code == "internal_error"

    @pytest.mark.asyncio
    async def test_unknown_role_name_becomes_internal_error(self, gate):
        with pytest.raises(InternalError):
            await gate.require_role(make_principal(), ["Wizard"], event_id="event-1")


class TestRequireSystemAdmin:
    @pytest.mark.asyncio
    async def test_allows_system_admin(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.SYSTEM_ADMIN, Scope.system())

        assert await gate.require_system_admin(principal) is principal

    @pytest.mark.asyncio
    async def test_denies_event_admin(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.EVENT_ADMIN, Scope.event("event-1"))

        with pytest.raises(AuthorizationError) as exc_info:
            await gate.require_system_admin(principal)
        assert exc_info.value.message == "Forbidden: System Admins only"

    @pytest.mark.asyncio
    async def test_lookup_failure_becomes_internal_error(self, gate, assignments):
        assignments.fail_with = RuntimeError("boom")

        with pytest.raises(InternalError):
            await gate.require_system_admin(make_principal())


class TestRequireOrgRole:
    @pytest.mark.asyncio
    async def test_missing_org_id(self, gate):
        with pytest.raises(ValidationError) as exc_info:
            await gate.require_org_role(make_principal(), None)
        assert exc_info.value.message == "Organization ID required"
        assert exc_info.value.code == "scope_required"

    @pytest.mark.asyncio
    async def test_anonymous_checked_before_org_id(self, gate):
        with pytest.raises(AuthorizationError):
            await gate.require_org_role(Anonymous(), None)

    @pytest.mark.asyncio
    async def test_viewer_allowed_by_default(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.ORG_VIEWER, Scope.organization("org-1"))

        assert await gate.require_org_role(principal, "org-1") is principal

    @pytest.mark.asyncio
    async def test_viewer_denied_admin_only(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.ORG_VIEWER, Scope.organization("org-1"))

        with pytest.raises(AuthorizationError):
            await gate.require_org_role(principal, "org-1", [RoleName.ORG_ADMIN])


class TestRequireEventRole:
    @pytest.mark.asyncio
    async def test_missing_event_id(self, gate):
        with pytest.raises(ValidationError) as exc_info:
            await gate.require_event_role(make_principal(), None, ["Reporter"])
        assert exc_info.value.message == "Event ID required"
        assert exc_info.value.code == "scope_required"

    @pytest.mark.asyncio
    async def test_reporter_allowed(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.REPORTER, Scope.event("event-2"))

        assert await gate.require_event_role(principal, "event-2", ["Reporter"]) is principal

    @pytest.mark.asyncio
    async def test_other_event_denied(self, gate, assignments):
        principal = make_principal()
        assignments.add(principal.user_id, RoleName.REPORTER, Scope.event("event-2"))

        with pytest.raises(AuthorizationError):
            await gate.require_event_role(principal, "event-1", ["Reporter"])


class TestResolveEventScope:
    @pytest.mark.asyncio
    async def test_explicit_id_wins(self, gate):
        assert await gate.resolve_event_scope("event-9", "pycon") == "event-9"

    @pytest.mark.asyncio
    async def test_slug_lookup(self, gate):
        assert await gate.resolve_event_scope(slug="pycon") == "event-1"

    @pytest.mark.asyncio
    async def test_nothing_resolves_to_none(self, gate):
        assert await gate.resolve_event_scope() is None
        assert await gate.resolve_event_scope(slug="missing") is None
