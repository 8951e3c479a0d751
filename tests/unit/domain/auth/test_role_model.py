"""Unit tests for the role catalog, name mapping and Scope."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from conducky.domain.auth.model.role import (
    ROLE_CATALOG,
    ROLE_LEVELS,
    RoleName,
    RoleScope,
    to_legacy,
    to_unified,
    to_unified_all,
)
from conducky.domain.auth.model.role_assignment import Scope
from conducky.domain.shared.error import ValidationError


class TestRoleCatalog:
    def test_six_roles_with_unique_names(self):
        names = [name for name, _, _, _ in ROLE_CATALOG]
        assert len(names) == 6
        assert set(names) == set(RoleName)

    def test_levels_order_admins_above_reporters(self):
        assert ROLE_LEVELS[RoleName.SYSTEM_ADMIN] > ROLE_LEVELS[RoleName.ORG_ADMIN]
        assert ROLE_LEVELS[RoleName.EVENT_ADMIN] > ROLE_LEVELS[RoleName.RESPONDER]
        assert ROLE_LEVELS[RoleName.RESPONDER] > ROLE_LEVELS[RoleName.REPORTER]


class TestNameMapping:
    @pytest.mark.parametrize(
        "legacy, unified",
        [
            ("SuperAdmin", RoleName.SYSTEM_ADMIN),
            ("Event Admin", RoleName.EVENT_ADMIN),
            ("Admin", RoleName.EVENT_ADMIN),
            ("Responder", RoleName.RESPONDER),
            ("Reporter", RoleName.REPORTER),
        ],
    )
    def test_legacy_to_unified(self, legacy, unified):
        assert to_unified(legacy) == unified

    def test_unified_names_map_to_themselves(self):
        for name in RoleName:
            assert to_unified(name.value) == name

    def test_to_legacy_prefers_event_admin_spelling(self):
        assert to_legacy(RoleName.EVENT_ADMIN) == "Event Admin"
        assert to_legacy(RoleName.SYSTEM_ADMIN) == "SuperAdmin"

    def test_org_roles_have_no_legacy_form(self):
        assert to_legacy(RoleName.ORG_ADMIN) == "org_admin"

    def test_matching_is_case_sensitive(self):
        with pytest.raises(ValidationError) as exc_info:
            to_unified("superadmin")
        assert exc_info.value.code == "unknown_role"

    def test_to_unified_all_collapses_aliases(self):
        assert to_unified_all(["Admin", "Event Admin", "event_admin"]) == {RoleName.EVENT_ADMIN}


class TestScope:
    def test_system_scope_uses_sentinel_id(self):
        assert Scope.system().id == "SYSTEM"
        assert str(Scope.system()) == "system:SYSTEM"

    def test_system_scope_rejects_other_ids(self):
        with pytest.raises(PydanticValidationError):
            Scope(type=RoleScope.SYSTEM, id="org-1")

    def test_empty_id_rejected(self):
        with pytest.raises(PydanticValidationError):
            Scope(type=RoleScope.EVENT, id="")

    def test_parse(self):
        assert Scope.parse("event", "event-1") == Scope.event("event-1")
        assert Scope.parse("system", None) == Scope.system()

    def test_parse_unknown_type(self):
        with pytest.raises(ValidationError):
            Scope.parse("galaxy", "x")

    def test_parse_requires_id_for_scoped_types(self):
        with pytest.raises(ValidationError):
            Scope.parse("organization", None)
