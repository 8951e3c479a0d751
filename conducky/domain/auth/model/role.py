"""Role catalog: scope-tagged role definitions and the legacy name mapping."""

from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import RootModel

from conducky.domain.shared.error import ValidationError
from conducky.domain.shared.model.entity import Entity


class RoleScope(StrEnum):
    """Kind of scope a role can be granted at."""

    SYSTEM = "system"
    ORGANIZATION = "organization"
    EVENT = "event"


class RoleName(StrEnum):
    """Unified role names. Matching is exact and case-sensitive."""

    SYSTEM_ADMIN = "system_admin"
    ORG_ADMIN = "org_admin"
    ORG_VIEWER = "org_viewer"
    EVENT_ADMIN = "event_admin"
    RESPONDER = "responder"
    REPORTER = "reporter"


class LegacyRoleName(StrEnum):
    """Human-readable role names still used by route declarations."""

    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    EVENT_ADMIN = "Event Admin"
    RESPONDER = "Responder"
    REPORTER = "Reporter"


class RoleId(RootModel[UUID]):
    """Unique identifier for a Role."""

    @classmethod
    def generate(cls) -> "RoleId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class Role(Entity):
    """A named capability bucket, grantable at exactly one kind of scope.

    ``level`` orders roles for display and coarse comparisons only.
    """

    id: RoleId
    name: str
    scope: RoleScope
    level: int
    description: str = ""

    @classmethod
    def create(
        cls, name: str, scope: RoleScope, level: int, description: str = ""
    ) -> "Role":
        return cls(
            id=RoleId.generate(),
            name=name,
            scope=scope,
            level=level,
            description=description,
        )


# (name, scope, level, description)
ROLE_CATALOG: tuple[tuple[RoleName, RoleScope, int, str], ...] = (
    (RoleName.SYSTEM_ADMIN, RoleScope.SYSTEM, 100, "System administrator with global access"),
    (RoleName.ORG_ADMIN, RoleScope.ORGANIZATION, 50, "Organization administrator"),
    (RoleName.ORG_VIEWER, RoleScope.ORGANIZATION, 10, "Organization viewer"),
    (RoleName.EVENT_ADMIN, RoleScope.EVENT, 40, "Event administrator"),
    (RoleName.RESPONDER, RoleScope.EVENT, 20, "Incident responder"),
    (RoleName.REPORTER, RoleScope.EVENT, 5, "Incident reporter"),
)

ROLE_LEVELS: dict[str, int] = {name: level for name, _, level, _ in ROLE_CATALOG}
ROLE_SCOPES: dict[str, RoleScope] = {name: scope for name, scope, _, _ in ROLE_CATALOG}


# Single source of truth for legacy <-> unified names. The first legacy
# entry for a unified role is its canonical reverse mapping.
_LEGACY_TO_UNIFIED: dict[LegacyRoleName, RoleName] = {
    LegacyRoleName.SUPER_ADMIN: RoleName.SYSTEM_ADMIN,
    LegacyRoleName.EVENT_ADMIN: RoleName.EVENT_ADMIN,
    LegacyRoleName.ADMIN: RoleName.EVENT_ADMIN,
    LegacyRoleName.RESPONDER: RoleName.RESPONDER,
    LegacyRoleName.REPORTER: RoleName.REPORTER,
}

_UNIFIED_TO_LEGACY: dict[RoleName, LegacyRoleName] = {}
for _legacy, _unified in _LEGACY_TO_UNIFIED.items():
    _UNIFIED_TO_LEGACY.setdefault(_unified, _legacy)


def to_unified(name: str) -> RoleName:
    """Map a legacy or unified role name to its unified catalog name.

    Raises:
        ValidationError: If the name is neither a legacy nor a unified role.
    """
    if name in RoleName._value2member_map_:
        return RoleName(name)
    if name in LegacyRoleName._value2member_map_:
        return _LEGACY_TO_UNIFIED[LegacyRoleName(name)]
    raise ValidationError(f"Unknown role: {name}", field="role", code="unknown_role")


def to_legacy(role: RoleName | str) -> str:
    """Map a unified role name to the legacy display name.

    Organization roles have no legacy form and map to themselves.
    """
    unified = to_unified(role)
    legacy = _UNIFIED_TO_LEGACY.get(unified)
    return legacy.value if legacy is not None else unified.value


def to_unified_all(names: "list[str] | tuple[str, ...]") -> frozenset[RoleName]:
    """Map a list of role names, preserving nothing but membership."""
    return frozenset(to_unified(n) for n in names)
