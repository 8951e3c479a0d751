"""Auth domain models."""

from .identity import Anonymous, Identity
from .principal import Principal
from .role import LegacyRoleName, Role, RoleId, RoleName, RoleScope
from .role_assignment import RoleAssignment, RoleAssignmentId, Scope
from .value import SYSTEM_SCOPE_ID, UserId

__all__ = [
    "Anonymous",
    "Identity",
    "LegacyRoleName",
    "Principal",
    "Role",
    "RoleAssignment",
    "RoleAssignmentId",
    "RoleId",
    "RoleName",
    "RoleScope",
    "SYSTEM_SCOPE_ID",
    "Scope",
    "UserId",
]
