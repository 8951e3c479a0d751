"""Auth domain commands."""

from .grant_role import GrantRole, GrantRoleHandler, RoleAssignmentResult
from .revoke_role import RevokeRole, RevokeRoleHandler, RevokeRoleResult

__all__ = [
    "GrantRole",
    "GrantRoleHandler",
    "RevokeRole",
    "RevokeRoleHandler",
    "RevokeRoleResult",
    "RoleAssignmentResult",
]
