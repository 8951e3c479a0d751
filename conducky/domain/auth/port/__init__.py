"""Auth domain ports."""

from .role_repository import (
    RoleAssignmentFilter,
    RoleAssignmentRepository,
    RoleRepository,
)
from .scope_lookup import EventLookup

__all__ = [
    "EventLookup",
    "RoleAssignmentFilter",
    "RoleAssignmentRepository",
    "RoleRepository",
]
