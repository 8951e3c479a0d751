"""Auth domain queries."""

from .get_event_roles import EventRolesResult, GetMyEventRoles, GetMyEventRolesHandler
from .get_user_roles import GetUserRoles, GetUserRolesHandler, GetUserRolesResult

__all__ = [
    "EventRolesResult",
    "GetMyEventRoles",
    "GetMyEventRolesHandler",
    "GetUserRoles",
    "GetUserRolesHandler",
    "GetUserRolesResult",
]
