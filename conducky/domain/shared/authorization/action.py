"""Authorization actions: event-scoped operations subject to role checks."""

from enum import StrEnum


class EventAction(StrEnum):
    """Operations performed inside an event."""

    # Incidents
    INCIDENT_CREATE = "incident:create"
    INCIDENT_READ = "incident:read"
    INCIDENT_UPDATE = "incident:update"

    # Comments
    COMMENT_CREATE = "comment:create"
    COMMENT_INTERNAL = "comment:internal"

    # Tags
    TAG_READ = "tag:read"
    TAG_MANAGE = "tag:manage"

    # Event administration
    EVENT_MANAGE = "event:manage"
    EVENT_ROLE_READ = "event_role:read"
    AUDIT_READ = "audit:read"
