"""EventPolicySet: which event roles may perform which event action.

Single source of truth consumed by RBACService.can(); callers never
hard-code role lists for these actions.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from conducky.domain.auth.model.role import RoleName
from conducky.domain.shared.authorization.action import EventAction


@dataclass(frozen=True)
class PolicyRule:
    """Roles (checked via has_event_role) allowed to perform an action."""

    action: EventAction
    roles: frozenset[RoleName]


def allow(action: EventAction, *roles: RoleName) -> PolicyRule:
    """Convenience constructor for a policy rule."""
    return PolicyRule(action=action, roles=frozenset(roles))


class EventPolicySet:
    """Declarative action -> role-set table. Unlisted actions deny."""

    def __init__(self, rules: Iterable[PolicyRule]) -> None:
        self._by_action: dict[EventAction, frozenset[RoleName]] = {}
        for rule in rules:
            existing = self._by_action.get(rule.action, frozenset())
            self._by_action[rule.action] = existing | rule.roles

    def roles_for(self, action: EventAction) -> frozenset[RoleName]:
        return self._by_action.get(action, frozenset())

    def validate_coverage(self) -> None:
        """Startup check: every EventAction member must have at least one rule."""
        from conducky.domain.shared.error import ConfigurationError

        missing = set(EventAction) - set(self._by_action)
        if missing:
            raise ConfigurationError(f"Actions without policy rules: {sorted(missing)}")


_ADMINS = (RoleName.EVENT_ADMIN, RoleName.SYSTEM_ADMIN)
_STAFF = (RoleName.RESPONDER, *_ADMINS)
_EVERYONE = (RoleName.REPORTER, *_STAFF)

POLICY_SET = EventPolicySet(
    [
        # Anyone with standing in the event
        allow(EventAction.INCIDENT_CREATE, *_EVERYONE),
        allow(EventAction.INCIDENT_READ, *_EVERYONE),
        allow(EventAction.COMMENT_CREATE, *_EVERYONE),
        allow(EventAction.TAG_READ, *_EVERYONE),
        # Responders and admins
        allow(EventAction.INCIDENT_UPDATE, *_STAFF),
        allow(EventAction.COMMENT_INTERNAL, *_STAFF),
        allow(EventAction.TAG_MANAGE, *_STAFF),
        # Admins only
        allow(EventAction.EVENT_MANAGE, *_ADMINS),
        allow(EventAction.EVENT_ROLE_READ, *_ADMINS),
        allow(EventAction.AUDIT_READ, *_ADMINS),
    ]
)
