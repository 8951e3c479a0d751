"""AccessGate: request-time allow/deny on top of RBACService.

Every check authenticates first, so an anonymous caller is rejected
before any role lookup happens. Denials are AuthorizationError; any other
failure while deciding becomes InternalError and never an allow.
"""

import logging
from collections.abc import Sequence

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.model.role import RoleName, RoleScope, to_unified_all
from conducky.domain.auth.port.scope_lookup import EventLookup
from conducky.domain.auth.service.rbac import DEFAULT_ORG_ROLES, RBACService
from conducky.domain.shared.error import AuthorizationError, InternalError, ValidationError
from conducky.domain.shared.service import Service

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"
INSUFFICIENT_ROLE = "Forbidden: insufficient role"
SYSTEM_ADMINS_ONLY = "Forbidden: System Admins only"
INTERNAL_ERROR = "Internal server error"


def authenticated(identity: Identity) -> Principal:
    """Return the Principal or raise the 401-class AuthorizationError."""
    if isinstance(identity, Principal):
        return identity
    raise AuthorizationError(NOT_AUTHENTICATED, code="not_authenticated")


def _forbidden(message: str = INSUFFICIENT_ROLE) -> AuthorizationError:
    return AuthorizationError(message, code="forbidden")


class AccessGate(Service):
    _rbac: RBACService
    _events: EventLookup

    async def resolve_event_scope(
        self, event_id: str | None = None, slug: str | None = None
    ) -> str | None:
        """Explicit id wins; otherwise a slug lookup. Unresolvable slug means no scope."""
        if event_id:
            return event_id
        if slug:
            resolved = await self._events.get_event_id_by_slug(slug)
            if resolved is None:
                logger.debug("Slug %r did not resolve, falling back to global check", slug)
            return resolved
        return None

    async def require_role(
        self,
        identity: Identity,
        allowed: Sequence[str],
        *,
        event_id: str | None = None,
        slug: str | None = None,
    ) -> Principal:
        """Allow if the caller holds one of ``allowed`` (legacy or unified names).

        Scoped to the event when one resolves, otherwise a system-scope check.
        """
        principal = authenticated(identity)
        user_id = principal.user_id

        try:
            role_names = to_unified_all(allowed)
            scope_id = await self.resolve_event_scope(event_id, slug)

            if RoleName.SYSTEM_ADMIN in role_names and await self._rbac.is_system_admin(user_id):
                logger.debug("require_role: system admin bypass user=%s", user_id)
                return principal

            if scope_id is not None:
                ok = await self._rbac.has_event_role(user_id, scope_id, role_names)
            else:
                ok = await self._rbac.has_role(user_id, role_names, RoleScope.SYSTEM)
        except Exception as e:
            logger.exception("require_role failed for user=%s allowed=%s", user_id, list(allowed))
            raise InternalError(INTERNAL_ERROR, code="internal_error") from e

        if not ok:
            logger.warning(
                "Access denied: user=%s allowed=%s event=%s slug=%s",
                user_id,
                list(allowed),
                event_id,
                slug,
            )
            raise _forbidden()
        return principal

    async def require_system_admin(self, identity: Identity) -> Principal:
        principal = authenticated(identity)
        try:
            ok = await self._rbac.is_system_admin(principal.user_id)
        except Exception as e:
            logger.exception("require_system_admin failed for user=%s", principal.user_id)
            raise InternalError(INTERNAL_ERROR, code="internal_error") from e

        if not ok:
            logger.warning("Access denied (system admin required): user=%s", principal.user_id)
            raise _forbidden(SYSTEM_ADMINS_ONLY)
        return principal

    async def require_org_role(
        self,
        identity: Identity,
        organization_id: str | None,
        allowed: Sequence[str] = DEFAULT_ORG_ROLES,
    ) -> Principal:
        principal = authenticated(identity)
        if not organization_id:
            raise ValidationError(
                "Organization ID required", field="organization_id", code="scope_required"
            )
        try:
            ok = await self._rbac.has_org_role(
                principal.user_id, organization_id, to_unified_all(allowed)
            )
        except Exception as e:
            logger.exception("require_org_role failed for user=%s", principal.user_id)
            raise InternalError(INTERNAL_ERROR, code="internal_error") from e

        if not ok:
            logger.warning(
                "Access denied: user=%s organization=%s allowed=%s",
                principal.user_id,
                organization_id,
                list(allowed),
            )
            raise _forbidden()
        return principal

    async def require_event_role(
        self,
        identity: Identity,
        event_id: str | None,
        allowed: Sequence[str],
    ) -> Principal:
        """Like require_role, but an event id is mandatory (no global fallback)."""
        principal = authenticated(identity)
        if not event_id:
            raise ValidationError("Event ID required", field="event_id", code="scope_required")
        try:
            ok = await self._rbac.has_event_role(
                principal.user_id, event_id, to_unified_all(allowed)
            )
        except Exception as e:
            logger.exception("require_event_role failed for user=%s", principal.user_id)
            raise InternalError(INTERNAL_ERROR, code="internal_error") from e

        if not ok:
            logger.warning(
                "Access denied: user=%s event=%s allowed=%s",
                principal.user_id,
                event_id,
                list(allowed),
            )
            raise _forbidden()
        return principal
