"""DI provider for auth domain."""

import logging
from uuid import UUID

import jwt
from dishka import from_context, provide
from starlette.requests import Request

from conducky.config import Config
from conducky.domain.auth.command.grant_role import GrantRoleHandler
from conducky.domain.auth.command.revoke_role import RevokeRoleHandler
from conducky.domain.auth.model.identity import Anonymous, Identity
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.model.value import UserId
from conducky.domain.auth.port.role_repository import (
    RoleAssignmentRepository,
    RoleRepository,
)
from conducky.domain.auth.port.scope_lookup import EventLookup
from conducky.domain.auth.query.get_event_roles import GetMyEventRolesHandler
from conducky.domain.auth.query.get_user_roles import GetUserRolesHandler
from conducky.domain.auth.service.access import AccessGate
from conducky.domain.auth.service.rbac import RBACService
from conducky.domain.auth.service.token import TokenService
from conducky.util.di.base import Provider
from conducky.util.di.scope import Scope

logger = logging.getLogger(__name__)


class AuthProvider(Provider):
    """DI provider for auth domain services and handlers."""

    request = from_context(provides=Request, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_token_service(self, config: Config) -> TokenService:
        return TokenService(_config=config.auth.jwt)

    @provide(scope=Scope.UOW)
    def get_rbac_service(
        self,
        roles: RoleRepository,
        assignments: RoleAssignmentRepository,
        events: EventLookup,
    ) -> RBACService:
        return RBACService(_roles=roles, _assignments=assignments, _events=events)

    access_gate = provide(AccessGate, scope=Scope.UOW)

    # Handlers
    grant_role_handler = provide(GrantRoleHandler, scope=Scope.UOW)
    revoke_role_handler = provide(RevokeRoleHandler, scope=Scope.UOW)
    get_user_roles_handler = provide(GetUserRolesHandler, scope=Scope.UOW)
    get_my_event_roles_handler = provide(GetMyEventRolesHandler, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_identity(self, request: Request, token_service: TokenService) -> Identity:
        """Resolve the caller from the bearer token.

        Anything short of a valid token yields Anonymous; the gate turns
        that into a 401 where authentication is required.
        """
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return Anonymous()

        token = auth_header[7:]  # Remove "Bearer " prefix
        try:
            payload = token_service.validate_access_token(token)
            user_id = UserId(UUID(payload["sub"]))
        except (jwt.InvalidTokenError, KeyError, ValueError) as e:
            logger.debug("Rejected bearer token: %s", type(e).__name__)
            return Anonymous()

        return Principal(user_id=user_id)
