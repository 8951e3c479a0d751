"""Admin routes for role management and system settings."""

from typing import Any
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response
from pydantic import BaseModel

from conducky.application.api.v1.guards import require_system_admin
from conducky.domain.auth.command.grant_role import (
    GrantRole,
    GrantRoleHandler,
    RoleAssignmentResult,
)
from conducky.domain.auth.command.revoke_role import RevokeRole, RevokeRoleHandler
from conducky.domain.auth.query.get_user_roles import (
    GetUserRoles,
    GetUserRolesHandler,
    GetUserRolesResult,
)
from conducky.domain.settings.service.settings import SettingsService

router = APIRouter(prefix="/admin", tags=["Admin"], route_class=DishkaRoute)


class RoleGrantRequest(BaseModel):
    """Role (legacy or unified name) and the scope to grant it at."""

    role: str
    scope_type: str
    scope_id: str | None = None


@router.get("/users/{user_id}/roles", response_model=GetUserRolesResult)
async def list_user_roles(
    user_id: UUID,
    handler: FromDishka[GetUserRolesHandler],
) -> GetUserRolesResult:
    """Roles held by a user, grouped by scope. Requires system admin."""
    return await handler.run(GetUserRoles(user_id=user_id))


@router.post("/users/{user_id}/roles", response_model=RoleAssignmentResult, status_code=201)
async def grant_role(
    user_id: UUID,
    body: RoleGrantRequest,
    handler: FromDishka[GrantRoleHandler],
) -> RoleAssignmentResult:
    """Grant a role at a scope, replacing an identical existing grant. Requires system admin."""
    return await handler.run(
        GrantRole(
            user_id=user_id,
            role=body.role,
            scope_type=body.scope_type,
            scope_id=body.scope_id,
        )
    )


@router.delete("/users/{user_id}/roles", status_code=204)
async def revoke_role(
    user_id: UUID,
    role: str,
    scope_type: str,
    handler: FromDishka[RevokeRoleHandler],
    scope_id: str | None = None,
) -> Response:
    """Revoke a role at a scope. Requires system admin."""
    await handler.run(
        RevokeRole(user_id=user_id, role=role, scope_type=scope_type, scope_id=scope_id)
    )
    return Response(status_code=204)


@router.get("/settings/{key}", dependencies=[require_system_admin()])
async def get_setting(key: str, service: FromDishka[SettingsService]) -> dict[str, Any]:
    """A settings section with secrets decrypted."""
    return await service.get_section(key)


@router.put("/settings/{key}", status_code=204, dependencies=[require_system_admin()])
async def put_setting(
    key: str,
    body: dict[str, Any],
    service: FromDishka[SettingsService],
) -> Response:
    """Store a settings section; secret sub-fields are encrypted."""
    await service.save_section(key, body)
    return Response(status_code=204)
