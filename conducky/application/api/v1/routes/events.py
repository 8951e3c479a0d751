"""Event-scoped access routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from conducky.application.api.v1.guards import require_role
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.query.get_event_roles import (
    EventRolesResult,
    GetMyEventRoles,
    GetMyEventRolesHandler,
)
from conducky.domain.auth.service.access import AccessGate
from conducky.domain.auth.service.rbac import RBACService
from conducky.domain.shared.authorization.action import EventAction

router = APIRouter(prefix="/events", tags=["Events"], route_class=DishkaRoute)

EVENT_MEMBERS = ["Reporter", "Responder", "Event Admin", "SuperAdmin"]


class EventAccessResponse(BaseModel):
    event_id: str | None
    user_id: str


class EventPermissionsResponse(BaseModel):
    event_id: str
    permissions: dict[str, bool]


@router.get("/{eventId}/roles/me", response_model=EventRolesResult)
async def my_event_roles(
    eventId: str,
    handler: FromDishka[GetMyEventRolesHandler],
) -> EventRolesResult:
    """The caller's effective roles in the event, inherited ones included."""
    return await handler.run(GetMyEventRoles(event_id=eventId))


@router.get("/{eventId}/permissions", response_model=EventPermissionsResponse)
async def my_event_permissions(
    eventId: str,
    rbac: FromDishka[RBACService],
    principal: Principal = require_role(EVENT_MEMBERS),
) -> EventPermissionsResponse:
    """Which event actions the caller may perform."""
    permissions = {
        action.value: await rbac.can(principal.user_id, action, eventId) for action in EventAction
    }
    return EventPermissionsResponse(event_id=eventId, permissions=permissions)


@router.get("/slug/{slug}/access", response_model=EventAccessResponse)
async def event_access_by_slug(
    slug: str,
    gate: FromDishka[AccessGate],
    principal: Principal = require_role(EVENT_MEMBERS),
) -> EventAccessResponse:
    """Confirms the caller may enter the event named by slug."""
    event_id = await gate.resolve_event_scope(slug=slug)
    return EventAccessResponse(event_id=event_id, user_id=str(principal.user_id))
