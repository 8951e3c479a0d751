"""FastAPI dependencies that guard routes with AccessGate.

Usage:
    @router.get("/events/slug/{slug}/incidents",
                dependencies=[require_role(["Responder", "Event Admin"])])

The target scope comes from the path: ``eventId`` or ``id`` first, then
``slug`` resolved to an event id. Organization guards read ``orgId``.
"""

from collections.abc import Sequence

from fastapi import Depends, Request

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.service.access import AccessGate, authenticated
from conducky.domain.auth.service.rbac import DEFAULT_ORG_ROLES


async def _identity(request: Request) -> Identity:
    return await request.state.dishka_container.get(Identity)


async def _gate(request: Request) -> AccessGate:
    return await request.state.dishka_container.get(AccessGate)


def _event_id(request: Request) -> str | None:
    params = request.path_params
    return params.get("eventId") or params.get("id")


def require_role(allowed: Sequence[str]):
    """Allow callers holding one of ``allowed`` at the target event (or globally)."""
    allowed = tuple(allowed)

    async def dependency(request: Request) -> Principal:
        identity = await _identity(request)
        authenticated(identity)  # reject before touching the database
        gate = await _gate(request)
        return await gate.require_role(
            identity,
            allowed,
            event_id=_event_id(request),
            slug=request.path_params.get("slug"),
        )

    return Depends(dependency)


def require_system_admin():
    async def dependency(request: Request) -> Principal:
        identity = await _identity(request)
        authenticated(identity)
        gate = await _gate(request)
        return await gate.require_system_admin(identity)

    return Depends(dependency)


def require_org_role(allowed: Sequence[str] = DEFAULT_ORG_ROLES):
    allowed = tuple(allowed)

    async def dependency(request: Request) -> Principal:
        identity = await _identity(request)
        authenticated(identity)
        gate = await _gate(request)
        return await gate.require_org_role(identity, request.path_params.get("orgId"), allowed)

    return Depends(dependency)


def require_event_role(allowed: Sequence[str]):
    allowed = tuple(allowed)

    async def dependency(request: Request) -> Principal:
        identity = await _identity(request)
        authenticated(identity)
        gate = await _gate(request)
        event_id = _event_id(request)
        slug = request.path_params.get("slug")
        if event_id is None and slug:
            event_id = await gate.resolve_event_scope(slug=slug)
        return await gate.require_event_role(identity, event_id, allowed)

    return Depends(dependency)
