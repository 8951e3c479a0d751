"""Organization-scoped access routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from conducky.application.api.v1.guards import require_org_role
from conducky.domain.auth.model.principal import Principal
from conducky.domain.auth.model.role import RoleName

router = APIRouter(prefix="/organizations", tags=["Organizations"])


class OrganizationAccessResponse(BaseModel):
    organization_id: str
    user_id: str


@router.get("/{orgId}/access", response_model=OrganizationAccessResponse)
async def organization_access(
    orgId: str,
    principal: Principal = require_org_role(),
) -> OrganizationAccessResponse:
    return OrganizationAccessResponse(organization_id=orgId, user_id=str(principal.user_id))


@router.get("/{orgId}/admin-access", response_model=OrganizationAccessResponse)
async def organization_admin_access(
    orgId: str,
    principal: Principal = require_org_role([RoleName.ORG_ADMIN]),
) -> OrganizationAccessResponse:
    return OrganizationAccessResponse(organization_id=orgId, user_id=str(principal.user_id))
