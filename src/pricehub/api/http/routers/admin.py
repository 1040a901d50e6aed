"""Super admin endpoints: tenant approval and platform administration."""

from fastapi import APIRouter, Depends, Query, status

from src.pricehub.api.http.deps import (
    authenticate,
    get_tenant_admin_service,
    require_super_admin,
)
from src.pricehub.core.models.admin import (
    ActiveStatusInput,
    ApprovalInput,
    PendingTenants,
    Statistics,
    SuperAdminInput,
    SuperAdminList,
    SuperAdminResult,
    TenantPage,
    TenantResult,
)
from src.pricehub.core.models.claims import AuthContext
from src.pricehub.core.services import TenantAdminService
from src.pricehub.entities import TenantStatus, TenantType

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(authenticate), Depends(require_super_admin())],
)


@router.get("/tenants/pending", response_model=PendingTenants)
def list_pending_tenants(
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> PendingTenants:
    return PendingTenants(tenants=service.list_pending_tenants())


@router.get("/tenants", response_model=TenantPage)
def list_tenants(
    tenant_status: TenantStatus | None = Query(default=None, alias="status"),
    tenant_type: TenantType | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> TenantPage:
    return service.list_tenants(
        status=tenant_status, tenant_type=tenant_type, page=page, limit=limit
    )


@router.post("/tenants/{tenant_id}/approve", response_model=TenantResult)
def approve_tenant(
    tenant_id: str,
    data: ApprovalInput,
    caller: AuthContext = Depends(authenticate),
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> TenantResult:
    tenant = service.approve_tenant(
        tenant_id, data.approved, approver_id=caller.user_id, reason=data.reason
    )
    message = "Tenant approved successfully" if data.approved else "Tenant rejected"
    return TenantResult(message=message, tenant=tenant)


@router.put("/tenants/{tenant_id}/toggle-status", response_model=TenantResult)
def toggle_tenant_status(
    tenant_id: str,
    data: ActiveStatusInput,
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> TenantResult:
    tenant = service.set_tenant_active(tenant_id, data.is_active)
    state = "activated" if data.is_active else "deactivated"
    return TenantResult(message=f"Tenant {state} successfully", tenant=tenant)


@router.post(
    "/super-admins",
    response_model=SuperAdminResult,
    status_code=status.HTTP_201_CREATED,
)
def create_super_admin(
    data: SuperAdminInput,
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> SuperAdminResult:
    admin = service.create_super_admin(data)
    return SuperAdminResult(message="Super admin created successfully", super_admin=admin)


@router.get("/super-admins", response_model=SuperAdminList)
def list_super_admins(
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> SuperAdminList:
    return SuperAdminList(admins=service.list_super_admins())


@router.get("/statistics", response_model=Statistics)
def statistics(
    service: TenantAdminService = Depends(get_tenant_admin_service),
) -> Statistics:
    return service.statistics()
