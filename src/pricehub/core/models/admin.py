"""Tenant and user administration models."""

from datetime import datetime

from pydantic import EmailStr, Field

from src.pricehub.entities import UserRole

from ._base import ApiModel


class ApprovalInput(ApiModel):
    approved: bool
    reason: str | None = Field(default=None, max_length=1000)


class ActiveStatusInput(ApiModel):
    is_active: bool


class SuperAdminInput(ApiModel):
    email: EmailStr
    password: str
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class StaffUserInput(ApiModel):
    email: EmailStr
    password: str
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: UserRole | None = None
    permissions: dict[str, dict[str, bool]] = Field(default_factory=dict)


class PermissionsInput(ApiModel):
    permissions: dict[str, dict[str, bool]]


class UserOut(ApiModel):
    id: str
    tenant_id: str | None
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    status: str
    is_active: bool
    permissions: dict[str, dict[str, bool]]
    last_login_at: datetime | None
    created_at: datetime


class TenantOut(ApiModel):
    id: str
    name: str
    type: str
    email: str
    phone: str | None
    address: str | None
    postal_code: str | None
    status: str
    is_active: bool
    approved_at: datetime | None
    approved_by_id: str | None
    rejection_reason: str | None
    created_at: datetime


class TenantWithUsers(TenantOut):
    users: list[UserOut] = Field(default_factory=list)


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TenantPage(ApiModel):
    tenants: list[TenantOut]
    pagination: Pagination


class Statistics(ApiModel):
    total_tenants: int
    pending_tenants: int
    active_tenants: int
    rejected_tenants: int
    total_suppliers: int
    total_companies: int
    total_users: int
    total_products: int


class PendingTenants(ApiModel):
    tenants: list[TenantWithUsers]


class TenantResult(ApiModel):
    message: str
    tenant: TenantOut


class SuperAdminResult(ApiModel):
    message: str
    super_admin: UserOut


class SuperAdminList(ApiModel):
    admins: list[UserOut]


class UserList(ApiModel):
    users: list[UserOut]


class UserResult(ApiModel):
    message: str
    user: UserOut
