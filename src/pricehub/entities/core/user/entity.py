"""User domain entity."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from src.pricehub.entities.core._base import ApprovalStatus, Entity


class UserRole(StrEnum):
    SUPER_ADMIN = "super_admin"
    SUPPLIER_ADMIN = "supplier_admin"
    SUPPLIER_STAFF = "supplier_staff"
    COMPANY_ADMIN = "company_admin"
    COMPANY_STAFF = "company_staff"

    @property
    def tenant_type(self) -> str:
        """Tenant type the role belongs to (``system`` for super admins)."""
        if self is UserRole.SUPER_ADMIN:
            return "system"
        return self.value.split("_", 1)[0]

    @property
    def is_admin(self) -> bool:
        return self.value.endswith("admin")


UserStatus = ApprovalStatus

# {"products": {"create": True, "update": False}, "prices": {...}}
Permissions = dict[str, dict[str, bool]]


class User(Entity):
    """A person able to sign in.

    Super admins have no tenant; everybody else belongs to exactly one.
    """

    tenant_id: str | None = Field(default=None, description="Owning tenant")
    email: str = Field(description="Login email, unique")
    password_hash: str = Field(description="bcrypt hash of the password")
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole
    status: UserStatus = UserStatus.PENDING
    is_active: bool = False
    permissions: Permissions = Field(default_factory=dict)
    last_login_at: datetime | None = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_operational(self) -> bool:
        return self.status == UserStatus.ACTIVE and self.is_active

    def has_permission(self, resource: str, action: str) -> bool:
        return self.permissions.get(resource, {}).get(action) is True
