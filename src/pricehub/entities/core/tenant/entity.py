"""Tenant domain entity."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from src.pricehub.entities.core._base import ApprovalStatus, Entity


class TenantType(StrEnum):
    SUPPLIER = "supplier"
    COMPANY = "company"


TenantStatus = ApprovalStatus


class Tenant(Entity):
    """An organization (supplier or company) that owns users and data.

    Tenants register in ``pending`` state and only become usable once a super
    admin approves them.
    """

    name: str = Field(description="Organization name")
    type: TenantType = Field(description="Supplier or company")
    email: str = Field(description="Organization contact email, unique")
    phone: str | None = None
    address: str | None = None
    postal_code: str | None = None
    status: TenantStatus = TenantStatus.PENDING
    is_active: bool = False
    approved_at: datetime | None = None
    approved_by_id: str | None = None
    rejection_reason: str | None = None

    @property
    def is_operational(self) -> bool:
        """Approved and not switched off."""
        return self.status == TenantStatus.ACTIVE and self.is_active
