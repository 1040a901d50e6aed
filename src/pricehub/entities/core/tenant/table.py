"""Tenant database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from src.pricehub.entities.core._base import EntityTable


class TenantTable(EntityTable, table=True):
    """Database persistence model for tenants."""

    name: str = Field(max_length=255)
    type: str = Field(max_length=20, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    postal_code: str | None = Field(default=None, max_length=20)
    status: str = Field(default="pending", max_length=20, index=True)
    is_active: bool = False
    approved_at: datetime | None = Field(
        default=None,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
    # Not a foreign key: users reference tenants, and the reverse would make a cycle
    approved_by_id: str | None = None
    rejection_reason: str | None = None
