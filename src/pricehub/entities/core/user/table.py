"""User database table model."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Column, Field

from src.pricehub.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users."""

    tenant_id: str | None = Field(
        default=None, foreign_key="tenanttable.id", index=True, nullable=True
    )
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: str = Field(max_length=32, index=True)
    status: str = Field(default="pending", max_length=20, index=True)
    is_active: bool = False
    permissions: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(sa.JSON, nullable=False)
    )
    last_login_at: datetime | None = Field(
        default=None,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
