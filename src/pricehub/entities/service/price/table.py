"""Price database table models."""

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from src.pricehub.entities.core._base import EntityTable, utcnow

# Partial unique indexes keep a single active row per product (and company)
_ACTIVE_PG = sa.text("is_active")
_ACTIVE_SQLITE = sa.text("is_active = 1")


class DefaultPriceTable(EntityTable, table=True):
    __table_args__ = (
        sa.Index(
            "uq_default_price_active",
            "product_id",
            unique=True,
            postgresql_where=_ACTIVE_PG,
            sqlite_where=_ACTIVE_SQLITE,
        ),
    )

    product_id: str = Field(foreign_key="producttable.id", index=True)
    price: Decimal = Field(max_digits=12, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)
    effective_from: datetime = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
    effective_until: datetime | None = Field(
        default=None,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
    is_active: bool = True


class PrivatePriceTable(EntityTable, table=True):
    __table_args__ = (
        sa.Index(
            "uq_private_price_active",
            "product_id",
            "company_id",
            unique=True,
            postgresql_where=_ACTIVE_PG,
            sqlite_where=_ACTIVE_SQLITE,
        ),
    )

    product_id: str = Field(foreign_key="producttable.id", index=True)
    company_id: str = Field(foreign_key="tenanttable.id", index=True)
    price: Decimal = Field(max_digits=12, decimal_places=2)
    discount_percentage: Decimal | None = Field(
        default=None, max_digits=5, decimal_places=2
    )
    currency: str = Field(default="USD", max_length=3)
    notes: str | None = None
    effective_from: datetime = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
    effective_until: datetime | None = Field(
        default=None,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
    is_active: bool = True


class PriceAuditLogTable(EntityTable, table=True):
    product_id: str = Field(foreign_key="producttable.id", index=True)
    user_id: str = Field(foreign_key="usertable.id", index=True)
    price_type: str = Field(max_length=20)
    action: str = Field(max_length=20)
    company_id: str | None = Field(default=None, foreign_key="tenanttable.id")
    old_price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    new_price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    currency: str | None = Field(default=None, max_length=3)


class PriceViewTable(EntityTable, table=True):
    product_id: str = Field(foreign_key="producttable.id", index=True)
    company_id: str = Field(foreign_key="tenanttable.id", index=True)
    user_id: str = Field(foreign_key="usertable.id")
    viewed_at: datetime = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
