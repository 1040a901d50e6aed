"""Entities: default and private prices, audit trail and price views."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import Field

from src.pricehub.entities.core._base import Entity, utcnow


class PriceType(StrEnum):
    DEFAULT = "default"
    PRIVATE = "private"


class AuditAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class DefaultPrice(Entity):
    """List price of a product, visible to every company."""

    product_id: str
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    effective_from: datetime = Field(default_factory=utcnow)
    effective_until: datetime | None = None
    is_active: bool = True


class PrivatePrice(Entity):
    """Negotiated price of a product for one company."""

    product_id: str
    company_id: str
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    discount_percentage: Decimal | None = Field(
        default=None, ge=0, le=100, max_digits=5, decimal_places=2
    )
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    notes: str | None = None
    effective_from: datetime = Field(default_factory=utcnow)
    effective_until: datetime | None = None
    is_active: bool = True


class PriceAuditLog(Entity):
    product_id: str
    user_id: str
    price_type: PriceType
    action: AuditAction
    company_id: str | None = None
    old_price: Decimal | None = None
    new_price: Decimal | None = None
    currency: str | None = None


class PriceView(Entity):
    product_id: str
    company_id: str
    user_id: str
    viewed_at: datetime = Field(default_factory=utcnow)
