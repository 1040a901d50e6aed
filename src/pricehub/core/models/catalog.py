"""Product and price models."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from ._base import ApiModel


class ProductInput(ApiModel):
    sku: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    unit: str | None = Field(default=None, max_length=50)


class ProductUpdateInput(ApiModel):
    sku: str | None = Field(default=None, min_length=1, max_length=100)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    unit: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None


class DefaultPriceInput(ApiModel):
    price: Decimal
    currency: str = "USD"
    effective_from: datetime | None = None
    effective_until: datetime | None = None


class PrivatePriceInput(ApiModel):
    company_id: str
    price: Decimal | None = None
    discount_percentage: Decimal | None = None
    currency: str = "USD"
    notes: str | None = Field(default=None, max_length=1000)
    effective_from: datetime | None = None
    effective_until: datetime | None = None


class DefaultPriceOut(ApiModel):
    id: str
    product_id: str
    price: Decimal
    currency: str
    effective_from: datetime
    effective_until: datetime | None
    is_active: bool


class PrivatePriceOut(ApiModel):
    id: str
    product_id: str
    company_id: str
    price: Decimal
    discount_percentage: Decimal | None
    currency: str
    notes: str | None
    effective_from: datetime
    effective_until: datetime | None
    is_active: bool


class EffectivePriceOut(ApiModel):
    price: Decimal
    currency: str
    price_type: str


class ProductOut(ApiModel):
    id: str
    supplier_id: str
    sku: str
    name: str
    description: str | None
    category: str | None
    unit: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SupplierProductOut(ProductOut):
    default_price: DefaultPriceOut | None = None


class CatalogProductOut(ProductOut):
    price: EffectivePriceOut | None = None


class AuditEntryOut(ApiModel):
    id: str
    product_id: str
    user_id: str
    price_type: str
    action: str
    company_id: str | None
    old_price: Decimal | None
    new_price: Decimal | None
    currency: str | None
    created_at: datetime


class PriceViewOut(ApiModel):
    id: str
    product_id: str
    company_id: str
    user_id: str
    viewed_at: datetime
