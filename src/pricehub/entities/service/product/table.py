"""Product database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.pricehub.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products."""

    __table_args__ = (
        sa.UniqueConstraint("supplier_id", "sku", name="uq_product_supplier_sku"),
    )

    supplier_id: str = Field(foreign_key="tenanttable.id", index=True)
    sku: str = Field(max_length=100)
    name: str = Field(max_length=255, index=True)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100, index=True)
    unit: str | None = Field(default=None, max_length=50)
    is_active: bool = True
