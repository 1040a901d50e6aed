"""Entity: Product."""

from pydantic import Field

from src.pricehub.entities.core._base import Entity


class Product(Entity):
    """A supplier's catalogue item.

    ``sku`` is unique per supplier. Deleting a product only clears ``is_active``.
    """

    supplier_id: str = Field(description="Owning supplier tenant")
    sku: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    unit: str | None = Field(default=None, max_length=50)
    is_active: bool = True
