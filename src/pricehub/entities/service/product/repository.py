"""Product repository."""

from sqlalchemy import func
from sqlmodel import Session, col, or_, select

from src.pricehub.entities.core._base import utcnow
from src.pricehub.entities.core.tenant.table import TenantTable

from .entity import Product
from .table import ProductTable


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, product_id: str) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def get_for_supplier(self, product_id: str, supplier_id: str) -> Product | None:
        statement = select(ProductTable).where(
            (ProductTable.id == product_id) & (ProductTable.supplier_id == supplier_id)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def get_by_sku(self, supplier_id: str, sku: str) -> Product | None:
        statement = select(ProductTable).where(
            (ProductTable.supplier_id == supplier_id) & (ProductTable.sku == sku)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def create(self, product: Product) -> Product:
        row = ProductTable(**product.model_dump())
        self._session.add(row)
        self._session.flush()
        return product

    def update(self, product: Product) -> Product:
        row = self._session.get(ProductTable, product.id)
        if row is None:
            raise ValueError(f"Product with id {product.id} not found")

        for key, value in product.model_dump(exclude={"id", "created_at"}).items():
            setattr(row, key, value)
        row.updated_at = utcnow()

        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row, from_attributes=True)

    def list_for_supplier(self, supplier_id: str, include_inactive: bool = True) -> list[Product]:
        statement = select(ProductTable).where(ProductTable.supplier_id == supplier_id)
        if not include_inactive:
            statement = statement.where(col(ProductTable.is_active))
        statement = statement.order_by(col(ProductTable.name).asc())
        rows = self._session.exec(statement).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def get_visible(self, product_id: str) -> Product | None:
        """An active product of an approved, active supplier."""
        statement = (
            select(ProductTable)
            .join(TenantTable, col(TenantTable.id) == col(ProductTable.supplier_id))
            .where(
                (ProductTable.id == product_id)
                & col(ProductTable.is_active)
                & (TenantTable.status == "active")
                & col(TenantTable.is_active)
            )
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def list_visible(
        self, category: str | None = None, search: str | None = None
    ) -> list[Product]:
        """Active products of approved, active suppliers."""
        statement = (
            select(ProductTable)
            .join(TenantTable, col(TenantTable.id) == col(ProductTable.supplier_id))
            .where(
                col(ProductTable.is_active)
                & (TenantTable.status == "active")
                & col(TenantTable.is_active)
            )
        )
        if category:
            statement = statement.where(ProductTable.category == category)
        if search:
            pattern = f"%{search.lower()}%"
            statement = statement.where(
                or_(
                    func.lower(ProductTable.name).like(pattern),
                    func.lower(ProductTable.sku).like(pattern),
                    func.lower(col(ProductTable.description)).like(pattern),
                )
            )
        statement = statement.order_by(col(ProductTable.name).asc())
        rows = self._session.exec(statement).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(ProductTable)).one()
