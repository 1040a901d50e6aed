from fastapi import HTTPException
from loguru import logger
from sqlmodel import Session

from src.pricehub.core.models.catalog import (
    CatalogProductOut,
    DefaultPriceOut,
    EffectivePriceOut,
    ProductInput,
    ProductOut,
    ProductUpdateInput,
    SupplierProductOut,
)
from src.pricehub.core.models.claims import AuthContext
from src.pricehub.core.services.pricing.calculations import resolve_effective_price
from src.pricehub.entities import (
    DefaultPrice,
    DefaultPriceRepository,
    PriceView,
    PriceViewRepository,
    PrivatePrice,
    PrivatePriceRepository,
    Product,
    ProductRepository,
)

_NULLABLE_PRODUCT_FIELDS = {"description", "category", "unit"}


class ProductService:
    """Supplier catalogue management and the company-facing catalogue."""

    def __init__(self, db_session: Session, caller: AuthContext):
        self._db_session = db_session
        self._caller = caller
        self._product_repo = ProductRepository(db_session)
        self._default_repo = DefaultPriceRepository(db_session)
        self._private_repo = PrivatePriceRepository(db_session)
        self._view_repo = PriceViewRepository(db_session)

    @property
    def _tenant_id(self) -> str:
        if self._caller.tenant_id is None:
            raise HTTPException(status_code=400, detail="A tenant account is required")
        return self._caller.tenant_id

    def get_owned_product(self, product_id: str) -> Product:
        """A product of the calling supplier; other suppliers' products are 404."""
        product = self._product_repo.get_for_supplier(product_id, self._tenant_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    # Supplier side

    def create_product(self, data: ProductInput) -> ProductOut:
        supplier_id = self._tenant_id
        if self._product_repo.get_by_sku(supplier_id, data.sku):
            raise HTTPException(
                status_code=409, detail=f"A product with SKU {data.sku} already exists"
            )

        product = Product(supplier_id=supplier_id, **data.model_dump())
        try:
            self._product_repo.create(product)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        logger.info("Supplier {} created product {}", supplier_id, product.id)
        return ProductOut.model_validate(product)

    def list_supplier_products(self) -> list[SupplierProductOut]:
        products = self._product_repo.list_for_supplier(self._tenant_id)
        prices = self._default_repo.get_active_for_products([p.id for p in products])
        result = []
        for product in products:
            default_price = prices.get(product.id)
            result.append(
                SupplierProductOut(
                    **ProductOut.model_validate(product).model_dump(),
                    default_price=(
                        DefaultPriceOut.model_validate(default_price)
                        if default_price
                        else None
                    ),
                )
            )
        return result

    def update_product(self, product_id: str, data: ProductUpdateInput) -> ProductOut:
        product = self.get_owned_product(product_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE_PRODUCT_FIELDS
        }

        new_sku = changes.get("sku")
        if new_sku and new_sku != product.sku:
            if self._product_repo.get_by_sku(product.supplier_id, new_sku):
                raise HTTPException(
                    status_code=409, detail=f"A product with SKU {new_sku} already exists"
                )

        updated = product.model_copy(update=changes)
        try:
            saved = self._product_repo.update(updated)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        return ProductOut.model_validate(saved)

    def delete_product(self, product_id: str) -> None:
        """Soft delete: the product disappears from the catalogue but keeps its history."""
        product = self.get_owned_product(product_id)
        product.is_active = False
        try:
            self._product_repo.update(product)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        logger.info("Supplier {} deactivated product {}", product.supplier_id, product.id)

    # Company side

    def list_catalog(
        self, category: str | None = None, search: str | None = None
    ) -> list[CatalogProductOut]:
        products = self._product_repo.list_visible(category=category, search=search)
        product_ids = [p.id for p in products]
        defaults = self._default_repo.get_active_for_products(product_ids)
        privates = self._private_repo.get_active_for_company(self._tenant_id, product_ids)

        return [
            self._catalog_entry(product, defaults.get(product.id), privates.get(product.id))
            for product in products
        ]

    def get_catalog_product(self, product_id: str) -> CatalogProductOut:
        """One product with the caller's price; the read is recorded as a price view."""
        product = self._product_repo.get_visible(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")

        entry = self._catalog_entry(
            product,
            self._default_repo.get_active(product.id),
            self._private_repo.get_active(product.id, self._tenant_id),
        )
        try:
            self._view_repo.create(
                PriceView(
                    product_id=product.id,
                    company_id=self._tenant_id,
                    user_id=self._caller.user_id,
                )
            )
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        return entry

    @staticmethod
    def _catalog_entry(
        product: Product,
        default_price: DefaultPrice | None,
        private_price: PrivatePrice | None,
    ) -> CatalogProductOut:
        effective = resolve_effective_price(default_price, private_price)
        return CatalogProductOut(
            **ProductOut.model_validate(product).model_dump(),
            price=(
                EffectivePriceOut(
                    price=effective.price,
                    currency=effective.currency,
                    price_type=effective.price_type,
                )
                if effective
                else None
            ),
        )
