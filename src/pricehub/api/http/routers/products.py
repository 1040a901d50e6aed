"""Product catalogue endpoints.

Suppliers manage their own products; companies browse the catalogue of
every active supplier with the price that applies to them.
"""

from fastapi import APIRouter, Depends, Query, status

from src.pricehub.api.http.deps import (
    authenticate,
    get_product_service,
    require_permission,
    require_tenant_type,
)
from src.pricehub.core.models.catalog import (
    CatalogProductOut,
    ProductInput,
    ProductOut,
    ProductUpdateInput,
    SupplierProductOut,
)
from src.pricehub.core.services import ProductService

router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(authenticate)],
)

supplier_only = Depends(require_tenant_type("supplier"))
company_only = Depends(require_tenant_type("company"))


@router.post(
    "",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[supplier_only, Depends(require_permission("products", "create"))],
)
def create_product(
    data: ProductInput,
    service: ProductService = Depends(get_product_service),
) -> ProductOut:
    return service.create_product(data)


@router.get(
    "/mine",
    response_model=list[SupplierProductOut],
    dependencies=[supplier_only],
)
def list_my_products(
    service: ProductService = Depends(get_product_service),
) -> list[SupplierProductOut]:
    """The supplier's products, including inactive ones, with their default price."""
    return service.list_supplier_products()


@router.put(
    "/{product_id}",
    response_model=ProductOut,
    dependencies=[supplier_only, Depends(require_permission("products", "update"))],
)
def update_product(
    product_id: str,
    data: ProductUpdateInput,
    service: ProductService = Depends(get_product_service),
) -> ProductOut:
    return service.update_product(product_id, data)


@router.delete(
    "/{product_id}",
    dependencies=[supplier_only, Depends(require_permission("products", "delete"))],
)
def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> dict[str, str]:
    service.delete_product(product_id)
    return {"message": "Product deleted successfully"}


@router.get(
    "",
    response_model=list[CatalogProductOut],
    dependencies=[company_only],
)
def list_catalog(
    category: str | None = Query(default=None, max_length=100),
    search: str | None = Query(default=None, max_length=100),
    service: ProductService = Depends(get_product_service),
) -> list[CatalogProductOut]:
    return service.list_catalog(category=category, search=search)


@router.get(
    "/{product_id}",
    response_model=CatalogProductOut,
    dependencies=[company_only],
)
def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> CatalogProductOut:
    return service.get_catalog_product(product_id)
